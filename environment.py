"""
Ember runtime environment
A single flat scope mapping variable names to values
"""

from typing import Dict, List, Optional, Union

from lexing import Token
from stdlib import EmberValue
from utilities import undefined_variable_error


NameLike = Union[Token, str]


def _split_name(name: NameLike):
  """Return (name string, token or None)"""
  if isinstance(name, Token):
    return name.lexeme, name
  return name, None


class Environment:
  """Mutable name -> value bindings for one interpreter run"""

  def __init__(self, bindings: Optional[Dict[str, EmberValue]] = None):
    self.bindings: Dict[str, EmberValue] = dict(bindings or {})

  def define(self, name: NameLike, value: EmberValue) -> None:
    """Bind name, overwriting any existing binding"""
    key, _ = _split_name(name)
    self.bindings[key] = value

  def get(self, name: NameLike) -> EmberValue:
    key, token = _split_name(name)
    if key in self.bindings:
      return self.bindings[key]
    raise undefined_variable_error(key, token)

  def assign(self, name: NameLike, value: EmberValue) -> None:
    """Update an existing binding; assignment never declares"""
    key, token = _split_name(name)
    if key not in self.bindings:
      raise undefined_variable_error(key, token)
    self.bindings[key] = value

  def names(self) -> List[str]:
    return list(self.bindings)

  def snapshot(self) -> Dict[str, EmberValue]:
    return dict(self.bindings)

  def __contains__(self, name: object) -> bool:
    return name in self.bindings

  def __len__(self) -> int:
    return len(self.bindings)

  def __repr__(self) -> str:
    return f"Environment({len(self.bindings)} bindings)"
