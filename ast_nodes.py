"""
Ember abstract syntax tree
Expression and statement nodes produced by the parser, plus their renderings
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Union

from lexing import Token
from stdlib import EmberValue, NULL, show


class Expr:
    """Base class for expression nodes"""

    def __str__(self) -> str:
        return render(self)


class Stmt:
    """Base class for statement nodes"""

    def __str__(self) -> str:
        return render(self)


# ============================================================================
# EXPRESSIONS
# ============================================================================

@dataclass(frozen=True)
class Literal(Expr):
    value: EmberValue


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


# ============================================================================
# STATEMENTS
# ============================================================================

@dataclass(frozen=True)
class ExpressionStmt(Stmt):
    expression: Expr


@dataclass(frozen=True)
class PrintStmt(Stmt):
    expression: Expr


@dataclass(frozen=True)
class LetStmt(Stmt):
    name: Token
    initializer: Expr = Literal(NULL)


Node = Union[Expr, Stmt]


# ============================================================================
# RENDERING
# ============================================================================

def left_spine(node: Binary) -> List[Binary]:
    """Binary nodes along the left edge of a chain, outermost first

    Left-associative chains like 1 + 2 + 3 + ... grow one level per operator,
    so walkers fold over this list instead of recursing into `left`.
    """
    spine = []
    while isinstance(node, Binary):
        spine.append(node)
        node = node.left
    return spine


def parenthesize(name: str, *parts: Node) -> str:
    return "(" + " ".join([name] + [render(part) for part in parts]) + ")"


def _render_binary(node: Binary) -> str:
    spine = left_spine(node)
    text = render(spine[-1].left)
    for binary in reversed(spine):
        text = f"({binary.operator.lexeme} {text} {render(binary.right)})"
    return text


def render(node: Node) -> str:
    """Fully parenthesized prefix form, e.g. (+ 1 (* 2 3))"""
    if isinstance(node, Literal):
        return show(node.value)
    elif isinstance(node, Grouping):
        return parenthesize("group", node.expression)
    elif isinstance(node, Unary):
        return parenthesize(node.operator.lexeme, node.right)
    elif isinstance(node, Binary):
        return _render_binary(node)
    elif isinstance(node, Variable):
        return node.name.lexeme
    elif isinstance(node, Assign):
        return f"(= {node.name.lexeme} {render(node.value)})"
    elif isinstance(node, ExpressionStmt):
        return render(node.expression)
    elif isinstance(node, PrintStmt):
        return parenthesize("print", node.expression)
    elif isinstance(node, LetStmt):
        return f"(let {node.name.lexeme} {render(node.initializer)})"
    raise TypeError(f"Cannot render {type(node).__name__}")


def render_program(statements: List[Stmt]) -> str:
    return "\n".join(render(stmt) for stmt in statements)


def children(node: Node) -> List[Node]:
    """Direct sub-nodes, in evaluation order"""
    if isinstance(node, Grouping):
        return [node.expression]
    elif isinstance(node, Unary):
        return [node.right]
    elif isinstance(node, Binary):
        return [node.left, node.right]
    elif isinstance(node, Assign):
        return [node.value]
    elif isinstance(node, (ExpressionStmt, PrintStmt)):
        return [node.expression]
    elif isinstance(node, LetStmt):
        return [node.initializer]
    return []


def _label(node: Node) -> str:
    if isinstance(node, Literal):
        return f"{type(node).__name__}({show(node.value)})"
    elif isinstance(node, (Unary, Binary)):
        return f"{type(node).__name__}({node.operator.lexeme})"
    elif isinstance(node, (Variable, Assign, LetStmt)):
        return f"{type(node).__name__}({node.name.lexeme})"
    return type(node).__name__


def pretty_print_ast(node: Node, indent: int = 0) -> str:
    """Pretty print an AST node for debugging"""
    if isinstance(node, Binary):
        spine = left_spine(node)
        result = "".join("  " * (indent + i) + _label(binary) + "\n" for i, binary in enumerate(spine))
        result += pretty_print_ast(spine[-1].left, indent + len(spine))
        for i in reversed(range(len(spine))):
            result += pretty_print_ast(spine[i].right, indent + i + 1)
        return result

    result = "  " * indent + _label(node) + "\n"
    for child in children(node):
        result += pretty_print_ast(child, indent + 1)
    return result


def ast_to_dict(node: Node) -> Dict[str, Any]:
    """Convert AST to dictionary representation"""
    if isinstance(node, Binary):
        spine = left_spine(node)
        folded = ast_to_dict(spine[-1].left)
        for binary in reversed(spine):
            folded = {
                "type": "Binary",
                "operator": binary.operator.lexeme,
                "children": [folded, ast_to_dict(binary.right)],
            }
        return folded

    result: Dict[str, Any] = {"type": type(node).__name__}

    if isinstance(node, Literal):
        result["value"] = node.value.value
        result["value_type"] = node.value.type.value
    if isinstance(node, (Unary, Binary)):
        result["operator"] = node.operator.lexeme
    if isinstance(node, (Variable, Assign, LetStmt)):
        result["name"] = node.name.lexeme
        result["line"] = node.name.line

    result["children"] = [ast_to_dict(child) for child in children(node)]
    return result
