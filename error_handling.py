"""
Error handling for the Ember language
Diagnostics are plain dictionaries; exceptions wrap them at the boundaries
"""

from typing import List, Optional, Dict, Any


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_parse_error(
    message: str,
    line: int = 0,
    column: int = 0,
    got: Optional[str] = None,
) -> Dict:
    """Create an immutable parse error structure"""
    return {
        'message': message,
        'line': line,
        'column': column,
        'got': got,
    }


def format_parse_error(error: Dict, filename: str = "<input>") -> str:
    """Format parse error as string"""
    error_msg = f"Parse error at {filename}:{error['line']}:{error['column']}:\n"
    error_msg += f"  {error['message']}\n"

    if error['got'] is not None:
        error_msg += f"  Got: {error['got']}\n"

    return error_msg


def describe_lexeme(lexeme: str) -> str:
    """Human readable form of the token found at an error location"""
    if not lexeme:
        return "end of input"
    return f"'{lexeme}'"


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 2) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * max(col_num - 1, 0)}^ Error here")

    return '\n'.join(context_parts)


# ============================================================================
# EXCEPTIONS
# ============================================================================

class EmberTokenizerError(Exception):
    """Raised by the tokenizer on input it cannot scan"""
    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(message)


class EmberParseError(Exception):
    """All syntax errors collected during one parse, in encounter order"""
    def __init__(self, errors: List[Dict]):
        self.errors = list(errors)
        self.message = "\n".join(error['message'] for error in self.errors)
        super().__init__(self.message)

    @property
    def messages(self) -> List[str]:
        return [error['message'] for error in self.errors]

    def format(self, source_text: Optional[str] = None, filename: str = "<input>") -> str:
        """Render every diagnostic with its location and, given the source, context lines"""
        parts = []
        for error in self.errors:
            block = format_parse_error(error, filename)
            if source_text and error['line']:
                block += get_context_lines(source_text, error['line'], error['column']) + "\n"
            parts.append(block)
        return "\n".join(parts)


class EmberRuntimeError(Exception):
    """Evaluation fault; stops the run at the failing statement"""
    def __init__(self, message: str, token: Optional[Any] = None):
        self.message = message
        self.token = token
        super().__init__(message)

    @property
    def line(self) -> Optional[int]:
        return self.token.line if self.token is not None else None

    def __str__(self) -> str:
        return self.message
