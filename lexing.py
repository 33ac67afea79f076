"""
Ember Tokenizer
Turns source text into a flat token list with source spans, using pyparsing
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from pyparsing import (
    MatchFirst, ParserElement, QuotedString, Regex, col, dbl_slash_comment,
    lineno, one_of
)

from error_handling import EmberTokenizerError
from stdlib import EmberValue, make_number, make_text


class TokenKind(Enum):
    # Punctuation and operators
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    SEMICOLON = ";"
    EQUAL = "="
    EQUAL_EQUAL = "=="
    BANG_EQUAL = "!="
    LESS = "<"
    LESS_EQUAL = "<="
    GREATER = ">"
    GREATER_EQUAL = ">="
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    BANG = "!"

    # Literals
    NUMBER = "NUMBER"
    STRING = "STRING"

    # Keywords
    LET = "let"
    PRINT = "print"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"

    # Reserved, only used to find statement boundaries after an error
    CLASS = "class"
    FN = "fn"
    FOR = "for"
    IF = "if"
    WHILE = "while"
    RETURN = "return"

    IDENTIFIER = "IDENTIFIER"
    EOF = "EOF"


OPERATORS = {kind.value: kind for kind in TokenKind if not kind.value.isalnum()}

KEYWORDS = {
    kind.value: kind for kind in (
        TokenKind.LET, TokenKind.PRINT, TokenKind.TRUE, TokenKind.FALSE, TokenKind.NULL,
        TokenKind.CLASS, TokenKind.FN, TokenKind.FOR, TokenKind.IF, TokenKind.WHILE,
        TokenKind.RETURN,
    )
}


@dataclass(frozen=True)
class SourceSpan:
    """Source location information for diagnostics"""
    filename: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    text: str = ""

    def __str__(self) -> str:
        if self.start_line == self.end_line:
            return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_col}"
        return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


@dataclass(frozen=True)
class Token:
    """Ember token with source information"""
    kind: TokenKind
    lexeme: str
    literal: Optional[EmberValue] = None
    line: int = 1
    span: Optional[SourceSpan] = None

    @property
    def column(self) -> int:
        return self.span.start_col if self.span else 0

    def __str__(self) -> str:
        if self.literal is not None:
            return f"{self.kind.name}({self.lexeme!r}, {self.literal.value!r})"
        return f"{self.kind.name}({self.lexeme!r})"


class EmberTokenizer:
    """Ember tokenizer built from pyparsing token patterns"""

    def __init__(self, filename: str = "<input>"):
        self.filename = filename
        self._setup_token_patterns()

    def _setup_token_patterns(self):
        """Setup all token patterns for Ember"""

        # Literals
        string_literal = QuotedString('"', esc_char='\\', multiline=True).set_parse_action(
            lambda t: (TokenKind.STRING, make_text(t[0]))
        )
        number = Regex(r'\d+(?:\.\d+)?').set_parse_action(
            lambda t: (TokenKind.NUMBER, make_number(t[0]))
        )

        # Identifiers and keywords share one pattern; keywords are looked up afterwards
        identifier = Regex(r'[A-Za-z_][A-Za-z0-9_]*').set_parse_action(
            lambda t: (KEYWORDS.get(t[0], TokenKind.IDENTIFIER), None)
        )

        # one_of reorders so that '==' wins over '='
        operator = one_of(list(OPERATORS)).set_parse_action(
            lambda t: (OPERATORS[t[0]], None)
        )

        # Anything else is a single offending character
        unknown = Regex(r'\S').set_parse_action(lambda t: (None, None))

        self.token_pattern: ParserElement = MatchFirst(
            [string_literal, number, identifier, operator, unknown]
        )
        self.token_pattern.ignore(dbl_slash_comment)
        self.token_pattern.parse_with_tabs()

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize Ember source code, ending with a single EOF token"""
        tokens = []

        for result, start, end in self.token_pattern.scan_string(text):
            kind, literal = result[0]
            lexeme = text[start:end]
            line = lineno(start, text)
            column = col(start, text)

            if kind is None:
                if lexeme == '"':
                    raise EmberTokenizerError("Unterminated string", line, column)
                raise EmberTokenizerError(f"Unexpected character '{lexeme}'", line, column)

            tokens.append(Token(kind, lexeme, literal, line, self._make_span(text, start, end, lexeme)))

        last_line = text.rstrip('\n').count('\n') + 1
        tokens.append(Token(TokenKind.EOF, "", None, last_line,
                            SourceSpan(self.filename, last_line, 1, last_line, 1, "")))
        return tokens

    def _make_span(self, text: str, start: int, end: int, lexeme: str) -> SourceSpan:
        end_line, end_col = self._position(text, end)
        return SourceSpan(self.filename, lineno(start, text), col(start, text), end_line, end_col, lexeme)

    @staticmethod
    def _position(text: str, loc: int) -> Tuple[int, int]:
        """(line, column) of a location, allowing loc == len(text)"""
        line = text.count('\n', 0, loc) + 1
        column = loc - text.rfind('\n', 0, loc)
        return line, column


def tokenize_source(text: str, filename: str = "<input>") -> List[Token]:
    """Tokenize Ember source code"""
    return EmberTokenizer(filename).tokenize(text)


def describe_token(token: Token) -> str:
    """Short description used by the --tokens listing"""
    return f"{token.line:4d}  {token.kind.name:<14} {token.lexeme!r}" + (
        f"  {token.literal.value!r}" if token.literal is not None else ""
    )

