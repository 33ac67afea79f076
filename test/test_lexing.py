"""
Tokenizer tests for Ember
"""

import pytest
from error_handling import EmberTokenizerError
from lexing import EmberTokenizer, Token, TokenKind, tokenize_source
from stdlib import make_number, make_text


def kinds(source):
  return [token.kind for token in tokenize_source(source)]


class TestTokenKinds:
  """Test token classification"""

  def test_empty_source_is_only_eof(self):
    tokens = tokenize_source("")
    assert len(tokens) == 1
    assert tokens[0].kind is TokenKind.EOF
    assert tokens[0].lexeme == ""

  def test_single_and_double_character_operators(self):
    assert kinds("( ) ; = == ! != < <= > >= + - * /") == [
        TokenKind.LEFT_PAREN, TokenKind.RIGHT_PAREN, TokenKind.SEMICOLON,
        TokenKind.EQUAL, TokenKind.EQUAL_EQUAL, TokenKind.BANG, TokenKind.BANG_EQUAL,
        TokenKind.LESS, TokenKind.LESS_EQUAL, TokenKind.GREATER, TokenKind.GREATER_EQUAL,
        TokenKind.PLUS, TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH,
        TokenKind.EOF,
    ]

  def test_operators_without_spaces(self):
    assert kinds("a<=b==c") == [
        TokenKind.IDENTIFIER, TokenKind.LESS_EQUAL, TokenKind.IDENTIFIER,
        TokenKind.EQUAL_EQUAL, TokenKind.IDENTIFIER, TokenKind.EOF,
    ]

  def test_keywords_and_identifiers(self):
    assert kinds("let print true false null letter _x1") == [
        TokenKind.LET, TokenKind.PRINT, TokenKind.TRUE, TokenKind.FALSE,
        TokenKind.NULL, TokenKind.IDENTIFIER, TokenKind.IDENTIFIER, TokenKind.EOF,
    ]

  def test_reserved_words(self):
    assert kinds("class fn for if while return") == [
        TokenKind.CLASS, TokenKind.FN, TokenKind.FOR, TokenKind.IF,
        TokenKind.WHILE, TokenKind.RETURN, TokenKind.EOF,
    ]


class TestLiterals:
  """Test literal values attached to tokens"""

  def test_number_literals(self):
    tokens = tokenize_source("42 3.25")
    assert tokens[0].literal == make_number(42)
    assert tokens[0].lexeme == "42"
    assert tokens[1].literal == make_number(3.25)

  def test_string_literal(self):
    token = tokenize_source('"hello world"')[0]
    assert token.kind is TokenKind.STRING
    assert token.lexeme == '"hello world"'
    assert token.literal == make_text("hello world")

  def test_escaped_quote_in_string(self):
    token = tokenize_source(r'"a\"b"')[0]
    assert token.literal == make_text('a"b')

  def test_non_literal_tokens_have_no_literal(self):
    token = tokenize_source("x")[0]
    assert token.literal is None


class TestPositions:
  """Test line numbers and spans"""

  def test_line_numbers(self):
    tokens = tokenize_source("let a = 1;\n\nprint a;")
    assert [t.line for t in tokens if t.kind is TokenKind.LET] == [1]
    assert [t.line for t in tokens if t.kind is TokenKind.PRINT] == [3]
    assert tokens[-1].kind is TokenKind.EOF
    assert tokens[-1].line == 3

  def test_span_columns(self):
    token = tokenize_source("let  answer = 42;")[1]
    assert token.lexeme == "answer"
    assert token.span.start_col == 6
    assert token.span.end_col == 12
    assert token.column == 6

  def test_eof_is_on_last_line_with_trailing_newline(self):
    tokens = tokenize_source("let a = 1;\nprint a;\n")
    assert tokens[-1].kind is TokenKind.EOF
    assert tokens[-1].line == 2

  def test_multiline_string_line_is_start_line(self):
    tokens = tokenize_source('"a\nb" x')
    assert tokens[0].line == 1
    assert tokens[1].line == 2

  def test_filename_in_span(self):
    token = EmberTokenizer("prog.ember").tokenize("x")[0]
    assert str(token.span) == "prog.ember:1:1-2"


class TestSkipping:
  """Test whitespace and comments"""

  def test_comments_are_ignored(self):
    assert kinds("1 // one\n// whole line\n2") == [
        TokenKind.NUMBER, TokenKind.NUMBER, TokenKind.EOF,
    ]

  def test_slash_is_still_an_operator(self):
    assert kinds("4 / 2") == [TokenKind.NUMBER, TokenKind.SLASH, TokenKind.NUMBER, TokenKind.EOF]

  def test_tabs_do_not_shift_lexemes(self):
    tokens = tokenize_source("\tlet\tx;")
    assert [t.lexeme for t in tokens[:-1]] == ["let", "x", ";"]


class TestErrors:
  """Test tokenizer errors"""

  def test_unexpected_character(self):
    with pytest.raises(EmberTokenizerError) as excinfo:
      tokenize_source("let x = 1;\nlet y = @;")
    assert excinfo.value.message == "Unexpected character '@'"
    assert excinfo.value.line == 2
    assert excinfo.value.column == 9

  def test_unterminated_string(self):
    with pytest.raises(EmberTokenizerError) as excinfo:
      tokenize_source('print "oops;')
    assert excinfo.value.message == "Unterminated string"


def test_token_is_immutable():
  token = Token(TokenKind.IDENTIFIER, "x", None, 1)
  with pytest.raises(AttributeError):
    token.lexeme = "y"
