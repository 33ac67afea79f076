"""
Ember Programming Language Parser
Recursive descent over the token stream with panic-mode error recovery
"""

from typing import Dict, List

from ast_nodes import (
    Assign, Binary, Expr, ExpressionStmt, Grouping, LetStmt, Literal, PrintStmt,
    Stmt, Unary, Variable,
)
from error_handling import EmberParseError, describe_lexeme, make_parse_error
from lexing import Token, TokenKind, tokenize_source
from stdlib import FALSE, NULL, TRUE


DEFAULT_MAX_DEPTH = 50

# Tokens that start a statement; synchronization stops in front of them
STATEMENT_KEYWORDS = frozenset({
    TokenKind.CLASS, TokenKind.FN, TokenKind.LET, TokenKind.FOR,
    TokenKind.IF, TokenKind.WHILE, TokenKind.PRINT, TokenKind.RETURN,
})

KEYWORD_LITERALS = {
    TokenKind.TRUE: TRUE,
    TokenKind.FALSE: FALSE,
    TokenKind.NULL: NULL,
}


class SyntaxFailure(Exception):
    """Unwinds the parser out of a single malformed declaration"""
    def __init__(self, error: Dict):
        self.error = error
        super().__init__(error['message'])


class Parser:
    """Ember parser producing statements from a token list"""

    def __init__(self, tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH, debug: bool = False):
        if not tokens or tokens[-1].kind is not TokenKind.EOF:
            tokens = list(tokens) + [Token(TokenKind.EOF, "", None, tokens[-1].line if tokens else 1)]
        self.tokens = tokens
        self.current = 0
        self.max_depth = max_depth
        self.debug = debug
        self.errors: List[Dict] = []
        self._depth = 0

    def parse(self) -> List[Stmt]:
        """Parse a complete program; raises EmberParseError listing every syntax error"""
        statements = []
        self.errors = []

        while not self.is_at_end():
            try:
                statements.append(self.declaration())
            except SyntaxFailure as failure:
                self.errors.append(failure.error)
                if self.debug:
                    print(f"Syntax error: {failure.error['message']} (line {failure.error['line']})")
                self.synchronize()

        if self.debug:
            print(f"Parsed {len(statements)} statements with {len(self.errors)} errors")

        if self.errors:
            raise EmberParseError(self.errors)
        return statements

    def parse_expression(self) -> Expr:
        """Parse a single expression that must span the whole token stream"""
        try:
            expr = self.expression()
            if not self.is_at_end():
                raise self.error(self.peek(), "Expected end of expression")
        except SyntaxFailure as failure:
            raise EmberParseError([failure.error])
        return expr

    # ========================================================================
    # DECLARATIONS AND STATEMENTS
    # ========================================================================

    def declaration(self) -> Stmt:
        if self.match_token(TokenKind.LET):
            return self.let_declaration()
        return self.statement()

    def let_declaration(self) -> Stmt:
        name = self.consume(TokenKind.IDENTIFIER, "Expected variable name")

        initializer: Expr = Literal(NULL)
        if self.match_token(TokenKind.EQUAL):
            initializer = self.expression()

        self.consume(TokenKind.SEMICOLON, "Expected ';' after variable declaration")
        return LetStmt(name, initializer)

    def statement(self) -> Stmt:
        if self.match_token(TokenKind.PRINT):
            return self.print_statement()
        return self.expression_statement()

    def print_statement(self) -> Stmt:
        value = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expected ';' after value")
        return PrintStmt(value)

    def expression_statement(self) -> Stmt:
        expr = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expected ';' after expression")
        return ExpressionStmt(expr)

    # ========================================================================
    # EXPRESSIONS (loosest binding first)
    # ========================================================================

    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.equality()

        if self.match_token(TokenKind.EQUAL):
            equals = self.previous()
            self._enter(equals)
            try:
                value = self.assignment()
            finally:
                self._depth -= 1

            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            raise self.error(equals, "Invalid assignment target")

        return expr

    def _binary_level(self, operand, *operators: TokenKind) -> Expr:
        expr = operand()
        while self.match_token(*operators):
            operator = self.previous()
            right = operand()
            expr = Binary(expr, operator, right)
        return expr

    def equality(self) -> Expr:
        return self._binary_level(self.comparison, TokenKind.BANG_EQUAL, TokenKind.EQUAL_EQUAL)

    def comparison(self) -> Expr:
        return self._binary_level(
            self.term,
            TokenKind.GREATER, TokenKind.GREATER_EQUAL, TokenKind.LESS, TokenKind.LESS_EQUAL,
        )

    def term(self) -> Expr:
        return self._binary_level(self.factor, TokenKind.MINUS, TokenKind.PLUS)

    def factor(self) -> Expr:
        return self._binary_level(self.unary, TokenKind.SLASH, TokenKind.STAR)

    def unary(self) -> Expr:
        if self.match_token(TokenKind.BANG, TokenKind.MINUS):
            operator = self.previous()
            self._enter(operator)
            try:
                right = self.unary()
            finally:
                self._depth -= 1
            return Unary(operator, right)
        return self.primary()

    def primary(self) -> Expr:
        token = self.peek()

        if token.kind in KEYWORD_LITERALS:
            self.advance()
            return Literal(KEYWORD_LITERALS[token.kind])

        if token.kind in (TokenKind.NUMBER, TokenKind.STRING):
            self.advance()
            return Literal(token.literal)

        if token.kind is TokenKind.IDENTIFIER:
            self.advance()
            return Variable(token)

        if token.kind is TokenKind.LEFT_PAREN:
            self.advance()
            self._enter(token)
            try:
                expr = self.expression()
            finally:
                self._depth -= 1
            self.consume(TokenKind.RIGHT_PAREN, "Expected ')' after expression")
            return Grouping(expr)

        raise self.error(token, "Expected expression")

    def _enter(self, token: Token) -> None:
        """Count one level of nesting; deep input fails instead of exhausting the stack"""
        if self._depth >= self.max_depth:
            raise self.error(token, "Expression nesting too deep")
        self._depth += 1

    # ========================================================================
    # TOKEN PRIMITIVES
    # ========================================================================

    def match_token(self, *kinds: TokenKind) -> bool:
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def consume(self, kind: TokenKind, message: str) -> Token:
        if self.check(kind):
            return self.advance()
        raise self.error(self.peek(), message)

    def check(self, kind: TokenKind) -> bool:
        if self.is_at_end():
            return False
        return self.peek().kind is kind

    def advance(self) -> Token:
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().kind is TokenKind.EOF

    def peek(self) -> Token:
        return self.tokens[self.current]

    def previous(self) -> Token:
        return self.tokens[self.current - 1]

    def error(self, token: Token, message: str) -> SyntaxFailure:
        return SyntaxFailure(make_parse_error(message, token.line, token.column, describe_lexeme(token.lexeme)))

    def synchronize(self) -> None:
        """Discard tokens until a statement boundary"""
        self._depth = 0
        self.advance()

        while not self.is_at_end():
            if self.previous().kind is TokenKind.SEMICOLON:
                return
            if self.peek().kind in STATEMENT_KEYWORDS:
                return
            self.advance()


# Factory functions for creating parsers
def create_parser(tokens: List[Token], debug: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> Parser:
    """Create an Ember parser"""
    return Parser(tokens, max_depth=max_depth, debug=debug)


def create_debug_parser(tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH) -> Parser:
    """Create an Ember parser with debug enabled"""
    return Parser(tokens, max_depth=max_depth, debug=True)


def parse_source(text: str, filename: str = "<input>", debug: bool = False,
                 max_depth: int = DEFAULT_MAX_DEPTH) -> List[Stmt]:
    """Tokenize and parse Ember source code"""
    return create_parser(tokenize_source(text, filename), debug, max_depth).parse()


def parse_expression_source(text: str, filename: str = "<input>",
                            max_depth: int = DEFAULT_MAX_DEPTH) -> Expr:
    """Tokenize and parse a single Ember expression"""
    return create_parser(tokenize_source(text, filename), max_depth=max_depth).parse_expression()
