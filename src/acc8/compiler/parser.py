"""
acc8 Recursive Descent Parser
=============================

This module implements a predictive (single-token lookahead) recursive
descent parser. It consumes the token stream from the lexer and builds
an Abstract Syntax Tree (AST). Each grammar rule maps to one _parse_*
method.

Grammar (EBNF)
--------------
program     ::= statement* EOF
statement   ::= var_decl | assignment | if_stmt
var_decl    ::= 'VAR' IDENTIFIER '=' expr ';'
assignment  ::= IDENTIFIER '=' expr ';'
if_stmt     ::= 'IF' comparison block ('ELSE' block)?
block       ::= '{' statement* '}'
comparison  ::= expr (('>' | '<' | '==') expr)?
expr        ::= term (('+' | '-') term)*
term        ::= IDENTIFIER | INTEGER | '(' expr ')'

Comparisons are only allowed as IF conditions; they never nest inside
an arithmetic expression.

Error Handling
--------------
Parsing stops at the first mismatch with a ParseError listing what was
expected and what was found. There is no error recovery.

Example Usage
-------------
>>> from acc8.compiler.parser import parse_source
>>> program = parse_source("VAR a = 1; IF a > 0 { a = a - 1; }")
>>> len(program.statements)
2
"""

from typing import Iterable, Optional

from acc8.compiler.lexer import Lexer, Token, TokenKind
from acc8.compiler.errors import ParseError
from acc8.compiler.ast import (
    Program,
    Block,
    VarDecl,
    Assignment,
    IfStmt,
    BinaryExpr,
    BinaryOperator,
    Literal,
    VariableRef,
    Expr,
    Stmt,
)


ADDITIVE_OPERATORS = {
    "+": BinaryOperator.ADD,
    "-": BinaryOperator.SUBTRACT,
}

RELATIONAL_OPERATORS = {
    ">": BinaryOperator.GREATER,
    "<": BinaryOperator.LESS,
    "==": BinaryOperator.EQUAL,
}


class Parser:
    """
    Predictive recursive descent parser for acc8.

    Tokens are pulled one at a time from the (possibly lazy) token
    iterable; only the current token is buffered.

    Attributes:
        filename: Source filename for the Program node location
    """

    def __init__(self, tokens: Iterable[Token], filename: str = "<input>"):
        """
        Initialize the parser.

        Args:
            tokens: Token sequence ending with an EOF token
            filename: Source filename for locations
        """
        self.filename = filename
        self._tokens = iter(tokens)
        self._current: Optional[Token] = None
        self._advance()

    def parse(self) -> Program:
        """
        Parse the whole token stream.

        Returns:
            Program node containing all top-level statements

        Raises:
            ParseError: On the first token that does not fit the grammar
        """
        location = self._current.location
        statements = []

        while self._current.kind != TokenKind.EOF:
            statements.append(self._parse_statement())

        return Program(location=location, statements=statements)

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _advance(self) -> Token:
        """Consume the current token and return it."""
        previous = self._current
        if previous is None or previous.kind != TokenKind.EOF:
            self._current = next(self._tokens)
        return previous

    def _error(self, *expected: str) -> ParseError:
        token = self._current
        found = "end of input" if token.kind == TokenKind.EOF else f"'{token.lexeme}'"
        return ParseError(expected, found, token.location)

    def _expect_operator(self, symbol: str) -> Token:
        if not self._current.is_operator(symbol):
            raise self._error(f"'{symbol}'")
        return self._advance()

    def _expect_punctuation(self, symbol: str) -> Token:
        if not self._current.is_punctuation(symbol):
            raise self._error(f"'{symbol}'")
        return self._advance()

    def _expect_identifier(self) -> Token:
        if self._current.kind != TokenKind.IDENTIFIER:
            raise self._error("identifier")
        return self._advance()

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statement(self) -> Stmt:
        token = self._current

        if token.is_keyword("VAR"):
            return self._parse_var_decl()
        if token.is_keyword("IF"):
            return self._parse_if_statement()
        if token.kind == TokenKind.IDENTIFIER:
            return self._parse_assignment()

        raise self._error("'VAR'", "'IF'", "identifier")

    def _parse_var_decl(self) -> VarDecl:
        location = self._advance().location
        name = self._expect_identifier().lexeme
        self._expect_operator("=")
        initializer = self._parse_expression()
        self._expect_punctuation(";")
        return VarDecl(location=location, name=name, initializer=initializer)

    def _parse_assignment(self) -> Assignment:
        target = self._expect_identifier()
        self._expect_operator("=")
        value = self._parse_expression()
        self._expect_punctuation(";")
        return Assignment(location=target.location, target=target.lexeme, value=value)

    def _parse_if_statement(self) -> IfStmt:
        location = self._advance().location
        condition = self._parse_comparison()
        then_block = self._parse_block()

        else_block = None
        if self._current.is_keyword("ELSE"):
            self._advance()
            else_block = self._parse_block()

        return IfStmt(
            location=location,
            condition=condition,
            then_block=then_block,
            else_block=else_block,
        )

    def _parse_block(self) -> Block:
        location = self._expect_punctuation("{").location
        statements = []

        while not self._current.is_punctuation("}"):
            if self._current.kind == TokenKind.EOF:
                raise self._error("'}'")
            statements.append(self._parse_statement())

        self._advance()
        return Block(location=location, statements=statements)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_comparison(self) -> Expr:
        """Parse an IF condition: an expression, optionally compared."""
        left = self._parse_expression()

        token = self._current
        if token.kind == TokenKind.OPERATOR and token.lexeme in RELATIONAL_OPERATORS:
            self._advance()
            right = self._parse_expression()
            return BinaryExpr(
                location=left.location,
                operator=RELATIONAL_OPERATORS[token.lexeme],
                left=left,
                right=right,
            )

        return left

    def _parse_expression(self) -> Expr:
        """Parse a left-associative chain of + and - over terms."""
        expr = self._parse_term()

        while (self._current.kind == TokenKind.OPERATOR and
               self._current.lexeme in ADDITIVE_OPERATORS):
            op_token = self._advance()
            right = self._parse_term()
            expr = BinaryExpr(
                location=expr.location,
                operator=ADDITIVE_OPERATORS[op_token.lexeme],
                left=expr,
                right=right,
            )

        return expr

    def _parse_term(self) -> Expr:
        token = self._current

        if token.kind == TokenKind.INTEGER_LITERAL:
            self._advance()
            return Literal(location=token.location, value=token.value)

        if token.kind == TokenKind.IDENTIFIER:
            self._advance()
            return VariableRef(location=token.location, name=token.lexeme)

        if token.is_punctuation("("):
            self._advance()
            expr = self._parse_expression()
            self._expect_punctuation(")")
            return expr

        raise self._error("identifier", "integer", "'('")


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, filename: str = "<input>") -> Program:
    """
    Parse source text into an AST.

    Raises:
        LexError: If the source contains an invalid character
        ParseError: If the tokens do not fit the grammar
    """
    return Parser(Lexer(source, filename).tokenize(), filename).parse()
