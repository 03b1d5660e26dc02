# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the acc8 lexer/tokenizer.
#
# Test coverage includes:
#   - Keywords, identifiers, integer literals
#   - Operators (including '==' vs '=') and punctuation
#   - Comments and whitespace handling
#   - Position tracking
#   - Laziness, restartability and totality over the lexical classes
#   - Error conditions
# =============================================================================

import random

import pytest
from acc8.compiler.lexer import Lexer, Token, TokenKind, tokenize
from acc8.compiler.errors import LexError


# =============================================================================
# Helper Function
# =============================================================================

def lex(source: str) -> list[Token]:
    """Tokenize and drop the trailing EOF token."""
    tokens = list(Lexer(source, "<test>").tokenize())
    assert tokens[-1].kind == TokenKind.EOF
    return tokens[:-1]


def kinds_and_lexemes(source: str) -> list[tuple[TokenKind, str]]:
    return [(t.kind, t.lexeme) for t in lex(source)]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        """Empty source produces only the EOF token."""
        tokens = list(Lexer("").tokenize())
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.EOF

    def test_whitespace_only(self):
        tokens = list(Lexer("  \n\t \r\n ").tokenize())
        assert [t.kind for t in tokens] == [TokenKind.EOF]

    def test_keywords(self):
        assert kinds_and_lexemes("VAR IF ELSE") == [
            (TokenKind.KEYWORD, "VAR"),
            (TokenKind.KEYWORD, "IF"),
            (TokenKind.KEYWORD, "ELSE"),
        ]

    def test_keywords_are_case_sensitive(self):
        """Lowercase spellings are ordinary identifiers."""
        assert kinds_and_lexemes("var If else") == [
            (TokenKind.IDENTIFIER, "var"),
            (TokenKind.IDENTIFIER, "If"),
            (TokenKind.IDENTIFIER, "else"),
        ]

    def test_identifiers(self):
        for name in ["a", "result", "x1", "Counter42"]:
            assert kinds_and_lexemes(name) == [(TokenKind.IDENTIFIER, name)]

    def test_keyword_prefix_is_identifier(self):
        assert kinds_and_lexemes("VARIABLE") == [(TokenKind.IDENTIFIER, "VARIABLE")]

    def test_integer_literals(self):
        tokens = lex("0 7 255 1000")
        assert [t.kind for t in tokens] == [TokenKind.INTEGER_LITERAL] * 4
        assert [t.value for t in tokens] == [0, 7, 255, 1000]

    def test_integer_followed_by_letters(self):
        """Digits end at the first letter; the rest is an identifier."""
        assert kinds_and_lexemes("12ab") == [
            (TokenKind.INTEGER_LITERAL, "12"),
            (TokenKind.IDENTIFIER, "ab"),
        ]


# =============================================================================
# Operators and Punctuation
# =============================================================================

class TestOperators:

    def test_all_operators(self):
        assert kinds_and_lexemes("+ - = == > <") == [
            (TokenKind.OPERATOR, "+"),
            (TokenKind.OPERATOR, "-"),
            (TokenKind.OPERATOR, "="),
            (TokenKind.OPERATOR, "=="),
            (TokenKind.OPERATOR, ">"),
            (TokenKind.OPERATOR, "<"),
        ]

    def test_double_equals_without_spaces(self):
        assert kinds_and_lexemes("a==b") == [
            (TokenKind.IDENTIFIER, "a"),
            (TokenKind.OPERATOR, "=="),
            (TokenKind.IDENTIFIER, "b"),
        ]

    def test_triple_equals(self):
        """'===' is '==' followed by '='."""
        assert [t.lexeme for t in lex("===")] == ["==", "="]

    def test_separated_equals(self):
        assert [t.lexeme for t in lex("= =")] == ["=", "="]

    def test_punctuation(self):
        assert kinds_and_lexemes("; { } ( )") == [
            (TokenKind.PUNCTUATION, ";"),
            (TokenKind.PUNCTUATION, "{"),
            (TokenKind.PUNCTUATION, "}"),
            (TokenKind.PUNCTUATION, "("),
            (TokenKind.PUNCTUATION, ")"),
        ]

    def test_statement(self):
        assert kinds_and_lexemes("result=a+b;") == [
            (TokenKind.IDENTIFIER, "result"),
            (TokenKind.OPERATOR, "="),
            (TokenKind.IDENTIFIER, "a"),
            (TokenKind.OPERATOR, "+"),
            (TokenKind.IDENTIFIER, "b"),
            (TokenKind.PUNCTUATION, ";"),
        ]


# =============================================================================
# Comments
# =============================================================================

class TestComments:

    def test_line_comment(self):
        assert [t.lexeme for t in lex("// nothing here\nVAR")] == ["VAR"]

    def test_line_comment_at_end_of_input(self):
        assert [t.lexeme for t in lex("a // trailing")] == ["a"]

    def test_block_comment(self):
        assert [t.lexeme for t in lex("a /* one\ntwo */ b")] == ["a", "b"]

    def test_block_comment_without_spaces(self):
        assert [t.lexeme for t in lex("a/**/b")] == ["a", "b"]

    def test_unterminated_block_comment(self):
        with pytest.raises(LexError) as exc_info:
            list(Lexer("a /* never closed").tokenize())
        assert exc_info.value.location.line == 1
        assert exc_info.value.location.column == 3
        assert "unterminated comment" in str(exc_info.value)


# =============================================================================
# Position Tracking
# =============================================================================

class TestPositions:

    def test_single_line_positions(self):
        tokens = list(Lexer("VAR a = 5;").tokenize())
        assert [t.position for t in tokens] == [
            (1, 1), (1, 5), (1, 7), (1, 9), (1, 10), (1, 11),
        ]

    def test_multi_line_positions(self):
        tokens = lex("VAR a = 1;\n  b = 2;")
        b = tokens[5]
        assert b.lexeme == "b"
        assert b.position == (2, 3)

    def test_location_carries_filename(self):
        token = next(Lexer("a", "prog.src").tokenize())
        assert str(token.location) == "prog.src:1:1"

    def test_eof_position(self):
        tokens = list(Lexer("a\n").tokenize())
        assert tokens[-1].position == (2, 1)


# =============================================================================
# Errors
# =============================================================================

class TestLexErrors:

    @pytest.mark.parametrize("char", ["*", "/", "!", "$", "_", "@", "é"])
    def test_unexpected_character(self, char):
        with pytest.raises(LexError) as exc_info:
            list(Lexer(f"a {char} b").tokenize())
        assert exc_info.value.character == char
        assert exc_info.value.location.column == 3

    def test_error_position(self):
        with pytest.raises(LexError) as exc_info:
            list(Lexer("VAR a = 5 * 2;", "prog.src").tokenize())
        error = exc_info.value
        assert error.character == "*"
        assert (error.location.line, error.location.column) == (1, 11)
        assert str(error).startswith("prog.src:1:11: error: unexpected character '*'")


# =============================================================================
# Stream Properties
# =============================================================================

class TestStreamProperties:

    def test_tokenize_is_lazy(self):
        """Tokens before an invalid character are produced before the error."""
        stream = Lexer("VAR a = 1; $").tokenize()
        assert next(stream).lexeme == "VAR"
        with pytest.raises(LexError):
            list(stream)

    def test_restartable(self):
        lexer = Lexer("VAR a = 1;\nIF a > 0 { a = a - 1; }")
        first = list(lexer.tokenize())
        second = list(lexer.tokenize())
        assert first == second

    def test_restart_after_partial_iteration(self):
        lexer = Lexer("VAR a = 1;")
        stream = lexer.tokenize()
        next(stream)
        next(stream)
        assert list(lexer.tokenize()) == list(Lexer("VAR a = 1;").tokenize())

    def test_interleaved_streams_are_independent(self):
        """A second stream started mid-way does not disturb the first."""
        lexer = Lexer("VAR a = 1;")
        first = lexer.tokenize()
        assert next(first).lexeme == "VAR"

        assert [t.lexeme for t in lexer.tokenize()] == ["VAR", "a", "=", "1", ";", ""]
        assert [t.lexeme for t in first] == ["a", "=", "1", ";", ""]

    def test_alternating_streams(self):
        lexer = Lexer("IF a > b { }")
        left = lexer.tokenize()
        right = lexer.tokenize()
        pairs = list(zip(left, right))
        assert all(a == b for a, b in pairs)
        assert pairs[-1][0].kind == TokenKind.EOF

    def test_single_eof(self):
        tokens = list(tokenize("a b c"))
        assert [t.kind for t in tokens].count(TokenKind.EOF) == 1

    def test_total_and_idempotent_over_lexical_classes(self):
        """Any mix of valid lexemes lexes without error, identically twice."""
        pieces = [
            "VAR", "IF", "ELSE", "abc", "x1", "Z", "42", "0", "255",
            "+", "-", "=", "==", ">", "<", ";", "{", "}", "(", ")",
            "// note\n", "/* block */", "\n", "\t",
        ]
        rng = random.Random(1234)
        for _ in range(200):
            source = " ".join(rng.choice(pieces) for _ in range(rng.randint(0, 30)))
            first = list(tokenize(source))
            second = list(tokenize(source))
            assert first == second
            assert first[-1].kind == TokenKind.EOF

    def test_tokens_are_immutable(self):
        token = lex("a")[0]
        with pytest.raises(AttributeError):
            token.lexeme = "b"
