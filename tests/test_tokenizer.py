import io
import logging

import pytest

from rdcalc.source import ChainedStream, CharSource
from rdcalc.tokenizer import BadToken, InvalidPushback, Token, TokenKind, TokenStream, tokenize, untokenize


def num(v: float) -> Token:
    return Token(TokenKind.NUMBER, v)


@pytest.mark.parametrize(
    "code, expected_tokens",
    [
        pytest.param("", []),
        pytest.param(" \t\n ", []),
        pytest.param("1+2", [num(1.0), Token(TokenKind.PLUS), num(2.0)]),
        pytest.param(
            ";q(){}+-*/%!",
            [
                Token(TokenKind.PRINT),
                Token(TokenKind.QUIT),
                Token(TokenKind.BRACKET_OPEN),
                Token(TokenKind.BRACKET_CLOSE),
                Token(TokenKind.BRACE_OPEN),
                Token(TokenKind.BRACE_CLOSE),
                Token(TokenKind.PLUS),
                Token(TokenKind.MINUS),
                Token(TokenKind.STAR),
                Token(TokenKind.SLASH),
                Token(TokenKind.PERCENT),
                Token(TokenKind.BANG),
            ],
        ),
        pytest.param("\t 1 \n ;", [num(1.0), Token(TokenKind.PRINT)]),
        pytest.param("1.2.3", [num(1.2), num(0.3)]),
        pytest.param("1e5", [num(100000.0)]),
        pytest.param("2E-2", [num(0.02)]),
        pytest.param("5!", [num(5.0), Token(TokenKind.BANG)]),
    ],
)
def test_tokenize(code: str, expected_tokens: list[Token]) -> None:
    assert tokenize(code) == expected_tokens


def test_bad_token_position() -> None:
    with pytest.raises(BadToken) as exc_info:
        tokenize("1 +\n  x")
    error = exc_info.value
    assert error.char == "x"
    assert (error.line, error.column) == (2, 2)
    assert str(error).splitlines() == [
        "[Tokenizer error] Bad token 'x' at line 2, column 3",
        "  x",
        "  ^",
    ]


def test_bad_token_leaves_character_unread() -> None:
    source = CharSource(io.StringIO("  $1"))
    with pytest.raises(BadToken):
        TokenStream(source).get()
    assert source.read() == "$"
    assert source.read() == "1"


def test_exponent_marker_without_digits_is_left_unread() -> None:
    source = CharSource(io.StringIO("3e-x"))
    ts = TokenStream(source)
    assert ts.get() == num(3.0)
    assert source.read() == "e"
    assert source.read() == "-"


class CountingStringIO(io.StringIO):
    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.reads = 0

    def read(self, size: int | None = -1) -> str:
        self.reads += 1
        return super().read(size)


def test_putback_then_get_returns_same_token_without_reading() -> None:
    stream = CountingStringIO("12 + 3")
    ts = TokenStream(CharSource(stream))
    first = ts.get()
    reads_before = stream.reads

    ts.putback(first)
    assert ts.full
    assert ts.get() is first
    assert not ts.full
    assert stream.reads == reads_before

    assert ts.get() == Token(TokenKind.PLUS)


def test_second_putback_is_rejected() -> None:
    ts = TokenStream.from_string("")
    ts.putback(Token(TokenKind.PLUS))
    with pytest.raises(InvalidPushback) as exc_info:
        ts.putback(Token(TokenKind.MINUS))
    assert exc_info.value.buffered == Token(TokenKind.PLUS)
    assert exc_info.value.rejected == Token(TokenKind.MINUS)
    assert ts.get() == Token(TokenKind.PLUS)


def test_end_token_repeats_after_exhaustion() -> None:
    ts = TokenStream.from_string("1")
    assert ts.get() == num(1.0)
    assert ts.get().kind is TokenKind.END
    assert ts.get().kind is TokenKind.END


def test_token_str() -> None:
    assert str(Token(TokenKind.PLUS)) == "<PLUS>+"
    assert str(num(2.5)) == "<NUMBER>2.5"
    assert str(Token(TokenKind.END)) == "<END>"


def test_untokenize() -> None:
    assert untokenize(tokenize("( 1 + 2 ) * 3 !;")) == "(1.0 + 2.0) * 3.0!;"
    assert untokenize(tokenize("{ 4 % 2 }")) == "{4.0 % 2.0}"


def test_char_source_tracks_lines_across_unread() -> None:
    source = CharSource(io.StringIO("ab\ncd"))
    assert [source.read() for _ in range(4)] == ["a", "b", "\n", "c"]
    assert (source.line, source.column) == (2, 1)
    source.unread("c")
    source.unread("\n")
    assert (source.line, source.column, source.line_text) == (1, 2, "ab")
    assert source.read_nonspace() == "c"
    assert source.read() == "d"
    assert source.read() == ""
    assert source.read() == ""


def test_dangling_exponent_marker_is_a_bad_token() -> None:
    ts = TokenStream.from_string("1e+")
    assert ts.get() == num(1.0)
    with pytest.raises(BadToken) as exc_info:
        ts.get()
    assert exc_info.value.char == "e"


def test_token_reads_log_lazily(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="rdcalc.tokenizer"):
        tokenize("2+")
    records = [r for r in caplog.records if r.name == "rdcalc.tokenizer"]
    assert {r.msg for r in records} == {"Read token %s"}
    assert [r.getMessage() for r in records] == ["Read token <NUMBER>2.0", "Read token <PLUS>+", "Read token <END>"]


def test_chained_stream_separates_sources() -> None:
    stream = ChainedStream([io.StringIO("1"), io.StringIO(""), io.StringIO("2")])
    source = CharSource(stream)
    assert tokenize_source(source) == [num(1.0), num(2.0)]


def tokenize_source(source: CharSource) -> list[Token]:
    ts = TokenStream(source)
    tokens = []
    while True:
        token = ts.get()
        if token.kind is TokenKind.END:
            return tokens
        tokens.append(token)
