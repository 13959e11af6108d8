import enum
import io
import logging
import re
import string
from dataclasses import dataclass

from rdcalc.source import CharSource
from rdcalc.utils import CalcError, PrintableEnum, caret_line

logger = logging.getLogger(__name__)


@dataclass
class BadToken(CalcError):
    char: str
    line: int
    column: int
    line_text: str

    def __str__(self) -> str:
        return "\n".join(
            [
                f"[Tokenizer error] {self.errmsg} at line {self.line}, column {self.column + 1}",
                caret_line(self.line_text, self.column),
            ]
        )


@dataclass
class InvalidPushback(CalcError):
    buffered: "Token"
    rejected: "Token"

    def __str__(self) -> str:
        return f"[Tokenizer error] {self.errmsg}: holding {self.buffered}, got {self.rejected}"


class TokenKind(PrintableEnum):
    PRINT = enum.auto()
    QUIT = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()
    BRACE_OPEN = enum.auto()
    BRACE_CLOSE = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    STAR = enum.auto()
    SLASH = enum.auto()
    PERCENT = enum.auto()
    BANG = enum.auto()
    NUMBER = enum.auto()
    END = enum.auto()


SINGLE_CHAR_TOKENS = {
    ";": TokenKind.PRINT,
    "q": TokenKind.QUIT,
    "(": TokenKind.BRACKET_OPEN,
    ")": TokenKind.BRACKET_CLOSE,
    "{": TokenKind.BRACE_OPEN,
    "}": TokenKind.BRACE_CLOSE,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "!": TokenKind.BANG,
}

TOKEN_CHARS = {kind: char for char, kind in SINGLE_CHAR_TOKENS.items()}

DIGITS = frozenset(string.digits)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: float | None = None  # only set for NUMBER

    @property
    def lexeme(self) -> str:
        if self.kind is TokenKind.NUMBER:
            return repr(self.value)
        return TOKEN_CHARS.get(self.kind, "")

    def __str__(self) -> str:
        return f"<{self.kind}>{self.lexeme}"


class TokenStream:
    """Reads tokens from a ``CharSource``, with room to put one token back.

    The grammar peeks at the next token by calling ``get`` and returning it
    with ``putback`` when it belongs to an outer level. Only one token fits in
    the buffer: a second ``putback`` without a ``get`` in between raises
    ``InvalidPushback``.
    """

    def __init__(self, source: CharSource) -> None:
        self._source = source
        self._full = False
        self._buffer = Token(TokenKind.END)

    @classmethod
    def from_string(cls, code: str) -> "TokenStream":
        return cls(CharSource(io.StringIO(code)))

    @property
    def full(self) -> bool:
        return self._full

    def putback(self, token: Token) -> None:
        if self._full:
            raise InvalidPushback(
                "putback() into a full buffer", buffered=self._buffer, rejected=token
            )
        self._buffer = token
        self._full = True

    def get(self) -> Token:
        if self._full:
            self._full = False
            return self._buffer

        ch = self._source.read_nonspace()
        if not ch:
            token = Token(TokenKind.END)
        elif ch in SINGLE_CHAR_TOKENS:
            token = Token(SINGLE_CHAR_TOKENS[ch])
        elif ch in DIGITS or ch == ".":
            self._source.unread(ch)
            token = self._read_number()
        else:
            self._source.unread(ch)
            raise self._bad_token(f"Bad token {ch!r}", ch)
        logger.debug("Read token %s", token)
        return token

    def _read_number(self) -> Token:
        """Longest decimal floating-point literal at the current position"""
        text = self._read_digits()
        if self._source.peek() == ".":
            text += self._source.read() + self._read_digits()
        if not any(c in DIGITS for c in text):
            self._source.unread(".")
            raise self._bad_token("Malformed number literal '.'", ".")

        if self._source.peek() in ("e", "E"):
            marker = self._source.read()
            sign = self._source.read() if self._source.peek() in ("+", "-") else ""
            if self._source.peek() in DIGITS:
                text += marker + sign + self._read_digits()
            else:
                # not an exponent after all
                self._source.unread(sign)
                self._source.unread(marker)
        return Token(TokenKind.NUMBER, float(text))

    def _read_digits(self) -> str:
        digits = []
        while self._source.peek() in DIGITS:
            digits.append(self._source.read())
        return "".join(digits)

    def _bad_token(self, errmsg: str, ch: str) -> BadToken:
        return BadToken(
            errmsg,
            char=ch,
            line=self._source.line,
            column=self._source.column,
            line_text=self._source.line_text + ch,
        )


def tokenize(code: str) -> list[Token]:
    """All tokens of ``code`` up to, not including, the END token"""
    stream = TokenStream.from_string(code)
    tokens: list[Token] = []
    while True:
        token = stream.get()
        if token.kind is TokenKind.END:
            return tokens
        tokens.append(token)


def untokenize(tokens: list[Token]) -> str:
    result = " ".join(t.lexeme for t in tokens)

    result = re.sub(r"\s+;", ";", result)

    # ( 1 + 2 ) => (1 + 2)
    result = re.sub(r"([({])\s+", r"\1", result)
    result = re.sub(r"\s+([)}])", r"\1", result)

    # 5 ! => 5!
    result = re.sub(r"\s+!", "!", result)
    return result
