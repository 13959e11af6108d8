"""Recursive-descent evaluation of the calculator grammar.

    expression := term (("+" | "-") term)*
    term       := primary (("*" | "/" | "%") primary)*
    primary    := number ["!"]
                | "(" expression ")"
                | "{" expression "}"
                | ("-" | "+") primary

Each level reads the token after its operand and puts it back when the token
belongs to an outer level, so the token stream never holds more than one
pushed-back token. Values are computed while parsing, no tree is built.

Recursion only happens through groups and unary signs. ``Evaluator`` counts
``primary`` levels and gives up with ``NestingTooDeep`` past ``max_depth``,
well before the interpreter's own recursion limit.
"""
import logging
import math
from dataclasses import dataclass
from typing import cast

from rdcalc import config
from rdcalc.tokenizer import TOKEN_CHARS, Token, TokenKind, TokenStream
from rdcalc.utils import CalcError

logger = logging.getLogger(__name__)

# 171! no longer fits in a double
FACTORIAL_LIMIT = 171


@dataclass
class EvaluatorError(CalcError):
    def __str__(self) -> str:
        return f"[Evaluator error] {self.errmsg}"


@dataclass
class PrimaryExpected(EvaluatorError):
    found: Token


@dataclass
class MismatchedDelimiter(EvaluatorError):
    expected: TokenKind
    found: Token


@dataclass
class DivisionByZero(EvaluatorError):
    pass


@dataclass
class ModuloByZero(EvaluatorError):
    pass


@dataclass
class NegativeFactorial(EvaluatorError):
    operand: float


@dataclass
class NestingTooDeep(EvaluatorError):
    max_depth: int


MATCHING_CLOSER = {
    TokenKind.BRACKET_OPEN: TokenKind.BRACKET_CLOSE,
    TokenKind.BRACE_OPEN: TokenKind.BRACE_CLOSE,
}


def describe(token: Token) -> str:
    if token.kind is TokenKind.END:
        return "end of input"
    return repr(token.lexeme)


def factorial(value: float) -> float:
    """``value`` truncated toward zero, then n! as a float"""
    if math.isnan(value):
        return value
    n = math.trunc(value) if math.isfinite(value) else value
    if n < 0:
        raise NegativeFactorial(f"Factorial of a negative number is undefined: {value:g}!", operand=value)
    if n >= FACTORIAL_LIMIT:
        return math.inf
    return float(math.factorial(int(n)))


class Evaluator:
    def __init__(self, ts: TokenStream, max_depth: int = config.MAX_DEPTH) -> None:
        self.ts = ts
        self.max_depth = max_depth
        self._depth = 0

    def expression(self) -> float:
        """Deal with + and -"""
        left = self.term()
        t = self.ts.get()
        while True:
            if t.kind is TokenKind.PLUS:
                left += self.term()
            elif t.kind is TokenKind.MINUS:
                left -= self.term()
            else:
                self.ts.putback(t)
                return left
            t = self.ts.get()

    def term(self) -> float:
        """Deal with *, / and %"""
        left = self.primary()
        t = self.ts.get()
        while True:
            if t.kind is TokenKind.STAR:
                left *= self.primary()
            elif t.kind is TokenKind.SLASH:
                d = self.primary()
                if d == 0:
                    raise DivisionByZero(f"Division by zero: {left:g} / {d:g}")
                left /= d
            elif t.kind is TokenKind.PERCENT:
                d = self.primary()
                if d == 0:
                    raise ModuloByZero(f"Modulo by zero: {left:g} % {d:g}")
                # math.fmod raises for an infinite dividend where C's fmod gives nan
                left = math.nan if math.isinf(left) else math.fmod(left, d)
            else:
                self.ts.putback(t)
                return left
            t = self.ts.get()

    def primary(self) -> float:
        """Deal with numbers, groups and unary signs"""
        if self._depth >= self.max_depth:
            raise NestingTooDeep(f"Expression nested deeper than {self.max_depth} levels", max_depth=self.max_depth)
        self._depth += 1
        try:
            return self._primary()
        finally:
            self._depth -= 1

    def _primary(self) -> float:
        t = self.ts.get()
        if t.kind is TokenKind.NUMBER:
            value = cast(float, t.value)
            after = self.ts.get()
            if after.kind is TokenKind.BANG:
                result = factorial(value)
                logger.debug("%r! = %r", value, result)
                return result
            self.ts.putback(after)
            return value
        elif t.kind in MATCHING_CLOSER:
            d = self.expression()
            closer = self.ts.get()
            expected = MATCHING_CLOSER[t.kind]
            if closer.kind is not expected:
                raise MismatchedDelimiter(
                    f"'{TOKEN_CHARS[expected]}' expected, found {describe(closer)}",
                    expected=expected,
                    found=closer,
                )
            return d
        elif t.kind is TokenKind.MINUS:
            return -self.primary()
        elif t.kind is TokenKind.PLUS:
            return self.primary()
        else:
            raise PrimaryExpected(f"Primary expected, found {describe(t)}", found=t)
