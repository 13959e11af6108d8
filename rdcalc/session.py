"""The statement loop: prompt, evaluate, print, until ``q`` or end of input.

The first error ends the session. ``calculate`` does not raise it, it
returns it in ``SessionResult.error`` next to the values computed so far, and
the caller picks the exit status from there.
"""
import logging
from dataclasses import dataclass, field
from typing import TextIO

from rdcalc import config
from rdcalc.evaluator import Evaluator
from rdcalc.tokenizer import TokenKind, TokenStream
from rdcalc.utils import CalcError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CALC_ERROR = 1
EXIT_UNKNOWN_ERROR = 2


@dataclass
class SessionResult:
    results: list[float] = field(default_factory=list)
    error: CalcError | None = None

    @property
    def exit_status(self) -> int:
        return EXIT_OK if self.error is None else EXIT_CALC_ERROR


def format_result(value: float, precision: int = config.PRECISION) -> str:
    return f"{value:.{precision}g}"


def calculate(
    ts: TokenStream,
    output: TextIO | None = None,
    prompt: str = config.PROMPT,
    result_marker: str = config.RESULT,
    precision: int = config.PRECISION,
    max_depth: int = config.MAX_DEPTH,
) -> SessionResult:
    evaluator = Evaluator(ts, max_depth=max_depth)
    session = SessionResult()
    logger.info("Session started")
    try:
        while True:
            if output is not None:
                output.write(prompt)
                output.flush()
            t = ts.get()
            while t.kind is TokenKind.PRINT:
                t = ts.get()
            if t.kind is TokenKind.QUIT or t.kind is TokenKind.END:
                break
            ts.putback(t)
            value = evaluator.expression()
            session.results.append(value)
            if output is not None:
                output.write(f"{result_marker}{format_result(value, precision)}\n")
    except CalcError as e:
        logger.info("Session aborted by %s: %s", type(e).__name__, e.errmsg)
        session.error = e
    logger.info("Session finished with %d result(s)", len(session.results))
    return session


def evaluate(code: str, max_depth: int = config.MAX_DEPTH) -> list[float]:
    """Values of every statement in ``code``, raising the first error"""
    session = calculate(TokenStream.from_string(code), max_depth=max_depth)
    if session.error is not None:
        raise session.error
    return session.results
