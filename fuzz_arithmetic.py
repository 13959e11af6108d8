"""Differential fuzzing against Python's own arithmetic.

Random strings are run through the calculator and, after translation, through
``eval``. Braces become parentheses, ``n!`` becomes a factorial call and every
literal is wrapped in ``Real`` so that ``%`` follows ``math.fmod``.
"""
import math
import operator
import random
import string
import warnings

from rdcalc.session import evaluate
from rdcalc.tokenizer import TokenKind, tokenize
from rdcalc.utils import CalcError


class Real(float):
    """float whose arithmetic stays Real and whose % is C's fmod"""

    def __mod__(self, other: float) -> "Real":
        if math.isinf(self):
            return Real(math.nan)
        return Real(math.fmod(self, other))

    def __rmod__(self, other: float) -> "Real":
        return Real(other) % self

    def __neg__(self) -> "Real":
        return Real(-float(self))

    def __pos__(self) -> "Real":
        return self


def _real_op(op):
    return lambda a, b: Real(op(float(a), float(b)))


for _name, _op in [("add", operator.add), ("sub", operator.sub), ("mul", operator.mul), ("truediv", operator.truediv)]:
    setattr(Real, f"__{_name}__", _real_op(_op))
    setattr(Real, f"__r{_name}__", _real_op(lambda a, b, op=_op: op(b, a)))


def real_factorial(v: float) -> Real:
    return Real(math.inf if v >= 171 else math.factorial(int(v)))


def to_python(code: str) -> str:
    """Python source computing what the calculator should compute for ``code``"""
    tokens = tokenize(code)
    parts: list[str] = []
    for i, token in enumerate(tokens):
        if token.kind is TokenKind.NUMBER:
            if i + 1 < len(tokens) and tokens[i + 1].kind is TokenKind.BANG:
                parts.append(f"real_factorial({token.value!r})")
            else:
                parts.append(f"Real({token.value!r})")
        elif token.kind is TokenKind.BANG:
            if i == 0 or tokens[i - 1].kind is not TokenKind.NUMBER:
                parts.append("!")
        elif token.kind is TokenKind.BRACE_OPEN:
            parts.append("(")
        elif token.kind is TokenKind.BRACE_CLOSE:
            parts.append(")")
        else:
            parts.append(token.lexeme)
    return " ".join(parts)


def eval_py(code: str) -> float | str:
    try:
        return float(eval(to_python(code), {"Real": Real, "real_factorial": real_factorial}))
    except Exception as e:
        return str(e)


def eval_my(code: str) -> float | str:
    try:
        results = evaluate(code)
    except CalcError as e:
        return str(e)
    if len(results) != 1:
        return f"{len(results)} statements"
    return results[0]


def agree(res_py: float | str, res_my: float | str) -> bool:
    if isinstance(res_py, str) or isinstance(res_my, str):
        return isinstance(res_py, str) and isinstance(res_my, str)
    if math.isnan(res_py) or math.isnan(res_my):
        return math.isnan(res_py) and math.isnan(res_my)
    return res_py == res_my or math.isclose(res_py, res_my)


if __name__ == "__main__":
    warnings.filterwarnings("ignore")
    alphabet = string.digits + ".()+-*/%!{} "

    def generate(length: int) -> str:
        return "".join(random.choices(alphabet, k=length))

    while True:
        code = generate(10)
        res_py = eval_py(code)
        res_my = eval_my(code)
        if not agree(res_py, res_my):
            print(f"{code!r}\npy: {res_py}\nmy: {res_my}\n\n")
