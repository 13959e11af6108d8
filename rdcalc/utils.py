import enum
from dataclasses import dataclass


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


@dataclass
class CalcError(Exception):
    """Base for every error the calculator reports to the user"""

    errmsg: str

    def __str__(self) -> str:
        return self.errmsg


def caret_line(text: str, error_idx: int, width: int = 10) -> str:
    """Excerpt of ``text`` around ``error_idx`` with a ``^`` marker on the line below"""
    print_start_idx = max(0, error_idx - width)
    print_ellipsis_pre = print_start_idx > 0
    print_end_idx = min(len(text), error_idx + width)
    print_ellipsis_post = print_end_idx < len(text)
    return "\n".join(
        [
            ("..." if print_ellipsis_pre else "")
            + text[print_start_idx:print_end_idx]
            + ("..." if print_ellipsis_post else ""),
            " " * (error_idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
        ]
    )
