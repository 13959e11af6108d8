"""Raw character input for the token stream.

``CharSource`` wraps any text stream (``sys.stdin``, an open file, a
``StringIO``) and hands out one character per call, blocking on the underlying
``read(1)`` the same way an interactive terminal does. Characters can be
unread so the tokenizer can scan a number literal and give back whatever
follows it. The current line and column are tracked for error messages.
"""
from typing import Protocol, TextIO


class Reader(Protocol):
    def read(self, size: int) -> str:
        ...


class ChainedStream:
    """Several text streams read one after another, split by a newline"""

    def __init__(self, streams: list[TextIO]) -> None:
        self._streams = list(streams)

    def read(self, size: int) -> str:
        while self._streams:
            chunk = self._streams[0].read(size)
            if chunk:
                return chunk
            self._streams.pop(0)
            if self._streams:
                # keeps a token from running across two files
                return "\n"
        return ""


class CharSource:
    def __init__(self, stream: Reader) -> None:
        self._stream = stream
        self._pending: list[str] = []  # stack, the last item is read next
        self._exhausted = False
        self.line = 1
        self._line_chars: list[str] = []
        self._prev_line_chars: list[str] = []

    @property
    def column(self) -> int:
        """0-based position of the next character on the current line"""
        return len(self._line_chars)

    @property
    def line_text(self) -> str:
        """Characters already read from the current line"""
        return "".join(self._line_chars)

    def read(self) -> str:
        """Next character, or "" once the input is exhausted"""
        if self._pending:
            ch = self._pending.pop()
        elif self._exhausted:
            return ""
        else:
            ch = self._stream.read(1)
            if not ch:
                self._exhausted = True
                return ""
        if ch == "\n":
            self.line += 1
            self._prev_line_chars = self._line_chars
            self._line_chars = []
        else:
            self._line_chars.append(ch)
        return ch

    def unread(self, ch: str) -> None:
        """Give back the character most recently returned by ``read``"""
        if not ch:
            return
        if ch == "\n":
            self.line -= 1
            self._line_chars = self._prev_line_chars
            self._prev_line_chars = []
        else:
            self._line_chars.pop()
        self._pending.append(ch)

    def peek(self) -> str:
        ch = self.read()
        self.unread(ch)
        return ch

    def read_nonspace(self) -> str:
        ch = self.read()
        while ch and ch.isspace():
            ch = self.read()
        return ch
