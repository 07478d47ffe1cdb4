"""Text encoding for the wire and the console.

Request and response lines are UTF-8 and decoded strictly: a line that is
not valid UTF-8 is a transport error, never a request. Console streams are
the opposite and substitute undecodable characters, since method results
may contain anything.
"""

import sys

ENCODING = "utf-8"
LINE_TERMINATOR = "\n"


def encode_line(text: str) -> bytes:
    """Encode one protocol line, adding the terminator if it is missing."""
    if not text.endswith(LINE_TERMINATOR):
        text += LINE_TERMINATOR
    return text.encode(ENCODING)


def decode_line(raw: bytes) -> str:
    """Decode one received line.

    Raises:
        UnicodeDecodeError: If raw is not valid UTF-8.
    """
    return raw.decode(ENCODING, errors="strict")


def configure_stdio() -> None:
    """Switch the standard streams to UTF-8, replacing what cannot be encoded."""
    for stream in (sys.stdin, sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding=ENCODING, errors="replace")
