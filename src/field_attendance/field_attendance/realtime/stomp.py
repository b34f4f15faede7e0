"""Minimal STOMP 1.2 frame codec for text WebSocket frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

NULL = "\x00"
EOL = "\n"

_ESCAPES = (("\\", "\\\\"), ("\r", "\\r"), ("\n", "\\n"), (":", "\\c"))
_UNESCAPES = {"\\\\": "\\", "\\r": "\r", "\\n": "\n", "\\c": ":"}

# CONNECT frames keep raw header values
_UNESCAPED_COMMANDS = frozenset({"CONNECT", "CONNECTED"})


class FrameError(ValueError):
    pass


@dataclass
class Frame:
    command: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name, default)


def escape_header(value: str) -> str:
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value


def unescape_header(value: str) -> str:
    out = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\":
            pair = value[i : i + 2]
            if pair not in _UNESCAPES:
                raise FrameError(f"Invalid header escape sequence: {pair!r}")
            out.append(_UNESCAPES[pair])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def encode_frame(frame: Frame) -> str:
    escape = frame.command not in _UNESCAPED_COMMANDS
    lines = [frame.command]
    headers = dict(frame.headers)
    if frame.body and "content-length" not in headers:
        headers["content-length"] = str(len(frame.body.encode("utf-8")))
    for name, value in headers.items():
        if escape:
            name, value = escape_header(name), escape_header(str(value))
        lines.append(f"{name}:{value}")
    return EOL.join(lines) + EOL + EOL + frame.body + NULL


def decode_frame(data: str) -> Optional[Frame]:
    """Decode one frame. Returns None for a heart-beat (only EOLs)."""
    stripped = data.lstrip("\r\n")
    if not stripped or stripped == NULL:
        return None

    head, sep, rest = stripped.partition(EOL + EOL)
    if not sep:
        head, sep, rest = stripped.partition("\r\n\r\n")
    if not sep:
        raise FrameError("Frame is missing the blank line after headers")

    lines = head.replace("\r\n", EOL).split(EOL)
    command = lines[0].strip()
    if not command:
        raise FrameError("Frame has no command")
    escape = command not in _UNESCAPED_COMMANDS

    headers: Dict[str, str] = {}
    for line in lines[1:]:
        if not line:
            continue
        name, colon, value = line.partition(":")
        if not colon:
            raise FrameError(f"Malformed header line: {line!r}")
        if escape:
            name, value = unescape_header(name), unescape_header(value)
        # first occurrence wins
        headers.setdefault(name, value)

    length = headers.get("content-length")
    if length is not None:
        try:
            size = int(length)
        except ValueError:
            raise FrameError(f"Invalid content-length: {length!r}")
        raw = rest.encode("utf-8")
        if len(raw) < size:
            raise FrameError("Frame body is shorter than content-length")
        body = raw[:size].decode("utf-8")
    else:
        body, _, _ = rest.partition(NULL)
    return Frame(command, headers, body)
