"""
Server-sent event frame formatting.

Frames are plain ``data:`` lines terminated by a blank line, which is
what the browser's ``EventSource.onmessage`` receives as ``event.data``.
"""

from typing import Optional

CONNECTED = "connected"
RELOAD = "reload"


def format_event(data: str, event: Optional[str] = None) -> bytes:
    """
    Encode one SSE frame.

    Multi-line data is split into one ``data:`` field per line.

    Args:
        data: Event payload
        event: Optional event name (omitted for plain messages)

    Returns:
        UTF-8 encoded frame
    """
    lines = []
    if event:
        lines.append(f"event: {event}")
    lines.extend(f"data: {line}" for line in data.split("\n"))
    return ("\n".join(lines) + "\n\n").encode("utf-8")


def format_comment(text: str) -> bytes:
    """Encode an SSE comment frame, ignored by clients."""
    return f": {text}\n\n".encode("utf-8")


CONNECTED_FRAME = format_event(CONNECTED)
RELOAD_FRAME = format_event(RELOAD)
KEEPALIVE_FRAME = format_comment("keepalive")
