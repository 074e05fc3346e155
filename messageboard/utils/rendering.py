import re
from datetime import datetime, timezone, tzinfo

from markupsafe import Markup, escape

# Runs on escaped text, so "<" can only appear as the start of our own tags
_URL_RE = re.compile(r"(https?://[^\s<]+)", re.IGNORECASE)
_NEWLINE_RE = re.compile(r"\r\n|\n\r|\n|\r")

LINK_REL = "noopener noreferrer nofollow"

def _link(match: re.Match) -> str:
    url = match.group(1)
    return f'<a href="{url}" target="_blank" rel="{LINK_REL}">{url}</a>'

def autolink(text: str | None) -> Markup:
    """
    Escape user text, turn bare http(s) URLs into links, then newlines into <br>.
    The order matters: linking only ever sees already-escaped text.
    """
    escaped = str(escape(text or ""))
    linked = _URL_RE.sub(_link, escaped)
    return Markup(_NEWLINE_RE.sub(lambda m: "<br>" + m.group(0), linked))

def format_timestamp(value: datetime | None, tz: tzinfo) -> str:
    """'Sep 21, 2025 at 14:03' in the board's display timezone."""
    if value is None:
        return ""
    if value.tzinfo is None:
        # SQLite hands back naive values; the server default stores UTC
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz).strftime("%b %d, %Y at %H:%M")
