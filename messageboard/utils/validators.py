import ipaddress
import re
from urllib.parse import urlsplit

# Simple, pragmatic patterns
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_HOST_LABEL_RE = re.compile(r"^(?!-)[A-Za-z0-9_-]{1,63}(?<!-)$")
_UNSAFE_URL_RE = re.compile(r"[\s<>\"`\\]")

MIN_TEXT_LENGTH = 2
NAME_MAX_LENGTH = 100
TOPIC_MAX_LENGTH = 200
COMMENT_MAX_LENGTH = 5000
EMAIL_MAX_LENGTH = 255
WEBSITE_MAX_LENGTH = 255
USER_AGENT_MAX_LENGTH = 250
IP_MAX_LENGTH = 45

def clean_text(val: str | None) -> str:
    """Trim surrounding whitespace; inner whitespace and newlines are kept."""
    return (val or "").strip()

def has_min_length(val: str, min_len: int = MIN_TEXT_LENGTH) -> bool:
    # len() counts code points, so multi-byte text is measured in characters
    return len(val) >= min_len

def is_valid_email(val: str | None) -> bool:
    if not val:
        return True
    return bool(_EMAIL_RE.match(val))

def normalize_email(val: str | None) -> str | None:
    """
    Trim; return the address when it looks valid, else None.
    An unusable email is treated as absent rather than as an error.
    """
    s = clean_text(val)
    if not s or not is_valid_email(s):
        return None
    return s

def _is_valid_host(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass
    labels = host.rstrip(".").split(".")
    return all(_HOST_LABEL_RE.match(label) for label in labels)

def is_valid_url(val: str | None) -> bool:
    """Absolute http(s) URL with a plausible host and no characters needing escapes."""
    if not val or _UNSAFE_URL_RE.search(val):
        return False
    try:
        parts = urlsplit(val)
        host = parts.hostname
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        return False
    if parts.scheme.lower() not in ("http", "https") or not host:
        return False
    return _is_valid_host(host)

def normalize_website(val: str | None) -> str | None:
    """
    Trim, prefix http:// when no http(s) scheme was typed, then validate.
    Returns None for empty or unusable input (silently dropped, not an error).
    """
    s = clean_text(val)
    if not s:
        return None
    if not _SCHEME_RE.match(s):
        s = "http://" + s
    return s if is_valid_url(s) else None

def truncate(val: str | None, max_len: int) -> str | None:
    if val is None:
        return None
    return val[:max_len]
