import html
import re
from typing import Any

FALLBACK = "N/A"
DEFAULT_DISPLAY_NAME = "Monster Statblock"

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def value_or(value: Any, fallback: Any = FALLBACK) -> Any:
    return fallback if value is None else value


def stringify(value: Any) -> str:
    """Render a record value as display text. Sequences are comma-joined."""
    if isinstance(value, (list, tuple)):
        return ", ".join(stringify(v) for v in value)
    return str(value)


def text_or(value: Any, fallback: str = FALLBACK) -> str:
    return fallback if value is None else stringify(value)


def decode_entities(text: Any) -> str:
    # html.unescape handles named, decimal and hex references like he.decode
    return html.unescape(text_or(text, ""))


def strip_paragraph_tags(text: str) -> str:
    # Only <p> and </p> are handled; any other markup passes through literally
    return text.replace("<p>", "\n").replace("</p>", "")


def sanitize_filename(name: str) -> str:
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", name).strip().strip(".")
    return cleaned or DEFAULT_DISPLAY_NAME
