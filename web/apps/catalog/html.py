"""Text helpers for WordPress-rendered strings (product names, excerpts)."""

import html
import re

_TAG_RE = re.compile(r"<[^>]*>")


def decode_html_entities(text: str) -> str:
    """Decode named and numeric entities; ``&nbsp;`` becomes a plain space."""
    return html.unescape(text or "").replace("\xa0", " ")


def strip_html_tags(text: str) -> str:
    return _TAG_RE.sub("", text or "")


def clean_html_text(text: str) -> str:
    """Strip tags first, then decode, so encoded ``&lt;b&gt;`` survives as text."""
    return decode_html_entities(strip_html_tags(text))
