"""Cell text helpers shared by the table parsers."""

from __future__ import annotations

import re

TAG_RE = re.compile(r"<[^>]+>")
NBSP_RE = re.compile(r"&nbsp;?|\xa0")
WS_RE = re.compile(r"\s+")
FOOTNOTE_RE = re.compile(r"\[.*?\]")
PAREN_RE = re.compile(r"\(.*?\)")
# Inline style sheets leak into cell text on some wiki templates
STYLE_ARTIFACT_RE = re.compile(r"\.mw-parser-output[\s\S]*?(?=[A-Z])")
DIGITS_RE = re.compile(r"[^0-9]")


def strip_tags(html: str) -> str:
    return TAG_RE.sub("", html)


def clean_cell(text: str) -> str:
    text = strip_tags(text)
    text = NBSP_RE.sub(" ", text)
    text = WS_RE.sub(" ", text).strip()
    return text


def clean_header(text: str) -> str:
    text = STYLE_ARTIFACT_RE.sub("", text)
    text = FOOTNOTE_RE.sub("", text)
    return clean_cell(text)


def clean_entity_name(text: str) -> str:
    """Strip footnotes, parenthesised qualifiers and a trailing asterisk."""
    text = STYLE_ARTIFACT_RE.sub("", text)
    text = FOOTNOTE_RE.sub("", text)
    text = PAREN_RE.sub("", text)
    text = clean_cell(text)
    return text.rstrip("*").strip()


def extract_int(text: str) -> int | None:
    """Return the integer made of all digits in ``text`` ("12[a]" -> 12)."""
    digits = DIGITS_RE.sub("", FOOTNOTE_RE.sub("", text or ""))
    return int(digits) if digits else None
