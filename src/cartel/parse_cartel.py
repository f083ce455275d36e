from __future__ import annotations

from dataclasses import dataclass

from contracts.artwork import CartelData

from .patterns import (
    ARTIST_DATES_RE,
    DIMENSIONS_RE,
    DOUBLE_QUOTES_RE,
    EDGE_QUOTES_RE,
    MEDIUM_PATTERNS,
    MIN_LINE_LENGTH,
    SINGLE_QUOTES_RE,
    TRAILING_PUNCT_RE,
    WHITESPACE_RE,
    YEAR_RE,
)


def split_lines(text: str) -> list[str]:
    """Non-empty trimmed lines of at least MIN_LINE_LENGTH characters."""
    lines = (ln.strip() for ln in text.split("\n"))
    return [ln for ln in lines if len(ln) >= MIN_LINE_LENGTH]


def clean_title(text: str) -> str:
    out = DOUBLE_QUOTES_RE.sub('"', text)
    out = SINGLE_QUOTES_RE.sub("'", out)
    out = EDGE_QUOTES_RE.sub("", out.strip())
    return WHITESPACE_RE.sub(" ", out).strip()


def clean_name(text: str) -> str:
    out = TRAILING_PUNCT_RE.sub("", text.strip())
    return WHITESPACE_RE.sub(" ", out).strip()


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:].lower()


def looks_like_name(line: str) -> bool:
    """Every word capitalized (accented capitals included) or shorter than 3 characters."""
    return all(w[:1].isupper() or len(w) < 3 for w in line.split())


def format_dimensions(a: str, b: str, unit: str | None) -> str:
    return f"{a} × {b} {unit or 'cm'}"


@dataclass
class _Fields:
    title: str = ""
    artist: str = ""
    year: str = ""
    medium: str = ""
    dimensions: str = ""


def _scan_line(fields: _Fields, line: str, index: int) -> None:
    dates_match = ARTIST_DATES_RE.search(line)

    # Artist with life dates: whatever remains once the date range is removed.
    if dates_match and not fields.artist:
        artist = ARTIST_DATES_RE.sub("", line, count=1).strip()
        if artist:
            fields.artist = clean_name(artist)

    # A year on a line carrying life dates is a birth/death year, not the artwork's.
    year_match = YEAR_RE.search(line)
    if year_match and not fields.year and not dates_match:
        fields.year = year_match.group(0)

    dim_match = DIMENSIONS_RE.search(line)
    if dim_match and not fields.dimensions:
        fields.dimensions = format_dimensions(dim_match.group(1), dim_match.group(2), dim_match.group(3))

    if not fields.medium:
        for pattern in MEDIUM_PATTERNS:
            m = pattern.search(line)
            if m:
                fields.medium = capitalize_first(m.group(0))
                break

    if index == 0 and not year_match and not dim_match:
        fields.title = clean_title(line)

    if index == 1 and not fields.artist and not dim_match:
        if looks_like_name(line) or dates_match:
            fields.artist = clean_name(ARTIST_DATES_RE.sub("", line, count=1).strip())


def parse_cartel_text(text: str | None) -> CartelData:
    """
    Extract title/artist/year/medium/dimensions from recognized label text.

    Line-oriented and deterministic; for each field the first matching line wins. The
    first line is taken as the title and the second as the artist when it reads like a
    name: a best-effort heuristic for the common label layout, not a guarantee.
    Never raises; undetected fields are empty strings.
    """

    if not text:
        return CartelData(raw_text=text or "")

    fields = _Fields()
    for index, line in enumerate(split_lines(text)):
        _scan_line(fields, line, index)

    return CartelData(
        title=fields.title,
        artist=fields.artist,
        year=fields.year,
        medium=fields.medium,
        dimensions=fields.dimensions,
        raw_text=text,
    )
