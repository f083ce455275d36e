from __future__ import annotations

import re

# Artwork year: 1000..2029.
YEAR_RE = re.compile(r"\b(1[0-9]{3}|20[0-2][0-9])\b")

# "89 x 93 cm", "65,5 × 81 mm", "30X40" (unit optional).
DIMENSIONS_RE = re.compile(
    r"(\d+(?:[.,]\d+)?)\s*[xX×]\s*(\d+(?:[.,]\d+)?)\s*(cm|mm|m|in)?",
    re.IGNORECASE,
)

# Artist life dates, optionally parenthesized: "(1840-1926)", "1840 – 1926".
ARTIST_DATES_RE = re.compile(r"\(?\s*(1[0-9]{3})\s*[-–—]\s*(1[0-9]{3}|20[0-2][0-9])\s*\)?")

# Bilingual (French/English) medium keywords, tried in order; the first match wins.
# French forms come before English prefixes of the same word ("lithographie" / "lithograph").
MEDIUM_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"huile\s+sur\s+toile",
        r"oil\s+on\s+canvas",
        r"acrylique",
        r"acrylic",
        r"bronze",
        r"marbre",
        r"marble",
        r"aquarelle",
        r"watercolou?r",
        r"pastel",
        r"encre",
        r"\bink\b",
        r"crayon",
        r"pencil",
        r"gravure",
        r"engraving",
        r"lithographie",
        r"lithograph",
        r"photographie",
        r"photography",
    )
)

# Typographic quotes normalized to plain ones in titles.
DOUBLE_QUOTES_RE = re.compile(r"[«»“”„]")
SINGLE_QUOTES_RE = re.compile(r"[‘’]")
EDGE_QUOTES_RE = re.compile(r"^[\"']+|[\"']+$")

TRAILING_PUNCT_RE = re.compile(r"[,;:]+$")
WHITESPACE_RE = re.compile(r"\s+")

MIN_LINE_LENGTH = 3
