"""Fixed explicit-content pattern set used by the pattern classifier.

Order is significant only for logging (the first match is reported);
the verdict is the logical OR of every pattern.  Profanity patterns use
``x+`` runs so stretched spellings ("fuuuck", "shiiit") still match.

Patterns are compiled once, case-insensitively, into an immutable tuple.
Python's compiled patterns keep no per-call state, so repeated scans of
different strings never interfere with each other.
"""

from __future__ import annotations

import re

PROFANITY_PATTERNS: tuple[str, ...] = (
    r"\bf+u+c+k+",
    r"\bs+h+i+t+",
    r"\bb+i+t+c+h+",
    r"\ba+s+s+(?:hole)?",
    r"\bd+a+m+n+",
    r"\bh+e+l+l+",
    r"\bn+i+g+g+a+",
    r"\bp+u+s+s+y+",
    r"\bd+i+c+k+",
    r"\bc+o+c+k+",
    r"\bwh+o+r+e+",
    r"\bsl+u+t+",
)

DRUG_PATTERNS: tuple[str, ...] = (
    r"\bweed\b",
    r"\bganja\b",
    r"\bblunt\b",
    r"\bcocaine\b",
    r"\bheroin\b",
)

VIOLENCE_PATTERNS: tuple[str, ...] = (
    r"\bkill(?:ing|ed)?\b",
    r"\bmurder",
    r"\bgun\b",
    r"\bshoot(?:ing|er)?\b",
)

EXPLICIT_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(source, re.IGNORECASE)
    for source in (*PROFANITY_PATTERNS, *DRUG_PATTERNS, *VIOLENCE_PATTERNS)
)
