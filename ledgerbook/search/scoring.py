"""
Fuzzy Scoring

Scores how well a query matches one target string. This is a tiered
heuristic, not an edit distance:

    exact match          100
    prefix               80
    substring            60
    in-order subsequence 30
    all characters seen  25   (queries longer than one character)
    no match             0

Both strings are normalized first: lowercased, with everything outside
[a-z0-9] removed.
"""

import re

EXACT_SCORE = 100
PREFIX_SCORE = 80
SUBSTRING_SCORE = 60
SUBSEQUENCE_SCORE = 30
SCATTERED_SCORE = 25

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_UPPERCASE_BOUNDARY = re.compile(r"(?=[A-Z])")


def normalize_text(text: str) -> str:
    if not text:
        return ""
    return _NON_ALNUM.sub("", text.lower()).strip()


def calculate_score(query: str, target: str) -> int:
    """Score `target` against `query`; 0 means no match."""
    if not query or not target:
        return 0

    normalized_query = normalize_text(query)
    normalized_target = normalize_text(target)
    if not normalized_query or not normalized_target:
        return 0

    if normalized_query == normalized_target:
        return EXACT_SCORE
    if normalized_target.startswith(normalized_query):
        return PREFIX_SCORE
    if normalized_query in normalized_target:
        return SUBSTRING_SCORE

    # Greedy single pass: consume query characters in order.
    query_index = 0
    matched = 0
    for char in normalized_target:
        if query_index == len(normalized_query):
            break
        if char == normalized_query[query_index]:
            matched += 1
            query_index += 1

    if query_index == len(normalized_query):
        return round(SUBSEQUENCE_SCORE * matched / len(normalized_query))

    # The target is already lowercase here, so this split yields one word.
    words = [w for w in _UPPERCASE_BOUNDARY.split(normalized_target) if w]
    every_char_seen = all(
        any(char in word for word in words)
        for char in normalized_query
    )
    if every_char_seen and len(normalized_query) > 1:
        return SCATTERED_SCORE

    return 0
