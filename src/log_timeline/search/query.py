"""Boolean full-text query language: AND / OR, parentheses, quoted phrases.

Evaluation is strictly left to right with a single pending operator, so
``a OR b AND c`` means ``(a OR b) AND c``. AND does not bind tighter than OR;
saved queries depend on this, so only explicit parentheses change grouping.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

PHRASE_PATTERN = re.compile(r'"([^"]+)"')
PLACEHOLDER_PATTERN = re.compile(r"^__PHRASE_(\d+)__$")

AND = "AND"
OR = "OR"
OPERATORS = (AND, OR)


def _placeholder(index: int) -> str:
    return f"__PHRASE_{index}__"


def tokenize(query: str) -> list[str]:
    """Split a query into terms, operators and parentheses.

    Quoted phrases are lifted out before splitting so that spaces and
    parentheses inside quotes never become structure; they come back as a
    single lowercase token.
    """
    phrases: list[str] = []

    def _stash(m: re.Match) -> str:
        phrases.append(m.group(1))
        return _placeholder(len(phrases) - 1)

    working = PHRASE_PATTERN.sub(_stash, query)

    tokens: list[str] = []
    current = ""
    for char in working:
        if char in "()":
            if current.strip():
                tokens.append(current.strip())
            current = ""
            tokens.append(char)
        elif char in " \t":
            if current.strip():
                tokens.append(current.strip())
            current = ""
        else:
            current += char
    if current.strip():
        tokens.append(current.strip())

    restored = []
    for token in tokens:
        m = PLACEHOLDER_PATTERN.match(token)
        if m and int(m.group(1)) < len(phrases):
            restored.append(phrases[int(m.group(1))].lower())
        else:
            restored.append(token)
    return restored


def _combine(result: Optional[bool], operator: Optional[str], value: bool) -> bool:
    if result is None:
        return value
    if operator == OR:
        return result or value
    # Explicit AND, or adjacent terms with no operator
    return result and value


def _matching_paren(tokens: Sequence[str], open_index: int) -> int:
    """Index just past the ``)`` closing the ``(`` at ``open_index``."""
    depth = 1
    j = open_index + 1
    while j < len(tokens) and depth > 0:
        if tokens[j] == "(":
            depth += 1
        elif tokens[j] == ")":
            depth -= 1
        j += 1
    return j


def evaluate_tokens(tokens: Sequence[str], haystack: str) -> bool:
    """Evaluate a token list against an already-lowercased haystack."""
    result: Optional[bool] = None
    operator: Optional[str] = None
    i = 0

    while i < len(tokens):
        token = tokens[i]
        upper = token.upper()

        if token == "(":
            end = _matching_paren(tokens, i)
            # An unclosed group runs to the end of the query
            inner_end = end - 1 if end <= len(tokens) and tokens[end - 1] == ")" else end
            value = evaluate_tokens(tokens[i + 1 : inner_end], haystack)
            result = _combine(result, operator, value)
            operator = None
            i = end
        elif token == ")":
            # Stray closing paren
            i += 1
        elif upper in OPERATORS:
            operator = upper
            i += 1
        else:
            value = token.lower() in haystack
            result = _combine(result, operator, value)
            operator = None
            i += 1

    return bool(result) if result is not None else False


def evaluate(query: str, haystack: str) -> bool:
    """True if ``haystack`` satisfies the boolean ``query``.

    Terms match by case-insensitive substring containment. An empty query,
    or one made only of operators, matches nothing.
    """
    if not query or not query.strip():
        return False
    return evaluate_tokens(tokenize(query), haystack.lower())


def extract_terms(query: str) -> list[str]:
    """Flat list of lowercase phrases and words in a query, for highlighting.

    Quoted phrases come first, then bare words, each once, in order of first
    appearance. Operators and parentheses are dropped.
    """
    if not query or not query.strip():
        return []

    terms: list[str] = []
    for m in PHRASE_PATTERN.finditer(query):
        phrase = m.group(1).lower()
        if phrase not in terms:
            terms.append(phrase)

    remaining = PHRASE_PATTERN.sub(" ", query)
    for word in re.split(r"\s+", re.sub(r"[()]", " ", remaining)):
        cleaned = word.strip().lower()
        if cleaned and cleaned not in ("and", "or") and cleaned not in terms:
            terms.append(cleaned)
    return terms
