"""
Keyword matching of course titles against a search query.

A title matches when every query token occurs somewhere in it (substring
containment, any order). "Node.js & MongoDB:" therefore matches
"Node.js & MongoDB: Developing Back-end Database Applications".
"""

import re
from typing import List

# Dropped from the query before splitting. Titles are left as-is.
STRIP_CHARS = ":"
_STRIP_RE = re.compile("[" + re.escape(STRIP_CHARS) + "]")


def tokenize(query: str) -> List[str]:
    if not query:
        return []
    return _STRIP_RE.sub("", query.lower()).split()


def matches(query: str, label: str) -> bool:
    return KeywordMatcher(query)(label)


class KeywordMatcher:
    """Tokenizes the query once; call it with a candidate title."""

    def __init__(self, query: str):
        self.query = query
        self.keywords = tokenize(query)

    def __call__(self, label: str) -> bool:
        text = (label or "").lower()
        return all(k in text for k in self.keywords)

    def __repr__(self):
        return f"KeywordMatcher({self.keywords!r})"
