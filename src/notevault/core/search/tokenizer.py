"""Text tokenization shared by indexing and querying."""

import re
from typing import List

_WORD = re.compile(r"\w+", re.UNICODE)

# longer tokens are cut so they fit the term column
MAX_TOKEN_LENGTH = 100


def tokenize(text: str, min_length: int = 2) -> List[str]:
    """Lower-cased distinct word tokens of ``text``, in first-seen order."""
    seen = {}
    for match in _WORD.finditer(text.lower()):
        token = match.group()[:MAX_TOKEN_LENGTH]
        if len(token) >= min_length and token not in seen:
            seen[token] = None
    return list(seen)
