"""
Lexical tokenizer for BM25 indexing.

Dependencies: re (stdlib)
System role: Shared tokenization for corpus and query text
"""

import re

TOKEN_PATTERN = re.compile(r"[a-z0-9]+")

STOP_WORDS = frozenset({
    "a", "about", "an", "and", "are", "as", "at", "be", "been", "by", "can",
    "do", "does", "for", "from", "has", "have", "how", "i", "if", "in", "into",
    "is", "it", "its", "may", "must", "of", "on", "or", "shall", "should",
    "that", "the", "their", "then", "there", "these", "this", "to", "was",
    "were", "what", "when", "where", "which", "who", "why", "will", "with",
})


def tokenize(text: str) -> list[str]:
    """Lower-case word tokens with stop words and single characters removed."""
    return [
        token
        for token in TOKEN_PATTERN.findall(text.lower())
        if len(token) > 1 and token not in STOP_WORDS
    ]
