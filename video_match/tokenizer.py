"""
Tokenizer and term-frequency model.
Turns raw text into normalized tokens and per-text frequency maps used by the similarity scorer.
"""

import re  # regex split on non-word runs
from collections import Counter  # occurrence counting
from typing import Dict, List, Optional, Sequence  # type hints

# Split on any run of characters that are not ASCII letters, digits or underscore
RE_NON_WORD = re.compile(r"\W+", re.ASCII)

# Tokens of this length or shorter are dropped ("a", "is", "to", ...)
MAX_DROPPED_TOKEN_LENGTH = 2


def tokenize(text: Optional[str]) -> List[str]:
	"""
	Lower-case the text, split it on non-word runs and drop very short tokens.
	None, non-strings and empty strings all produce an empty list.
	"""
	if not text or not isinstance(text, str):  # nothing to tokenize
		return []
	parts = RE_NON_WORD.split(text.lower())  # may contain '' at the edges
	return [t for t in parts if len(t) > MAX_DROPPED_TOKEN_LENGTH]


def token_counts(tokens: Sequence[str]) -> Dict[str, int]:
	"""Raw occurrence count per distinct token."""
	return dict(Counter(tokens))


def word_frequencies(tokens: Sequence[str]) -> Dict[str, float]:
	"""
	Normalized term frequencies: count(token) / total tokens.
	An empty token list yields an empty map, which callers treat as "no information".
	"""
	if not tokens:
		return {}
	total = len(tokens)
	return {token: count / total for token, count in Counter(tokens).items()}
