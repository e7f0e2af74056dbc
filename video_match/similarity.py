"""
Similarity module.
Weighted cosine similarity between two short texts, built on the tokenizer's frequency maps.
"""

import math  # natural log for the term weight
from typing import Optional  # type hints

# Import NumPy for the weighted vector arithmetic
import numpy as np  # float64 arrays

from .tokenizer import tokenize, token_counts, word_frequencies  # text -> frequency maps

# Console logging
from loguru import logger  # console logger


def term_weight(union_size: int, count_a: int, count_b: int) -> float:
	"""
	Heuristic weight for a token: 1 + ln(1 + union_size / max(count_a, count_b, 1)).
	Counts are raw occurrences of the token in each text. This is not a corpus IDF;
	with only two texts it rewards tokens that are rare relative to the shared vocabulary.
	"""
	return 1.0 + math.log(1.0 + union_size / max(count_a, count_b, 1))


def calculate_text_similarity(text_a: Optional[str], text_b: Optional[str]) -> float:
	"""
	Cosine similarity of the weighted term-frequency vectors of two texts, in [0..1].
	Returns 0.0 when either text is empty or has no token longer than two characters.
	"""
	if not text_a or not text_b:  # falsy input guard
		return 0.0

	tokens_a = tokenize(text_a)
	tokens_b = tokenize(text_b)
	if not tokens_a or not tokens_b:  # everything filtered out
		return 0.0

	freq_a = word_frequencies(tokens_a)
	freq_b = word_frequencies(tokens_b)
	counts_a = token_counts(tokens_a)
	counts_b = token_counts(tokens_b)

	# Sorted union keeps the summation order independent of argument order (exact symmetry)
	union = sorted(set(freq_a) | set(freq_b))
	union_size = len(union)

	weights = np.array(
		[term_weight(union_size, counts_a.get(t, 0), counts_b.get(t, 0)) for t in union],
		dtype=np.float64,
	)
	tf_a = np.array([freq_a.get(t, 0.0) for t in union], dtype=np.float64)
	tf_b = np.array([freq_b.get(t, 0.0) for t in union], dtype=np.float64)

	# dot carries a single weight factor, magnitudes use (f * w)^2
	dot = float(np.sum(tf_a * tf_b * weights))
	magnitude_a = math.sqrt(float(np.sum((tf_a * weights) ** 2)))
	magnitude_b = math.sqrt(float(np.sum((tf_b * weights) ** 2)))

	if magnitude_a == 0.0 or magnitude_b == 0.0:  # degenerate all-zero vectors
		return 0.0

	score = dot / (magnitude_a * magnitude_b)
	logger.debug(f"[Similarity] union={union_size} dot={dot:.4f} score={score:.4f}")
	return score
