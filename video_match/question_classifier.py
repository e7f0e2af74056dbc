"""
Question classification module.
Decides whether a user utterance is about the product, using fixed regex patterns and keyword hits.
It is a cheap gate in front of the video selector, not a trained classifier.
"""

import re  # regex for question patterns
from typing import List, Optional, Tuple  # type annotations

from loguru import logger  # console logging

from .models import QuestionVerdict  # structured verdict


class QuestionClassifier:
	"""
	Heuristic product-question detector.
	A message counts as product-related when:
	- any question pattern matches (evaluated in order, first match wins), or
	- it contains a '?' and at least one product keyword, or
	- it contains at least two distinct product keywords.
	Keywords are substring matches, so "used" counts as "use" and "working" as "work".
	"""

	# Pre-compiled question patterns, evaluated in this order
	QUESTION_PATTERNS: Tuple[re.Pattern, ...] = (
		re.compile(r"how (does|do) (it|this|the|your) work"),  # how does it work
		re.compile(r"what (is|are) (the|your) (feature|benefit|advantage|spec)"),  # what are the features
		re.compile(r"tell me (about|more)"),
		re.compile(r"show me"),
		re.compile(r"can (it|this|the product) "),  # can it ..., trailing space required
		re.compile(r"how much (does|is|will)"),  # pricing
		re.compile(r"when (can|will)"),  # availability
		re.compile(r"where (can|should)"),
		re.compile(r"why (should|would)"),
	)

	# Product-related keywords (substring match, not whole-word)
	PRODUCT_KEYWORDS: Tuple[str, ...] = (
		'product', 'service', 'feature', 'benefit', 'advantage', 'price',
		'cost', 'quality', 'performance', 'specification', 'detail',
		'work', 'function', 'use', 'buy', 'purchase', 'order', 'shipping',
		'warranty', 'return', 'refund', 'model', 'version', 'compare',
		'difference', 'similar', 'alternative', 'competitor', 'review',
	)

	def classify(self, message: Optional[str]) -> QuestionVerdict:
		"""Full verdict with the evidence that produced it."""
		if not message or not isinstance(message, str):  # nothing to inspect
			return QuestionVerdict(is_product_question=False)

		m = message.lower()
		has_question_mark = '?' in m

		pattern = self._first_matching_pattern(m)
		if pattern is not None:
			logger.debug(f"[Classifier] Question pattern matched: '{pattern}'")
			return QuestionVerdict(
				is_product_question=True,
				matched_pattern=pattern,
				keywords=self._find_keywords(m),
				has_question_mark=has_question_mark,
			)

		keywords = self._find_keywords(m)
		if has_question_mark and keywords:
			is_product = True
		else:
			is_product = len(keywords) >= 2
		logger.debug(f"[Classifier] keywords={keywords} question_mark={has_question_mark} -> {is_product}")
		return QuestionVerdict(
			is_product_question=is_product,
			keywords=keywords,
			has_question_mark=has_question_mark,
		)

	def is_product_question(self, message: Optional[str]) -> bool:
		return self.classify(message).is_product_question

	def _first_matching_pattern(self, m: str) -> Optional[str]:
		for pattern in self.QUESTION_PATTERNS:
			if pattern.search(m):
				return pattern.pattern
		return None

	def _find_keywords(self, m: str) -> List[str]:
		# Keyword list has no duplicates, so hits are distinct keywords
		return [k for k in self.PRODUCT_KEYWORDS if k in m]


_DEFAULT_CLASSIFIER = QuestionClassifier()


def is_product_question(message: Optional[str]) -> bool:
	"""Module-level entry point: True when the message looks like a product question."""
	return _DEFAULT_CLASSIFIER.is_product_question(message)
