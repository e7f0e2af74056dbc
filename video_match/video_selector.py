"""
Video selection module.
Scores every candidate video against the user's message and picks the most relevant one.
"""

from typing import List, Optional, Sequence  # type annotations for clarity

# Import project modules for data structures and scoring
from .models import ScoredVideo, VideoRecord  # core data classes
from .similarity import calculate_text_similarity  # weighted cosine similarity

# Import loguru for console logging
from loguru import logger  # simple structured logger


def combined_text(video: VideoRecord) -> str:
	"""
	Build the searchable text of a video: title, description and keywords, space-joined.
	Empty fields are skipped. Recomputed on every call, nothing is cached.
	"""
	parts = [
		getattr(video, 'title', None),
		getattr(video, 'description', None),
		getattr(video, 'keywords', None),
	]
	return ' '.join(p for p in parts if p and isinstance(p, str))


class VideoSelector:
	"""
	Picks the video whose combined text is most similar to a message.
	Only exact-zero scores are rejected here; confidence floors belong to the caller.
	"""

	def select(self, message: str, videos: Optional[Sequence[VideoRecord]]) -> Optional[ScoredVideo]:
		"""Return the best candidate with its score, or None when nothing relates to the message."""
		if not isinstance(videos, (list, tuple)) or not videos:  # empty or unusable input
			logger.debug("[Selector] No candidate videos")
			return None

		# Single video is always shown, no comparison needed
		if len(videos) == 1:
			logger.debug(f"[Selector] Single candidate {getattr(videos[0], 'id', None)} auto-selected")
			return ScoredVideo(video=videos[0], score=1.0)

		best: Optional[ScoredVideo] = None
		for video in videos:
			score = calculate_text_similarity(message, combined_text(video))
			logger.debug(f"[Selector] Candidate | video={getattr(video, 'id', None)} | score={score:.3f}")
			# Strictly greater keeps the earliest candidate on ties
			if best is None or score > best.score:
				best = ScoredVideo(video=video, score=score)

		if best is None or best.score <= 0.0:
			logger.debug("[Selector] No candidate shares any term with the message")
			return None

		logger.debug(f"[Selector] Best match | video={getattr(best.video, 'id', None)} | score={best.score:.3f}")
		return best

	def rank(self, message: str, videos: Optional[Sequence[VideoRecord]]) -> List[ScoredVideo]:
		"""
		Score every candidate and return them best-first (stable on ties).
		Unlike select(), a single candidate is scored too, so the output reflects raw similarity.
		"""
		if not isinstance(videos, (list, tuple)) or not videos:
			return []
		scored = [ScoredVideo(video=v, score=calculate_text_similarity(message, combined_text(v))) for v in videos]
		scored.sort(key=lambda s: s.score, reverse=True)  # sort is stable
		return scored


_DEFAULT_SELECTOR = VideoSelector()


def find_relevant_video(message: str, videos: Optional[Sequence[VideoRecord]]) -> Optional[ScoredVideo]:
	"""Module-level entry point used by the conversation driver and the API."""
	return _DEFAULT_SELECTOR.select(message, videos)
