"""
Conversation driver.
Watches a live avatar transcript and switches the displayed product video at most once per user turn.
"""

from typing import Iterable, List, Optional, Sequence  # type annotations

from loguru import logger  # console logging

from .models import SwitchDecision, TranscriptTurn, VideoRecord  # data classes
from .question_classifier import is_product_question  # cheap product-question gate
from .video_selector import find_relevant_video  # best-match selection

# Application-level confidence floor; a match must score strictly above it to be shown
DEFAULT_CONFIDENCE_FLOOR = 0.3
# Speaker label the chat widget uses for the human side of the conversation
DEFAULT_USER_SPEAKER = "You"


class VideoSwitchDriver:
	"""
	Drives video switching for one chat session.

	After every persona turn the previous user message is classified; product questions are
	matched against the persona's videos and the best match is shown if it clears the
	confidence floor. A latch prevents a second switch until the user speaks again.
	"""

	def __init__(
		self,
		persona_name: str,
		videos: Optional[Sequence[VideoRecord]] = None,
		confidence_floor: float = DEFAULT_CONFIDENCE_FLOOR,
		user_speaker: str = DEFAULT_USER_SPEAKER,
	):
		if not 0.0 <= confidence_floor <= 1.0:
			raise ValueError("confidence_floor must be between 0.0 and 1.0")
		self.persona_name = persona_name
		self.videos: List[VideoRecord] = list(videos or [])
		self.confidence_floor = confidence_floor
		self.user_speaker = user_speaker

		self.transcript: List[TranscriptTurn] = []
		self.current_video_index = 0  # first video is shown until something better comes up
		self.last_user_message = ""
		self.has_triggered = False  # latch, reset by each new user message

	@property
	def current_video(self) -> Optional[VideoRecord]:
		if 0 <= self.current_video_index < len(self.videos):
			return self.videos[self.current_video_index]
		return None

	def add_turn(self, speaker: str, text: str) -> Optional[SwitchDecision]:
		"""
		Feed one transcript turn. User turns return None; persona turns return the evaluation.
		Turns from any other speaker are recorded but never trigger a switch.
		"""
		if speaker == self.user_speaker:
			self.on_user_message(text)
			return None
		if speaker == self.persona_name:
			return self.on_agent_message(text)
		self._append(speaker, text)
		return None

	def on_user_message(self, text: str) -> None:
		self.last_user_message = text or ""
		self.has_triggered = False
		self._append(self.user_speaker, text)

	def on_agent_message(self, text: str) -> SwitchDecision:
		self._append(self.persona_name, text)
		return self.evaluate()

	def evaluate(self) -> SwitchDecision:
		"""Decide whether the latest transcript state should switch the active video."""
		if len(self.transcript) < 2:
			return self._keep("transcript_too_short")
		if self.transcript[-1].speaker != self.persona_name:
			return self._keep("awaiting_persona_reply")
		if self.has_triggered:
			return self._keep("already_triggered")
		if not self.last_user_message:
			return self._keep("no_user_message")
		if not is_product_question(self.last_user_message):
			return self._keep("not_product_question")

		match = find_relevant_video(self.last_user_message, self.videos)
		if match is None:
			return self._keep("no_match")
		if not match.score > self.confidence_floor:
			logger.debug(
				f"[Driver] Match below confidence floor | video={match.video.id} | score={match.score:.3f} | floor={self.confidence_floor}"
			)
			return self._keep("below_confidence_floor", match.video, match.score)

		index = self._index_of(match.video.id)
		if index is None:
			logger.warning(f"[Driver] Matched video {match.video.id} is not in this session's list")
			return self._keep("video_not_found", match.video, match.score)

		self.current_video_index = index
		self.has_triggered = True
		logger.info(f"[Driver] Switched to video #{index} ({match.video.title!r}) score={match.score:.3f}")
		return SwitchDecision(
			switched=True,
			video_index=index,
			reason="switched",
			video=match.video,
			score=match.score,
		)

	def set_current_video(self, index: int) -> bool:
		"""Manual selection from the player controls. Out-of-range indexes are ignored."""
		if not 0 <= index < len(self.videos):
			logger.warning(f"[Driver] Ignoring invalid video index {index} (have {len(self.videos)})")
			return False
		self.current_video_index = index
		return True

	def replay(self, turns: Iterable[TranscriptTurn]) -> List[SwitchDecision]:
		"""Feed a recorded conversation and collect the decision made after each persona turn."""
		decisions = []
		for turn in turns:
			decision = self.add_turn(turn.speaker, turn.text)
			if decision is not None:
				decisions.append(decision)
		return decisions

	def _append(self, speaker: str, text: str) -> None:
		# Skip an exact repeat of the previous turn (the avatar SDK re-emits transcripts)
		if self.transcript and self.transcript[-1].speaker == speaker and self.transcript[-1].text == text:
			return
		self.transcript.append(TranscriptTurn(speaker=speaker, text=text))

	def _index_of(self, video_id: str) -> Optional[int]:
		for i, video in enumerate(self.videos):
			if video.id == video_id:
				return i
		return None

	def _keep(self, reason: str, video: Optional[VideoRecord] = None, score: Optional[float] = None) -> SwitchDecision:
		return SwitchDecision(
			switched=False,
			video_index=self.current_video_index,
			reason=reason,
			video=video,
			score=score,
		)
