"""
Data models for the persona video matcher.
Defines the records exchanged between the catalog, the matching engine and the conversation driver.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import List, Optional  # lists and optional values


@dataclass
class VideoRecord:
	"""
	A pre-generated product video attached to a persona.
	Only title, description and keywords take part in matching; the URLs are carried for players.
	"""
	id: str  # opaque unique identifier
	title: str  # short human-readable label
	description: Optional[str] = None  # optional free-text summary
	keywords: Optional[str] = None  # optional free-text tag string
	video_url: Optional[str] = None  # playable URL, not used for scoring
	thumbnail_url: Optional[str] = None  # poster image for the player


@dataclass
class ScoredVideo:
	"""A candidate video together with its similarity to the user's message."""
	video: VideoRecord  # matched video
	score: float  # similarity in [0..1]


@dataclass
class TranscriptTurn:
	speaker: str  # "You" for the user, the persona name for the avatar
	text: str  # what was said


@dataclass
class QuestionVerdict:
	"""
	Explains why a message was (or was not) considered product-related.
	"""
	is_product_question: bool  # final gate decision
	matched_pattern: Optional[str] = None  # regex source of the first matching question pattern
	keywords: List[str] = field(default_factory=list)  # product keywords found as substrings
	has_question_mark: bool = False  # literal '?' present


@dataclass
class SwitchDecision:
	"""
	Outcome of evaluating one transcript update in the conversation driver.
	"""
	switched: bool  # True when the active video changed on this turn
	video_index: int  # active video index after the evaluation
	reason: str  # short machine-friendly explanation
	video: Optional[VideoRecord] = None  # matched video if the selector returned one
	score: Optional[float] = None  # similarity of the matched video
