"""
Persona video matcher: picks which product video to show during a live avatar chat.
"""

from .models import QuestionVerdict, ScoredVideo, SwitchDecision, TranscriptTurn, VideoRecord
from .tokenizer import tokenize, word_frequencies
from .similarity import calculate_text_similarity
from .video_selector import VideoSelector, combined_text, find_relevant_video
from .question_classifier import QuestionClassifier, is_product_question
from .conversation import DEFAULT_CONFIDENCE_FLOOR, VideoSwitchDriver
from .data_loader import VideoCatalogLoader

__all__ = [
	"QuestionVerdict",
	"ScoredVideo",
	"SwitchDecision",
	"TranscriptTurn",
	"VideoRecord",
	"tokenize",
	"word_frequencies",
	"calculate_text_similarity",
	"VideoSelector",
	"combined_text",
	"find_relevant_video",
	"QuestionClassifier",
	"is_product_question",
	"DEFAULT_CONFIDENCE_FLOOR",
	"VideoSwitchDriver",
	"VideoCatalogLoader",
]
