"""
Data loading module.
Loads persona video catalogs and recorded transcripts from JSON / JSONL files.
"""

# Standard libs for JSON parsing, typing, and paths
import json  # read JSON documents and JSON lines
from typing import Dict, List, Optional  # type hints
from pathlib import Path  # filesystem-safe paths

# Import our data classes used across the project
from .models import TranscriptTurn, VideoRecord  # structured records

# Console logging
from loguru import logger  # console logger


class VideoCatalogLoader:
	"""
	Handles loading and normalizing product video records.
	Accepts both the web app's camelCase keys (videoUrl) and snake_case keys (video_url).
	"""

	# Alternative spellings of optional fields -> VideoRecord attribute
	FIELD_ALIASES = {
		'videoUrl': 'video_url',
		'video_url': 'video_url',
		'url': 'video_url',
		'thumbnailUrl': 'thumbnail_url',
		'thumbnail_url': 'thumbnail_url',
	}

	def load_videos_from_jsonl(self, filepath: str) -> List[VideoRecord]:
		"""
		Load videos from a JSON Lines file where each line is one JSON object.
		Malformed lines and records without an id are skipped with a warning.
		"""
		videos = []  # accumulator for parsed VideoRecord objects
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Video catalog file not found: {filepath}")

		logger.info(f"[Catalog] Loading videos from {filepath}...")

		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):  # keep track of line number for diagnostics
				if not line.strip():  # tolerate blank lines
					continue
				try:
					data = json.loads(line.strip())
					videos.append(self.parse_video(data))
				except json.JSONDecodeError as e:
					logger.warning(f"[Catalog] Skipping invalid JSON at line {line_num}: {e}")
					continue
				except (TypeError, ValueError) as e:
					logger.warning(f"[Catalog] Skipping video at line {line_num}: {e}")
					continue

		logger.info(f"[Catalog] Successfully loaded {len(videos)} videos.")
		return videos

	def load_videos_from_json(self, filepath: str) -> List[VideoRecord]:
		"""Load videos from a JSON array (the shape returned by the persona videos endpoint)."""
		filepath = Path(filepath)
		if not filepath.exists():
			raise FileNotFoundError(f"Video catalog file not found: {filepath}")

		with open(filepath, 'r', encoding='utf-8') as f:
			payload = json.load(f)
		if isinstance(payload, dict):  # {"videos": [...]} envelope
			payload = payload.get('videos')
		if not isinstance(payload, list):
			logger.warning(f"[Catalog] {filepath} holds no video list ({type(payload).__name__}); nothing loaded")
			return []

		videos = []
		for i, data in enumerate(payload):
			try:
				videos.append(self.parse_video(data))
			except (TypeError, ValueError) as e:
				logger.warning(f"[Catalog] Skipping video #{i}: {e}")
		logger.info(f"[Catalog] Loaded {len(videos)} videos from {filepath}")
		return videos

	def load_catalog(self, filepath: str) -> List[VideoRecord]:
		"""Dispatch on extension: .jsonl -> line-by-line, anything else -> JSON array."""
		if str(filepath).endswith('.jsonl'):
			return self.load_videos_from_jsonl(filepath)
		return self.load_videos_from_json(filepath)

	def parse_video(self, data: Dict) -> VideoRecord:
		"""
		Convert a raw dictionary into a VideoRecord.
		Raises ValueError when the id is missing, TypeError when data is not an object.
		"""
		if not isinstance(data, dict):
			raise TypeError(f"expected an object, got {type(data).__name__}")

		video_id = data.get('id')
		if video_id is None or str(video_id).strip() == '':
			raise ValueError("video record has no id")

		# Collect optional URL fields under whichever alias they arrived with
		extras: Dict[str, Optional[str]] = {'video_url': None, 'thumbnail_url': None}
		for key, attr in self.FIELD_ALIASES.items():
			if extras[attr] is None and data.get(key):
				extras[attr] = self._clean_text(data.get(key))

		return VideoRecord(
			id=str(video_id).strip(),
			title=self._clean_text(data.get('title')) or '',
			description=self._clean_text(data.get('description')),
			keywords=self._parse_keywords(data.get('keywords')),
			video_url=extras['video_url'],
			thumbnail_url=extras['thumbnail_url'],
		)

	def load_transcript(self, filepath: str) -> List[TranscriptTurn]:
		"""Load a recorded conversation: a JSON array of {"speaker": ..., "text": ...} objects."""
		filepath = Path(filepath)
		if not filepath.exists():
			raise FileNotFoundError(f"Transcript file not found: {filepath}")

		with open(filepath, 'r', encoding='utf-8') as f:
			payload = json.load(f)
		if not isinstance(payload, list):
			logger.warning(f"[Catalog] {filepath} holds no transcript list ({type(payload).__name__}); nothing loaded")
			return []

		turns = []
		for i, item in enumerate(payload):
			if not isinstance(item, dict) or not item.get('speaker'):
				logger.warning(f"[Catalog] Skipping transcript entry #{i}: missing speaker")
				continue
			turns.append(TranscriptTurn(speaker=str(item['speaker']), text=str(item.get('text') or '')))
		logger.info(f"[Catalog] Loaded transcript with {len(turns)} turns from {filepath}")
		return turns

	def _parse_keywords(self, value) -> Optional[str]:
		"""
		Keywords arrive either as a free-text string or as a list of tags.
		Lists are space-joined so they behave like the string form.
		"""
		if value is None:
			return None
		if isinstance(value, list):
			value = ' '.join(str(item).strip() for item in value if item)
		return self._clean_text(value)

	def _clean_text(self, text) -> Optional[str]:
		"""Trim whitespace; None and empty strings become None."""
		if text is None:
			return None
		text = str(text).strip()
		return text or None
