"""
FastAPI server exposing the persona video matcher.
Endpoints:
- GET /health: basic health check
- POST /classify: is a message a product question?
- POST /match: best video for a message (catalog or supplied videos) plus the full ranking
- POST /sessions: start a chat session that tracks the active video
- POST /sessions/{session_id}/turns: feed a transcript turn, get the switch decision
- GET /sessions/{session_id}: transcript and active video of a session
- DELETE /sessions/{session_id}: end a session (sessions beyond VIDEO_MATCH_MAX_SESSIONS evict the oldest)

Startup loads the catalog from VIDEO_MATCH_CATALOG (default data/videos.jsonl) when present.
"""

# Import standard libraries for env-based settings, ids and timing
import os  # environment configuration
import time  # measure startup and request latencies
import uuid  # session identifiers
from collections import OrderedDict  # sessions in creation order, for eviction
from typing import List, Optional  # precise typing for clarity
from pathlib import Path  # path-safe filesystem handling

# Import FastAPI for building the web API and Pydantic for request/response models
from fastapi import FastAPI, HTTPException  # FastAPI primitives
from pydantic import BaseModel  # schema definitions

# Import our internal modules for data loading and matching
from video_match.conversation import DEFAULT_CONFIDENCE_FLOOR, VideoSwitchDriver  # session driver
from video_match.data_loader import VideoCatalogLoader  # loads and normalizes videos
from video_match.models import ScoredVideo, VideoRecord  # core records
from video_match.question_classifier import QuestionClassifier  # product-question gate
from video_match.video_selector import VideoSelector  # best-match selection

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Configuration from the environment
CATALOG_PATH = os.getenv("VIDEO_MATCH_CATALOG", "data/videos.jsonl")
CONFIDENCE_FLOOR: float = DEFAULT_CONFIDENCE_FLOOR  # replaced by load_confidence_floor() at startup
MAX_SESSIONS = int(os.getenv("VIDEO_MATCH_MAX_SESSIONS", "1000"))  # oldest sessions are evicted beyond this


def load_confidence_floor() -> float:
	"""
	Read VIDEO_MATCH_CONFIDENCE_FLOOR and check it lies in [0..1].
	Raises ValueError so a misconfigured server fails at startup instead of on every session.
	"""
	raw = os.getenv("VIDEO_MATCH_CONFIDENCE_FLOOR", str(DEFAULT_CONFIDENCE_FLOOR))
	try:
		floor = float(raw)
	except ValueError as e:
		raise ValueError(f"VIDEO_MATCH_CONFIDENCE_FLOOR must be a number, got '{raw}'") from e
	if not 0.0 <= floor <= 1.0:
		raise ValueError(f"VIDEO_MATCH_CONFIDENCE_FLOOR must be between 0.0 and 1.0, got {floor}")
	return floor


# Instantiate the FastAPI application with metadata
app = FastAPI(title="Persona Video Match API", version="1.0.0")

# Shared, stateless components
CLASSIFIER = QuestionClassifier()
SELECTOR = VideoSelector()

# Globals that hold the loaded catalog, live sessions and measured startup time
CATALOG: List[VideoRecord] = []
SESSIONS: "OrderedDict[str, VideoSwitchDriver]" = OrderedDict()
STARTUP_TIME_S: float = 0.0


class VideoIn(BaseModel):
	id: str
	title: str
	description: Optional[str] = None
	keywords: Optional[str] = None
	video_url: Optional[str] = None
	thumbnail_url: Optional[str] = None


class VideoOut(VideoIn):
	pass


class ScoredVideoOut(BaseModel):
	video: VideoOut
	score: float


class ClassifyRequest(BaseModel):
	message: str


class ClassifyResponse(BaseModel):
	message: str
	is_product_question: bool
	matched_pattern: Optional[str] = None
	keywords: List[str]
	has_question_mark: bool


class MatchRequest(BaseModel):
	message: str
	videos: Optional[List[VideoIn]] = None  # falls back to the startup catalog


class MatchResponse(BaseModel):
	message: str
	best: Optional[ScoredVideoOut] = None  # selector result, None when nothing relates
	above_floor: bool  # best.score > confidence floor
	confidence_floor: float
	ranking: List[ScoredVideoOut]
	elapsed_ms: float


class SessionCreate(BaseModel):
	persona_name: str
	videos: Optional[List[VideoIn]] = None
	confidence_floor: Optional[float] = None


class SessionCreated(BaseModel):
	session_id: str
	persona_name: str
	video_count: int
	current_video_index: int


class TurnIn(BaseModel):
	speaker: str
	text: str


class TurnOut(BaseModel):
	switched: bool
	reason: Optional[str] = None  # None for user turns, which are only recorded
	current_video_index: int
	video: Optional[VideoOut] = None
	score: Optional[float] = None


class TranscriptTurnOut(BaseModel):
	speaker: str
	text: str


class SessionOut(BaseModel):
	session_id: str
	persona_name: str
	current_video_index: int
	current_video: Optional[VideoOut] = None
	transcript: List[TranscriptTurnOut]


def _to_record(v: VideoIn) -> VideoRecord:
	return VideoRecord(
		id=v.id,
		title=v.title,
		description=v.description,
		keywords=v.keywords,
		video_url=v.video_url,
		thumbnail_url=v.thumbnail_url,
	)


def _to_out(v: VideoRecord) -> VideoOut:
	return VideoOut(
		id=v.id,
		title=v.title,
		description=v.description,
		keywords=v.keywords,
		video_url=v.video_url,
		thumbnail_url=v.thumbnail_url,
	)


def _scored_out(s: ScoredVideo) -> ScoredVideoOut:
	return ScoredVideoOut(video=_to_out(s.video), score=round(s.score, 4))


def _get_session(session_id: str) -> VideoSwitchDriver:
	driver = SESSIONS.get(session_id)
	if driver is None:
		raise HTTPException(status_code=404, detail=f"unknown session '{session_id}'")
	return driver


# FastAPI startup hook to load the catalog once
@app.on_event("startup")
async def startup_event():
	"""Load the default video catalog if the configured file exists."""
	global CATALOG, CONFIDENCE_FLOOR, STARTUP_TIME_S
	start = time.time()

	CONFIDENCE_FLOOR = load_confidence_floor()

	if Path(CATALOG_PATH).exists():
		CATALOG = VideoCatalogLoader().load_catalog(CATALOG_PATH)
	else:
		logger.warning(f"[API] Catalog '{CATALOG_PATH}' not found; requests must supply their own videos")
		CATALOG = []

	STARTUP_TIME_S = time.time() - start
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s with {len(CATALOG)} catalog videos")


@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness checks."""
	return {
		"status": "ok",
		"catalog_size": len(CATALOG),
		"confidence_floor": CONFIDENCE_FLOOR,
		"sessions": len(SESSIONS),
		"startup_seconds": round(STARTUP_TIME_S, 2),
	}


@app.post("/classify", response_model=ClassifyResponse)
async def classify(req: ClassifyRequest):
	"""Run the product-question gate on one message."""
	verdict = CLASSIFIER.classify(req.message)
	return ClassifyResponse(
		message=req.message,
		is_product_question=verdict.is_product_question,
		matched_pattern=verdict.matched_pattern,
		keywords=verdict.keywords,
		has_question_mark=verdict.has_question_mark,
	)


@app.post("/match", response_model=MatchResponse)
async def match(req: MatchRequest):
	"""Pick the most relevant video for a message and report how every candidate scored."""
	start = time.time()
	videos = [_to_record(v) for v in req.videos] if req.videos is not None else CATALOG
	logger.debug(f"[API] /match message='{req.message}' candidates={len(videos)}")

	best = SELECTOR.select(req.message, videos)
	ranking = SELECTOR.rank(req.message, videos)
	elapsed_ms = (time.time() - start) * 1000
	logger.info(f"[API] /match scored {len(videos)} videos in {elapsed_ms:.2f} ms")

	return MatchResponse(
		message=req.message,
		best=_scored_out(best) if best else None,
		above_floor=bool(best and best.score > CONFIDENCE_FLOOR),
		confidence_floor=CONFIDENCE_FLOOR,
		ranking=[_scored_out(s) for s in ranking],
		elapsed_ms=round(elapsed_ms, 2),
	)


@app.post("/sessions", response_model=SessionCreated)
async def create_session(req: SessionCreate):
	"""Start a session; its videos default to the catalog."""
	videos = [_to_record(v) for v in req.videos] if req.videos is not None else list(CATALOG)
	floor = req.confidence_floor if req.confidence_floor is not None else CONFIDENCE_FLOOR
	try:
		driver = VideoSwitchDriver(req.persona_name, videos, confidence_floor=floor)
	except ValueError as e:
		raise HTTPException(status_code=400, detail=str(e)) from e

	session_id = uuid.uuid4().hex[:16]
	SESSIONS[session_id] = driver
	while len(SESSIONS) > MAX_SESSIONS:
		evicted, _ = SESSIONS.popitem(last=False)
		logger.warning(f"[API] Session limit {MAX_SESSIONS} reached; evicted oldest session {evicted}")
	logger.info(f"[API] Session {session_id} started for persona '{req.persona_name}' with {len(videos)} videos")
	return SessionCreated(
		session_id=session_id,
		persona_name=req.persona_name,
		video_count=len(videos),
		current_video_index=driver.current_video_index,
	)


@app.post("/sessions/{session_id}/turns", response_model=TurnOut)
async def add_turn(session_id: str, turn: TurnIn):
	"""Record a transcript turn; persona turns may switch the active video."""
	driver = _get_session(session_id)
	decision = driver.add_turn(turn.speaker, turn.text)
	if decision is None:
		return TurnOut(switched=False, current_video_index=driver.current_video_index)
	return TurnOut(
		switched=decision.switched,
		reason=decision.reason,
		current_video_index=decision.video_index,
		video=_to_out(decision.video) if decision.video else None,
		score=round(decision.score, 4) if decision.score is not None else None,
	)


@app.get("/sessions/{session_id}", response_model=SessionOut)
async def get_session(session_id: str):
	driver = _get_session(session_id)
	current = driver.current_video
	return SessionOut(
		session_id=session_id,
		persona_name=driver.persona_name,
		current_video_index=driver.current_video_index,
		current_video=_to_out(current) if current else None,
		transcript=[TranscriptTurnOut(speaker=t.speaker, text=t.text) for t in driver.transcript],
	)


@app.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
	"""End a session and drop its transcript."""
	if SESSIONS.pop(session_id, None) is None:
		raise HTTPException(status_code=404, detail=f"unknown session '{session_id}'")
	logger.info(f"[API] Session {session_id} ended")
	return {"ok": True, "session_id": session_id}
