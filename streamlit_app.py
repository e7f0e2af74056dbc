"""
Streamlit UI for the persona video matcher.
Calls the local FastAPI server at http://localhost:8000 to classify and match messages,
or runs the engine in-process against the catalog file when the API isn't reachable.
The live chat section drives a VideoSwitchDriver session (API /sessions or in-process).

Run API (optional):   uvicorn api:app --reload
Run UI:                streamlit run streamlit_app.py
"""

# HTTP client to call the API when running in API mode
import requests  # make web requests to the FastAPI server
# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives
# Path utilities to find the catalog file
from pathlib import Path  # path handling
# Typing to make function signatures clearer
from typing import List  # list types

# Local engine imports for fallback/local mode (when API isn't used)
from video_match.conversation import DEFAULT_CONFIDENCE_FLOOR, DEFAULT_USER_SPEAKER, VideoSwitchDriver  # floor, speaker label, chat driver
from video_match.data_loader import VideoCatalogLoader  # load videos from file
from video_match.models import VideoRecord  # catalog record
from video_match.question_classifier import QuestionClassifier  # product-question gate
from video_match.video_selector import VideoSelector  # best-match selection

# Default URL where the FastAPI server is expected to run locally
DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_CATALOG = Path('data') / 'videos.jsonl'

st.set_page_config(page_title="Persona Video Match", layout="wide")
st.title("🎥 Persona Video Match")


@st.cache_resource(show_spinner=True)
def load_local_catalog(path: str) -> List[VideoRecord]:
	"""Load the catalog once per session for local mode."""
	try:
		return VideoCatalogLoader().load_catalog(path)
	except Exception as e:
		st.error(f"Failed to load catalog '{path}': {e}")
		return []


def video_dict(v: VideoRecord) -> dict:
	return {
		"id": v.id,
		"title": v.title,
		"description": v.description,
		"keywords": v.keywords,
		"video_url": v.video_url,
		"thumbnail_url": v.thumbnail_url,
	}


def run_local(message: str, videos: List[VideoRecord], floor: float) -> dict:
	"""Produce the same payload shape the API returns, without a server."""
	verdict = QuestionClassifier().classify(message)
	selector = VideoSelector()
	best = selector.select(message, videos)

	def as_dict(s):
		return {"video": video_dict(s.video), "score": round(s.score, 4)}

	return {
		"classify": {
			"is_product_question": verdict.is_product_question,
			"matched_pattern": verdict.matched_pattern,
			"keywords": verdict.keywords,
		},
		"match": {
			"best": as_dict(best) if best else None,
			"above_floor": bool(best and best.score > floor),
			"confidence_floor": floor,
			"ranking": [as_dict(s) for s in selector.rank(message, videos)],
		},
	}


with st.sidebar:
	st.header("Settings")
	api_url = st.text_input("API URL", DEFAULT_API_URL)
	persona_name = st.text_input("Persona name", "Ava", help="Speaker label the avatar uses in the chat transcript")
	catalog_path = st.text_input("Catalog file (local mode)", str(DEFAULT_CATALOG))
	floor = st.slider("Confidence floor (local mode)", min_value=0.0, max_value=1.0, value=DEFAULT_CONFIDENCE_FLOOR, step=0.05)
	use_local = st.toggle("Use local engine", value=False, help="If enabled or API is unreachable, matching runs in this process.")

# If not forcing local, check quickly whether the API is reachable
api_available = False
if not use_local:
	try:
		h = requests.get(f"{api_url}/health", timeout=3)
		api_available = h.ok
	except requests.RequestException:
		api_available = False
		st.sidebar.info("API not reachable; will use local engine.")

local_videos: List[VideoRecord] = []
if use_local or not api_available:
	local_videos = load_local_catalog(catalog_path)
	st.sidebar.success(f"Local catalog: {len(local_videos)} videos")

message = st.text_input("What does the shopper ask?", placeholder="e.g., How does this work in real-world use?")

col1, col2 = st.columns([1, 3])
with col1:
	match_btn = st.button("Match", type="primary")
with col2:
	st.caption("Tip: Try 'What is the price and warranty?' or 'show me the features'")

if match_btn and message.strip():
	with st.spinner("Matching..."):
		try:
			if use_local or not api_available:
				payload = run_local(message, local_videos, floor)
			else:
				c = requests.post(f"{api_url}/classify", json={"message": message}, timeout=30)
				c.raise_for_status()
				m = requests.post(f"{api_url}/match", json={"message": message}, timeout=30)
				m.raise_for_status()
				payload = {"classify": c.json(), "match": m.json()}

			verdict = payload["classify"]
			result = payload["match"]
			if verdict["is_product_question"]:
				st.success(f"Product question (pattern: {verdict.get('matched_pattern') or '-'}, keywords: {', '.join(verdict.get('keywords') or []) or '-'})")
			else:
				st.warning("Not a product question; the chat would keep the current video.")

			best = result.get("best")
			if best and result.get("above_floor"):
				video = best["video"]
				st.subheader(f"Show: {video['title']} (score {best['score']:.3f})")
				if video.get("video_url"):
					st.video(video["video_url"])
			elif best:
				st.info(f"Best guess '{best['video']['title']}' scored {best['score']:.3f}, not above the floor {result['confidence_floor']}")
			else:
				st.info("No video shares any term with this message.")

			st.divider()
			for i, item in enumerate(result.get("ranking", []), start=1):
				v = item["video"]
				c1, c2 = st.columns([1, 4])
				with c1:
					if v.get("thumbnail_url"):
						st.image(v["thumbnail_url"], width='stretch')
				with c2:
					st.markdown(f"**{i}. {v['title']}**")
					st.caption(f"Similarity: {item['score']:.3f}")
					if v.get("description"):
						st.write(v["description"])
					if v.get("keywords"):
						st.caption(f"Keywords: {v['keywords']}")
		except requests.RequestException as e:
			st.error(f"API request failed: {e}")


# ---------------------------------------------------------------------------
# Live chat: feed shopper and persona turns through the video switch driver
# ---------------------------------------------------------------------------

def reset_chat(config: tuple) -> None:
	"""Drop the current chat session (and its server-side copy) and start fresh."""
	old_id = st.session_state.get("chat_session_id")
	if old_id and st.session_state.get("chat_config", (None,))[0] == "api":
		try:
			requests.delete(f"{api_url}/sessions/{old_id}", timeout=5)
		except requests.RequestException as e:
			st.sidebar.caption(f"Could not end chat session {old_id}: {e}")
	st.session_state["chat_config"] = config
	st.session_state["chat_session_id"] = None
	st.session_state["chat_driver"] = None
	st.session_state["chat_turns"] = []
	st.session_state["chat_last"] = None
	st.session_state["chat_video"] = None


def local_chat_turn(speaker: str, text: str) -> dict:
	driver = st.session_state.get("chat_driver")
	if driver is None:
		driver = VideoSwitchDriver(persona_name.strip(), local_videos, confidence_floor=floor)
		st.session_state["chat_driver"] = driver
	decision = driver.add_turn(speaker, text)
	current = driver.current_video
	st.session_state["chat_video"] = video_dict(current) if current else None
	if decision is None:
		return {"switched": False, "reason": None, "current_video_index": driver.current_video_index}
	return {
		"switched": decision.switched,
		"reason": decision.reason,
		"current_video_index": decision.video_index,
		"video": video_dict(decision.video) if decision.video else None,
		"score": decision.score,
	}


def api_chat_turn(speaker: str, text: str) -> dict:
	session_id = st.session_state.get("chat_session_id")
	if not session_id:
		r = requests.post(f"{api_url}/sessions", json={"persona_name": persona_name.strip()}, timeout=30)
		r.raise_for_status()
		session_id = r.json()["session_id"]
		st.session_state["chat_session_id"] = session_id
	r = requests.post(f"{api_url}/sessions/{session_id}/turns", json={"speaker": speaker, "text": text}, timeout=30)
	r.raise_for_status()
	result = r.json()
	s = requests.get(f"{api_url}/sessions/{session_id}", timeout=30)
	s.raise_for_status()
	st.session_state["chat_video"] = s.json().get("current_video")
	return result


st.divider()
st.header(f"💬 Live chat with {persona_name or 'the persona'}")
st.caption("The shopper speaks as 'You'. Each persona reply re-checks the shopper's last message and may switch the video.")

chat_mode = "local" if (use_local or not api_available) else "api"
chat_config = (chat_mode, persona_name, catalog_path if chat_mode == "local" else api_url, floor if chat_mode == "local" else None)
if st.session_state.get("chat_config") != chat_config:
	reset_chat(chat_config)

chat_col, video_col = st.columns([3, 2])
with chat_col:
	with st.form("shopper_turn", clear_on_submit=True):
		shopper_text = st.text_input("Shopper (You)", placeholder="e.g., Show me blades")
		shopper_send = st.form_submit_button("Send as shopper")
	with st.form("persona_turn", clear_on_submit=True):
		persona_text = st.text_input(f"Persona ({persona_name or '-'})", placeholder="e.g., Sure, here they are.")
		persona_send = st.form_submit_button("Send as persona")
	if st.button("Reset chat"):
		reset_chat(chat_config)

	turn = None
	if shopper_send and shopper_text.strip():
		turn = (DEFAULT_USER_SPEAKER, shopper_text.strip())
	elif persona_send and persona_text.strip() and persona_name.strip():
		turn = (persona_name.strip(), persona_text.strip())
	elif persona_send and not persona_name.strip():
		st.warning("Set a persona name in the sidebar first.")

	if turn:
		try:
			handler = local_chat_turn if chat_mode == "local" else api_chat_turn
			st.session_state["chat_last"] = handler(*turn)
			st.session_state["chat_turns"].append(turn)
		except (requests.RequestException, ValueError) as e:
			st.error(f"Chat turn failed: {e}")

	for speaker, text in st.session_state.get("chat_turns", []):
		role = "user" if speaker == DEFAULT_USER_SPEAKER else "assistant"
		with st.chat_message(role):
			st.markdown(f"**{speaker}:** {text}")

with video_col:
	last = st.session_state.get("chat_last")
	if last and last.get("reason"):
		score = last.get("score")
		score_text = f" (score {score:.3f})" if score is not None else ""
		if last.get("switched"):
			st.success(f"Switched to #{last['current_video_index']}{score_text}")
		else:
			st.info(f"Kept video #{last['current_video_index']}: {last['reason']}{score_text}")

	active = st.session_state.get("chat_video")
	if active:
		st.subheader(f"Now showing: {active['title']}")
		if active.get("video_url"):
			st.video(active["video_url"])
		elif active.get("thumbnail_url"):
			st.image(active["thumbnail_url"], width='stretch')
	else:
		st.caption("No video yet; the first catalog video shows once the chat starts.")

st.sidebar.markdown("---")
if use_local or not api_available:
	st.sidebar.caption("Mode: Local engine")
else:
	st.sidebar.caption("Mode: API client (ensure uvicorn api:app --reload is running)")
