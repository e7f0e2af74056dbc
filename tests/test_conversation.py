"""
Unit tests for VideoSwitchDriver: trigger latch, confidence floor and transcript handling.
Run: python tests/test_conversation.py
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from video_match.conversation import VideoSwitchDriver
from video_match.models import TranscriptTurn, VideoRecord


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def assert_true(cond, msg):
	if not cond:
		raise AssertionError(msg)


def assert_raises(fn, msg):
	try:
		fn()
	except ValueError:
		return
	raise AssertionError(msg)


def catalog():
	return [
		VideoRecord(id="intro", title="Welcome"),
		VideoRecord(id="warranty", title="Warranty"),
		VideoRecord(id="price", title="Price"),
	]


def test_switch_and_latch():
	driver = VideoSwitchDriver("Ava", catalog())
	assert_equal(driver.current_video_index, 0, "first video shown initially")

	d = driver.add_turn("Ava", "Hi, I'm Ava!")
	assert_equal(d.reason, "transcript_too_short", "greeting alone cannot trigger")

	assert_equal(driver.add_turn("You", "warranty?"), None, "user turns only record")
	d = driver.add_turn("Ava", "Two years, no questions asked.")
	assert_true(d.switched, "product question switches the video")
	assert_equal(d.video_index, 1, "warranty video selected")
	assert_equal(driver.current_video.id, "warranty", "active video updated")
	assert_true(d.score > 0.3, "match cleared the floor")

	d = driver.add_turn("Ava", "Anything else?")
	assert_true(not d.switched, "latched until the user speaks again")
	assert_equal(d.reason, "already_triggered", "latch reason")

	driver.add_turn("You", "price?")
	d = driver.add_turn("Ava", "It is 99 dollars.")
	assert_true(d.switched, "new user turn resets the latch")
	assert_equal(driver.current_video_index, 2, "price video selected")


def test_non_product_question_keeps_video():
	driver = VideoSwitchDriver("Ava", catalog())
	driver.add_turn("You", "hello there")
	d = driver.add_turn("Ava", "Hello!")
	assert_true(not d.switched, "small talk never switches")
	assert_equal(d.reason, "not_product_question", "classifier gate")
	assert_equal(driver.current_video_index, 0, "index unchanged")


def test_confidence_floor():
	driver = VideoSwitchDriver("Ava", catalog(), confidence_floor=0.6)
	driver.add_turn("You", "warranty?")
	d = driver.add_turn("Ava", "Two years.")
	assert_true(not d.switched, "score about 0.59 does not clear 0.6")
	assert_equal(d.reason, "below_confidence_floor", "floor reason")
	assert_equal(d.video.id, "warranty", "best guess still reported")

	# Single video scores exactly 1; the floor comparison is strict
	single = VideoSwitchDriver("Ava", [VideoRecord(id="solo", title="Unboxing")], confidence_floor=1.0)
	single.add_turn("You", "How does it work?")
	d = single.add_turn("Ava", "Like this.")
	assert_equal(d.reason, "below_confidence_floor", "score 1.0 is not > 1.0")

	assert_raises(lambda: VideoSwitchDriver("Ava", catalog(), confidence_floor=1.5), "floor above 1 rejected")
	assert_raises(lambda: VideoSwitchDriver("Ava", catalog(), confidence_floor=-0.1), "negative floor rejected")


def test_no_match():
	driver = VideoSwitchDriver("Ava", catalog())
	driver.add_turn("You", "what about refunds?")
	d = driver.add_turn("Ava", "Within 30 days.")
	assert_equal(d.reason, "no_match", "product question without any related video")

	empty = VideoSwitchDriver("Ava", [])
	empty.add_turn("You", "How does it work?")
	assert_equal(empty.add_turn("Ava", "Like this.").reason, "no_match", "no videos at all")
	assert_equal(empty.current_video, None, "no active video")


def test_awaiting_reply_and_other_speakers():
	driver = VideoSwitchDriver("Ava", catalog())
	driver.add_turn("You", "warranty?")
	assert_equal(driver.add_turn("Moderator", "note"), None, "other speakers are recorded only")
	assert_equal(driver.evaluate().reason, "awaiting_persona_reply", "last turn is not the persona")


def test_duplicate_turns_skipped():
	driver = VideoSwitchDriver("Ava", catalog())
	driver.add_turn("You", "hello")
	driver.add_turn("You", "hello")
	driver.add_turn("Ava", "Hi!")
	driver.add_turn("Ava", "Hi!")
	assert_equal(len(driver.transcript), 2, "consecutive duplicates collapse")
	driver.add_turn("Ava", "How can I help?")
	assert_equal(len(driver.transcript), 3, "different text is appended")


def test_manual_selection_and_replay():
	driver = VideoSwitchDriver("Ava", catalog())
	assert_true(driver.set_current_video(2), "valid index accepted")
	assert_true(not driver.set_current_video(7), "invalid index ignored")
	assert_equal(driver.current_video_index, 2, "index kept after invalid selection")

	decisions = VideoSwitchDriver("Ava", catalog()).replay([
		TranscriptTurn("Ava", "Hi!"),
		TranscriptTurn("You", "warranty?"),
		TranscriptTurn("Ava", "Two years."),
		TranscriptTurn("You", "nice day"),
		TranscriptTurn("Ava", "Indeed."),
	])
	assert_equal([d.reason for d in decisions], ["transcript_too_short", "switched", "not_product_question"], "one decision per persona turn")
	assert_equal(decisions[-1].video_index, 1, "video kept after small talk")


def main():
	print("Running VideoSwitchDriver tests...")
	test_switch_and_latch()
	print(" - latch ok")
	test_non_product_question_keeps_video()
	test_confidence_floor()
	test_no_match()
	print(" - gates ok")
	test_awaiting_reply_and_other_speakers()
	test_duplicate_turns_skipped()
	test_manual_selection_and_replay()
	print(" - transcript ok")
	print("All VideoSwitchDriver tests passed!")


if __name__ == '__main__':
	main()
