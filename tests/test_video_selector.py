"""
Unit tests for VideoSelector: empty and single-candidate cases, best match, ties and ranking.
Run: python tests/test_video_selector.py
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from video_match.models import VideoRecord
from video_match.similarity import calculate_text_similarity
from video_match.video_selector import VideoSelector, combined_text, find_relevant_video


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def assert_true(cond, msg):
	if not cond:
		raise AssertionError(msg)


def demo_videos():
	return [
		VideoRecord(id="a", title="Product Overview", keywords="overview features"),
		VideoRecord(id="b", title="In Action", description="used in a real-world setting"),
	]


def test_combined_text():
	v = VideoRecord(id="x", title="Title", description="Desc", keywords="kw one")
	assert_equal(combined_text(v), "Title Desc kw one", "title, description, keywords in order")
	assert_equal(combined_text(VideoRecord(id="y", title="Only Title")), "Only Title", "missing fields skipped")
	assert_equal(combined_text(VideoRecord(id="z", title="T", description="", keywords="k")), "T k", "empty fields skipped")


def test_no_candidates():
	assert_equal(find_relevant_video("how does it work?", []), None, "empty list")
	assert_equal(find_relevant_video("how does it work?", None), None, "None list")
	assert_equal(find_relevant_video("how does it work?", "not a list"), None, "non-sequence input treated as empty")


def test_single_candidate():
	only = VideoRecord(id="solo", title="Unboxing")
	for msg in ("completely unrelated words", "", None):
		result = find_relevant_video(msg, [only])
		assert_true(result is not None and result.video is only, f"single video always returned for {msg!r}")
		assert_equal(result.score, 1.0, "single video scores 1")


def test_best_match_wins():
	videos = [
		VideoRecord(id="warranty", title="Warranty"),
		VideoRecord(id="price", title="Price"),
		VideoRecord(id="intro", title="Welcome"),
	]
	result = find_relevant_video("price?", videos)
	assert_equal(result.video.id, "price", "highest similarity wins")
	assert_equal(result.score, calculate_text_similarity("price?", "Price"), "score is the raw similarity")


def test_tie_keeps_first():
	videos = [
		VideoRecord(id="first", title="Warranty"),
		VideoRecord(id="second", title="Warranty"),
	]
	assert_equal(find_relevant_video("warranty", videos).video.id, "first", "earliest candidate wins ties")


def test_zero_score_is_no_selection():
	videos = [
		VideoRecord(id="warranty", title="Warranty"),
		VideoRecord(id="price", title="Price"),
	]
	assert_equal(find_relevant_video("hello there", videos), None, "no shared terms")
	assert_equal(find_relevant_video("", videos), None, "empty message")


def test_missing_optional_fields():
	videos = [
		VideoRecord(id="a", title="Setup", description=None, keywords=None),
		VideoRecord(id="b", title="Cleaning", description="rinse the jar", keywords=None),
	]
	assert_equal(find_relevant_video("how to rinse the jar", videos).video.id, "b", "None fields treated as empty")


def test_real_world_scenario():
	videos = demo_videos()
	message = "How does this work in real-world use?"
	score_a = calculate_text_similarity(message, combined_text(videos[0]))
	score_b = calculate_text_similarity(message, combined_text(videos[1]))
	assert_true(score_b > score_a, "in-action video outranks the overview")
	result = find_relevant_video(message, videos)
	assert_equal(result.video.id, "b", "selector picks the in-action video")


def test_rank_is_stable_and_descending():
	videos = [
		VideoRecord(id="zero", title="Welcome"),
		VideoRecord(id="w1", title="Warranty"),
		VideoRecord(id="w2", title="Warranty"),
	]
	ranking = VideoSelector().rank("warranty", videos)
	assert_equal([s.video.id for s in ranking], ["w1", "w2", "zero"], "descending with stable ties")
	assert_equal(ranking[-1].score, 0.0, "unrelated candidate scores zero")

	single = VideoSelector().rank("hello there", [VideoRecord(id="solo", title="Unboxing")])
	assert_equal(single[0].score, 0.0, "rank reports raw similarity even for one candidate")


def main():
	print("Running VideoSelector tests...")
	test_combined_text()
	test_no_candidates()
	test_single_candidate()
	print(" - edge cases ok")
	test_best_match_wins()
	test_tie_keeps_first()
	test_zero_score_is_no_selection()
	test_missing_optional_fields()
	test_real_world_scenario()
	print(" - selection ok")
	test_rank_is_stable_and_descending()
	print(" - ranking ok")
	print("All VideoSelector tests passed!")


if __name__ == '__main__':
	main()
