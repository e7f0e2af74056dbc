"""
Replay a recorded chat transcript through the video switch driver.

This script:
1) Loads the persona's videos from a catalog file (JSONL or JSON array)
2) Loads a transcript (JSON array of {"speaker", "text"})
3) Feeds every turn to the driver
4) Logs each decision and the final active video

Usage:
    poetry run python -m scripts.replay_transcript --persona Ava
"""

import argparse  # command-line options
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from video_match.conversation import DEFAULT_CONFIDENCE_FLOOR, VideoSwitchDriver  # session driver
from video_match.data_loader import VideoCatalogLoader  # catalog + transcript loading


def main(argv=None):
	root = Path(__file__).resolve().parents[1]  # project root

	p = argparse.ArgumentParser(prog="replay-transcript")
	p.add_argument("--catalog", default=str(root / 'data' / 'videos.jsonl'))
	p.add_argument("--transcript", default=str(root / 'data' / 'sample_transcript.json'))
	p.add_argument("--persona", required=True, help="speaker name the avatar uses in the transcript")
	p.add_argument("--floor", type=float, default=DEFAULT_CONFIDENCE_FLOOR)
	args = p.parse_args(argv)

	logger.info("=" * 60)
	logger.info("Replay Transcript")
	logger.info("=" * 60)

	loader = VideoCatalogLoader()
	videos = loader.load_catalog(args.catalog)
	turns = loader.load_transcript(args.transcript)
	logger.info(f"[Replay] {len(videos)} videos, {len(turns)} turns, floor={args.floor}")

	driver = VideoSwitchDriver(args.persona, videos, confidence_floor=args.floor)
	decisions = []
	for turn in turns:
		logger.info(f"[Replay] {turn.speaker}: {turn.text}")
		decision = driver.add_turn(turn.speaker, turn.text)
		if decision is None:
			continue
		decisions.append(decision)
		score = f"{decision.score:.3f}" if decision.score is not None else "-"
		matched = decision.video.id if decision.video else "-"
		logger.info(f"[Replay]   -> {decision.reason} | match {matched} | score {score} | active #{decision.video_index}")

	switches = sum(1 for d in decisions if d.switched)
	current = driver.current_video
	logger.info(f"[Replay] Done: {switches} switch(es); active video: {current.title if current else '-'}")
	logger.info("=" * 60)
	return decisions


if __name__ == '__main__':
	main()
