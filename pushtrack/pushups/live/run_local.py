"""
Local pushup counter
Runs a workout session against a camera, a recorded video or a keypoint fixture and prints rep events

    python -m pushtrack.pushups.live.run_local --camera 0
    python -m pushtrack.pushups.live.run_local --video workout.mp4
    python -m pushtrack.pushups.live.run_local --replay tests/fixtures/two_pushups.json --no-sleep
"""

import argparse
import logging
from datetime import datetime

from pushtrack.pushups.live.frame_sources import CameraFrameSource, KeypointReplaySource, VideoFrameSource
from pushtrack.pushups.live.ticker import DEFAULT_TICK_INTERVAL_SECONDS, SessionTicker, simulated_clock
from pushtrack.pushups.rep_counter.feedback import RandomPhraseProvider
from pushtrack.pushups.rep_counter.session import SessionSummary, TickResult, WorkoutSession
from pushtrack.pushups.rep_counter.thresholds import load_thresholds_from_env


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Count pushups from a camera, video or keypoint fixture")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--camera", type=int, help="Camera index")
    source.add_argument("--video", help="Recorded video path")
    source.add_argument("--replay", help="Keypoint fixture (JSON) path")
    parser.add_argument("--interval", type=float, default=DEFAULT_TICK_INTERVAL_SECONDS, help="Seconds per tick")
    parser.add_argument("--max-ticks", type=int, default=None, help="Stop after this many ticks")
    parser.add_argument("--seed", type=int, default=None, help="Seed for motivational cues")
    parser.add_argument("--no-sleep", action="store_true", help="Run as fast as possible on a simulated clock")
    return parser


def _print_rep(result: TickResult) -> None:
    event = result.rep_event
    if event is not None and event.announce:
        print(f"[rep {event.rep_number}] {event.feedback_text}")


def main(argv=None) -> SessionSummary:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    if args.replay:
        frame_source = KeypointReplaySource.from_file(args.replay)
    elif args.video:
        frame_source = VideoFrameSource(args.video)
    else:
        frame_source = CameraFrameSource(args.camera)

    session = WorkoutSession(
        thresholds=load_thresholds_from_env(),
        phrase_provider=RandomPhraseProvider(args.seed),
    )
    clock = simulated_clock(datetime.utcnow(), args.interval) if args.no_sleep else None
    if args.no_sleep:
        ticker = SessionTicker(session, frame_source, args.interval, sleep=lambda _: None, clock=clock)
    else:
        ticker = SessionTicker(session, frame_source, args.interval)
    ticker.subscribe(_print_rep)

    try:
        ticker.run(max_ticks=args.max_ticks)
    except KeyboardInterrupt:
        logging.info("Interrupted, stopping session")
    finally:
        if hasattr(frame_source, "close"):
            frame_source.close()

    summary = session.stop(now=clock() if clock else None)
    print(
        f"{summary.reps} pushups ({summary.good_reps} good, {summary.excellent_reps} excellent) "
        f"in {summary.duration_seconds}s - level {summary.pro_type}"
    )
    return summary


if __name__ == "__main__":
    main()
