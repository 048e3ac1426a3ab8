"""Command line entry point: ``python -m sinewave "some text" --wav speech.wav``."""

from __future__ import annotations

import argparse
import shlex
import sys
from typing import Optional, Sequence

from sinewave.config import ExtractionConfig, load_preset
from sinewave.errors import EmptyInput
from sinewave.export.writer import write_trajectory
from sinewave.log import setup_logger
from sinewave.orchestrator import FormantExtractor
from sinewave.sources import CommandSource, WaveformSource, WavFileSource


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sinewave",
        description="Extract F1-F3 formant trajectories for sinewave speech.",
    )
    parser.add_argument("text", help="utterance text (drives the phoneme fallback)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--wav", help="recording of the utterance to analyze")
    group.add_argument(
        "--tts-command",
        help="TTS command writing WAV to stdout; {text} is substituted",
    )
    parser.add_argument("--preset", help="YAML file with extraction settings")
    parser.add_argument("--out", help="write the trajectory (.parquet or .json)")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log = setup_logger("sinewave", level=args.log_level.upper(), log_file=args.log_file)

    cfg = load_preset(args.preset) if args.preset else ExtractionConfig()
    source: Optional[WaveformSource] = None
    if args.wav:
        source = WavFileSource(args.wav)
    elif args.tts_command:
        source = CommandSource(shlex.split(args.tts_command))

    extractor = FormantExtractor(source=source, cfg=cfg)
    try:
        trajectory = extractor.generate_sync(args.text)
    except EmptyInput as exc:
        log.error("%s", exc)
        return 2

    log.info(
        "method=%s duration=%.3f s points=%d",
        trajectory.method.value,
        trajectory.total_duration,
        len(trajectory.f1),
    )
    if args.out:
        path = write_trajectory(args.out, trajectory)
        log.info("trajectory written to %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
