"""Command line entry points.

    bannervis [--mode MODE] [path] [seconds]

path defaults to squeezelite's shared memory file; seconds absent or 0 means
run until squeezelite clears its running flag. Frames go to stdout, the
once-a-second stats line goes to stderr.
"""

import argparse
import logging
import signal
import sys

from bannervis import __version__, config
from bannervis.errors import ResourceUnavailable, TransformSetupFailure
from bannervis.modes import MODES, create_mode
from bannervis.palette import GLOW_STYLES
from bannervis.scheduler import Scheduler
from bannervis.shm import SharedVisBuffer
from bannervis.sink import FrameSink

logger = logging.getLogger(__name__)


def seconds_arg(value: str) -> int:
    seconds = int(value)
    if seconds < 0:
        raise argparse.ArgumentTypeError(f"seconds must be >= 0, got {seconds}")
    return seconds


def build_parser(mode: str | None = None) -> argparse.ArgumentParser:
    prog = f"bannervis-{mode}" if mode else "bannervis"
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Render squeezelite audio as raw RGB frames for an LED banner.",
    )
    if mode is None:
        parser.add_argument("--mode", choices=sorted(MODES), default="spectrogram")
    parser.add_argument("path", nargs="?", default=config.SHM_PATH, help="shared memory file")
    parser.add_argument("seconds", nargs="?", type=seconds_arg, default=0, help="max runtime, 0 = forever")
    parser.add_argument("--locks", action="store_true", help="take squeezelite's read lock per tick")
    parser.add_argument("--trail", action="store_true", help="spectrum: fading pseudo-3d trail")
    parser.add_argument(
        "--palette", choices=GLOW_STYLES, default=config.GLOW_PALETTE, help="waveformf: hit count colours"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def cleanup(signum: int | None = None, frame=None) -> None:
    """Leave via SystemExit so the mapping is closed on the way out."""
    sys.exit(0)


def run(argv: list[str] | None = None, mode: str | None = None) -> int:
    args = build_parser(mode).parse_args(argv)
    mode_name = mode or args.mode

    logging.basicConfig(level=config.LOG_LEVEL)
    logger.info(f"Starting {mode_name} visualiser")
    logger.info(f"  Shared memory: {args.path}")
    logger.info(f"  Banner: {config.WIDTH}x{config.HEIGHT}, FFT size: {config.FFT_SIZE}")

    try:
        kwargs = {}
        if mode_name == "spectrum" and args.trail:
            kwargs["trail"] = True
        if mode_name == "waveformf":
            kwargs["palette"] = args.palette
        vis_mode = create_mode(mode_name, **kwargs)
    except (TransformSetupFailure, ValueError) as e:
        logger.error(f"Mode setup failed: {e}")
        return 1

    try:
        source = SharedVisBuffer(args.path, use_locks=args.locks)
    except ResourceUnavailable as e:
        logger.error(f"Shared memory unavailable: {e}")
        return 1

    with source:
        scheduler = Scheduler(source, vis_mode, FrameSink(), runtime=args.seconds)
        try:
            frames = scheduler.run()
        except BrokenPipeError:
            logger.warning("Output closed, exiting")
            return 0
    logger.info(f"Wrote {frames} frames")
    return 0


def main(argv: list[str] | None = None, mode: str | None = None) -> None:
    signal.signal(signal.SIGTERM, cleanup)
    signal.signal(signal.SIGINT, cleanup)
    sys.exit(run(argv, mode))


def spectrogram() -> None:
    main(mode="spectrogram")


def spectrum() -> None:
    main(mode="spectrum")


def vumeter() -> None:
    main(mode="vumeter")


def waveform() -> None:
    main(mode="waveform")


def waveformf() -> None:
    main(mode="waveformf")


if __name__ == "__main__":
    main()
