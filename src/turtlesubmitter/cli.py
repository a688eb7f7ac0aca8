"""Command line entry point for the hunt scouter."""

import argparse
import asyncio
import logging
import signal
import sys

from .config import ScouterConfig, load_config
from .errors import ScouterStartupError
from .log_discovery import detect_default_log_directory, get_latest_file
from .logging_manager import LoggingManager
from .scouter import Scouter

logger = logging.getLogger("turtlesubmitter.cli")

SOURCE_URL = "https://github.com/Sidiousious/turtlesubmitter"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="turtlesubmitter",
        description="Report hunt sightings from the ACT/IINACT network log to Turtle.",
    )
    parser.add_argument(
        "--expansions",
        default="",
        help="which expansions to scout, e.g. DT,EW (default: all)",
    )
    parser.add_argument(
        "--turtle",
        default=None,
        help="share URL from turtle, e.g. https://scout.wobbuffet.net/scout/foo/bar",
    )
    parser.add_argument(
        "--lookback",
        default="4h",
        help="how long to look back in the latest log file, e.g. 4h or 1h30m",
    )
    parser.add_argument(
        "--logdir",
        default=None,
        help="directory where the log files are located (default: detected)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="console log level (default: TURTLE_LOG_LEVEL or INFO)",
    )
    return parser


def print_gpl_notice() -> None:
    logger.info("This software is licensed under the terms of the GNU General Public License v3.0.")
    logger.info(f"Source code and full license is available at {SOURCE_URL}")


async def run_scouter(config: ScouterConfig) -> None:
    """Discover the latest log file and scout it until interrupted."""
    log_dir = config.log_dir or str(detect_default_log_directory())
    log_file = get_latest_file(log_dir)

    scouter = Scouter(config)

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGTERM, scouter.stop)
    except NotImplementedError:
        # Windows event loops have no signal handler support
        pass

    try:
        await scouter.run(log_file)
    except asyncio.CancelledError:
        logger.info("Scouting cancelled")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(
            share_url=args.turtle,
            expansions=args.expansions,
            lookback=args.lookback,
            log_dir=args.logdir,
            log_level=args.log_level,
        )
    except ScouterStartupError as e:
        logging.basicConfig(level=logging.INFO)
        logger.critical(str(e))
        return 1

    logging_manager = LoggingManager(config.log_output_dir, config.log_level)
    print_gpl_notice()

    try:
        asyncio.run(run_scouter(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except (ScouterStartupError, OSError) as e:
        logger.critical(str(e))
        return 1
    finally:
        logging_manager.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
