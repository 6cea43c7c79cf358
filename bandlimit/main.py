"""Command line entry point: bandlimit <input> <rate> <output>."""

import argparse
import logging
import re
import sys
from typing import List, NoReturn, Optional

import structlog

from bandlimit import __version__
from bandlimit.config import Config, LoggingConfig
from bandlimit.core.constants import PCMConstants
from bandlimit.core.resampler import BandlimitedResampler
from bandlimit.errors import ResampleError, UsageError
from bandlimit.utils.audio_io import read_audio, write_audio


PROG = "bandlimit"

# Optional leading whitespace and sign, then ASCII digits only
_RATE_PATTERN = re.compile(r"[ \t\n\v\f\r]*[+-]?[0-9]+")


def setup_logging(log_config: LoggingConfig) -> None:
    """Configure structured logging on stderr."""
    log_level = getattr(logging, log_config.log_level.upper())

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    logging.getLogger().setLevel(log_level)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_config.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad usage as UsageError instead of exiting 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = _ArgumentParser(
        prog=PROG,
        description="Resample audio with bandlimited (windowed-sinc) interpolation",
    )
    parser.add_argument("input", help="Input audio file")
    parser.add_argument("rate", help="Output sample rate in Hz")
    parser.add_argument("output", help="Output audio file (mono, 16-bit PCM)")
    parser.add_argument("--config", "-c", help="YAML file with filter and logging settings")
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_rate(value: str) -> int:
    """Parse the output rate argument.

    Raises:
        UsageError: If value is not an integer in [1, 2**31 - 1]
    """
    if not _RATE_PATTERN.fullmatch(value):
        raise UsageError(f"rate is invalid: {value}")

    rate = int(value)

    if rate < 1:
        raise UsageError(f"rate is too small: {value}")
    if rate > PCMConstants.MAX_RATE:
        raise UsageError(f"rate is too large: {value}")

    return rate


def resample_file(input_path: str, rate: int, output_path: str, config: Config) -> None:
    """Resample the first channel of an audio file to ``rate``.

    Raises:
        AudioIOError: If either file cannot be read or written
        AllocationError: If a buffer cannot be allocated
    """
    logger = structlog.get_logger(__name__)

    source = read_audio(input_path)
    resampler = BandlimitedResampler(source.sample_rate, rate, config.filter)

    if source.channels > 1:
        logger.info("Using first channel only", channels=source.channels)

    output = resampler.process(source.first_channel())
    write_audio(output_path, output, rate, source.container)

    logger.info(
        "Resampling complete",
        source_rate=source.sample_rate,
        target_rate=rate,
        input_frames=source.frames,
        output_frames=len(output)
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit status."""
    parser = create_parser()

    try:
        args = parser.parse_args(argv)
        rate = parse_rate(args.rate)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"{PROG}: {e}", file=sys.stderr)
        return 1

    try:
        config = Config.from_yaml_or_default(args.config)
        if args.log_level:
            config.logging.log_level = args.log_level
            config.logging.validate()
    except (FileNotFoundError, ValueError) as e:
        print(f"{PROG}: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging)

    logger = structlog.get_logger(__name__)

    try:
        resample_file(args.input, rate, args.output, config)
    except ResampleError as e:
        logger.debug("Resampling failed", error=str(e), exc_info=True)
        print(f"{PROG}: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error("Fatal error", error=str(e), exc_info=True)
        print(f"{PROG}: {e}", file=sys.stderr)
        return 1

    return 0


def cli() -> None:
    """CLI entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
