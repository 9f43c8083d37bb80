"""Logging configuration for the chartcraft CLI and embedding services."""

import logging

PACKAGE_LOGGER = "chartcraft"


def setup_logging(
    verbose: bool = False,
    json_format: bool = False,
) -> None:
    """Configure logging for command-line use.

    The engine itself never configures handlers; it only emits records on
    the ``chartcraft`` logger hierarchy. Call this from entry points.

    Args:
        verbose: Enable debug level logging for chartcraft modules.
        json_format: Use JSON lines for log output (useful for log shippers).
    """
    level = logging.DEBUG if verbose else logging.INFO

    if json_format:
        format_str = (
            '{"time": "%(asctime)s", "level": "%(levelname)s", '
            '"name": "%(name)s", "message": "%(message)s"}'
        )
    else:
        format_str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

    logging.basicConfig(
        level=logging.WARNING,
        format=format_str,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Only our own hierarchy follows --verbose; third-party loggers stay quiet
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)

