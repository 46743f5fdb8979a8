"""Logging setup for the command line entry point."""

import logging

NOISY_LOGGERS = ("httpx", "httpcore", "urllib3")


def configure_logging(env: str = "dev", verbose: bool = False) -> None:
    """
    Configure root logging on stderr.

    ENV=dev: INFO level with detailed format (default)
    ENV=prod/staging: WARNING level, minimal logs
    verbose: DEBUG level, including cache hits
    """
    is_dev = env.lower() == "dev"
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO if is_dev else logging.WARNING

    logging.basicConfig(
        level=level,
        format=(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
            if is_dev or verbose
            else "%(levelname)s | %(message)s"
        ),
        datefmt="%H:%M:%S",
    )

    # Silence noisy libraries
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
