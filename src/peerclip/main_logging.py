"""Logging configuration for peerclip CLI.

Sets the process log level from --verbose and caps the noisy httpx,
httpcore and uvicorn library loggers at WARNING.
"""
import logging


def configure_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity setting.

    Args:
        verbose: If True, set DEBUG level; otherwise INFO level.

    Library loggers (httpx, uvicorn) are capped at WARNING so only
    peerclip's own events show up at INFO.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
    for name in ("httpx", "httpcore", "uvicorn", "uvicorn.error"):
        logging.getLogger(name).setLevel(logging.WARNING)
