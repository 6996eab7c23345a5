"""Logging setup for the API process."""
import logging


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a stream handler on the root logger at the given level."""
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        force=True,
    )
    # uvicorn's access log duplicates the request timing lines
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
