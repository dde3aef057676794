"""Process-wide logging setup shared by the API and the CLI."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str) -> None:
    """Configure root logging once using the given level name."""

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
