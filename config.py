import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    # Flask rejects larger request bodies; inputs are held whole in memory
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024
    DEFAULT_SYMBOLS = "bytes"
    STRICT_DECODE = True
    LOG_LEVEL = "INFO"
    HOST = "0.0.0.0"
    PORT = 8080


def configure_logging(level="INFO"):
    if isinstance(level, str):
        name = level.upper()
        if name not in LOG_LEVELS:
            raise ValueError(f"unknown log level {level!r}, expected one of {', '.join(LOG_LEVELS)}")
        level = getattr(logging, name)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
