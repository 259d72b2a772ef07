"""
Logging Configuration

Applies level and format to the root and Flask loggers based on app config.
"""

import logging

DEV_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
PROD_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

NOISY_LOGGERS = ("werkzeug", "sqlalchemy.engine", "alembic")


def configure_logging(app):
    """Configure logging for the given Flask app from LOG_LEVEL and DEBUG."""
    level = _coerce_level(app.config.get("LOG_LEVEL", "DEBUG" if app.debug else "INFO"))

    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(logging.StreamHandler())
    root.setLevel(level)
    app.logger.setLevel(level)

    if level > logging.DEBUG:
        for noisy in NOISY_LOGGERS:
            logging.getLogger(noisy).setLevel(logging.WARNING)

    formatter = logging.Formatter(DEV_FORMAT if app.debug else PROD_FORMAT)
    for handler in root.handlers + app.logger.handlers:
        handler.setFormatter(formatter)


def _coerce_level(raw_level):
    if isinstance(raw_level, int):
        return raw_level
    if isinstance(raw_level, str):
        return getattr(logging, raw_level.strip().upper(), logging.INFO)
    return logging.INFO
