"""Logging setup for the dealdesk CLI.

Log lines go to stderr by default. With ``DEALDESK_LOG_FILE`` set they are
written to that file instead, so they do not interleave with the menus.
"""

import logging
import sys

from dealdesk.settings import settings

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Third-party loggers that are noisy below WARNING.
QUIET_LOGGERS = {
    "alembic.runtime.migration": logging.WARNING,
    "botocore": logging.WARNING,
    "boto3": logging.WARNING,
    "s3transfer": logging.WARNING,
    "urllib3": logging.WARNING,
}


def _formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        from pythonjsonlogger.json import JsonFormatter

        return JsonFormatter(
            fmt=JSON_FORMAT,
            rename_fields={"asctime": "timestamp", "levelname": "level"},
            static_fields={"app": "dealdesk"},
        )
    return logging.Formatter(TEXT_FORMAT)


def _handler() -> logging.Handler:
    if settings.log_file:
        return logging.FileHandler(settings.log_file, encoding="utf-8")
    return logging.StreamHandler(sys.stderr)


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger from settings.

    ``level`` overrides ``settings.log_level``. Call ``reconfigure()`` after
    Alembic migrations, whose ``fileConfig`` replaces the root handlers.
    """
    name = (level or settings.log_level).upper()
    numeric = getattr(logging, name, None)
    if not isinstance(numeric, int):
        numeric = logging.INFO

    handler = _handler()
    handler.setFormatter(_formatter(settings.log_json))

    root = logging.getLogger()
    root.setLevel(numeric)
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.addHandler(handler)

    for logger_name, logger_level in QUIET_LOGGERS.items():
        logging.getLogger(logger_name).setLevel(logger_level)


reconfigure = configure_logging
