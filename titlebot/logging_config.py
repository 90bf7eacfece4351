import os
import logging
import logging.config
import contextvars
from contextlib import contextmanager

try:
    import sentry_sdk
    from sentry_sdk.integrations.logging import LoggingIntegration
except ImportError:  # pragma: no cover - sentry optional
    sentry_sdk = None
    LoggingIntegration = None

target_var = contextvars.ContextVar("target", default="-")
url_var = contextvars.ContextVar("url", default="-")


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - simple filter
        record.target = target_var.get()
        record.url = url_var.get()
        return True


def setup_logging(debug: bool = False) -> None:
    """Configure console and rotating file logging, plus Sentry if configured."""
    log_level = "DEBUG" if debug else os.getenv("LOG_LEVEL", "INFO").upper()
    log_dir = os.getenv("LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s [%(levelname)s] %(name)s [target=%(target)s url=%(url)s]: %(message)s",
            }
        },
        "filters": {
            "context": {"()": ContextFilter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "filters": ["context"],
                "level": log_level,
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "default",
                "filters": ["context"],
                "filename": os.path.join(log_dir, "titlebot.log"),
                "maxBytes": 5 * 1024 * 1024,
                "backupCount": 5,
                "level": log_level,
            },
        },
        "root": {"handlers": ["console", "file"], "level": log_level},
        # httpx logs every request at INFO
        "loggers": {"httpx": {"level": "WARNING"}},
    }

    logging.config.dictConfig(config)

    dsn = os.getenv("SENTRY_DSN")
    if dsn and sentry_sdk:
        logging_integration = LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)
        sentry_sdk.init(dsn=dsn, integrations=[logging_integration])


@contextmanager
def logging_context(target=None, url=None):
    tokens = []
    if target is not None:
        tokens.append((target_var, target_var.set(target)))
    if url is not None:
        tokens.append((url_var, url_var.set(url)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
