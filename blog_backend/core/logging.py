"""Log filtering for production deployments.

In production only warnings and above, plus a short allow-list of lifecycle
lines, reach the console. Everything else is dropped at the handler.
"""
import logging

from blog_backend.core import config

PRODUCTION_ALLOWED_PHRASES = ("Server running", "Connected to database")


class ProductionLogFilter(logging.Filter):
    def __init__(self, allowed_phrases=PRODUCTION_ALLOWED_PHRASES, min_level: int = logging.WARNING):
        super().__init__()
        self.allowed_phrases = tuple(allowed_phrases)
        self.min_level = min_level

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= self.min_level:
            return True
        message = record.getMessage()
        return any(phrase in message for phrase in self.allowed_phrases)


def configure_logging(environment: str | None = None) -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not config.is_production(environment):
        return

    root = logging.getLogger()
    for handler in root.handlers:
        if not any(isinstance(existing, ProductionLogFilter) for existing in handler.filters):
            handler.addFilter(ProductionLogFilter())
