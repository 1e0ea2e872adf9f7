# kvlock/config/logging.py

import json
import logging
from datetime import datetime, timezone

from kvlock.core.context import correlation_id_ctx, scope_id_ctx

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "correlation_id": correlation_id_ctx.get(),
            "scope_id": scope_id_ctx.get(),
        }
        for name, value in record.__dict__.items():
            if name not in _RESERVED and name not in log_record:
                log_record[name] = value
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def configure_logging(log_level: str):
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)
