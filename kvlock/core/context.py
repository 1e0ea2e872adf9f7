# kvlock/core/context.py

import contextvars

correlation_id_ctx = contextvars.ContextVar("correlation_id", default=None)
scope_id_ctx = contextvars.ContextVar("scope_id", default=None)
