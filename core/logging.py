"""
Logging configuration for MediTrack Backend.

structlog renders JSON (or console output in DEBUG) on top of the stdlib
handlers. Every request gets a ``request_id`` and, once the session cookie
resolves, a ``user_id`` in the structlog context, so all events logged while
serving it can be correlated.
"""

import logging
import os
import sys
import time
import uuid
from datetime import datetime

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars
from structlog.stdlib import LoggerFactory

from core.config import settings

REQUEST_ID_HEADER = "X-Request-ID"

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler.setLevel(level)
    return handler


def _add_service(logger, method_name, event_dict):
    event_dict.setdefault("service", settings.APP_NAME)
    event_dict.setdefault("env", settings.ENV)
    return event_dict


def setup_logging() -> structlog.stdlib.BoundLogger:
    """Configure structlog and the stdlib handlers it writes through."""

    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            _add_service,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(_FORMAT))
    root_logger.addHandler(console_handler)

    if settings.ENABLE_FILE_LOGGING:
        stamp = datetime.now().strftime("%Y%m%d")
        os.makedirs(settings.LOGS_DIR, exist_ok=True)
        root_logger.addHandler(_file_handler(os.path.join(settings.LOGS_DIR, f"app_{stamp}.log"), logging.INFO))
        root_logger.addHandler(_file_handler(os.path.join(settings.LOGS_DIR, f"error_{stamp}.log"), logging.ERROR))

        if settings.ENABLE_REQUEST_LOGGING:
            request_logger = logging.getLogger("request")
            request_logger.setLevel(logging.INFO)
            request_logger.propagate = False
            request_logger.handlers.clear()
            request_logger.addHandler(
                _file_handler(os.path.join(settings.LOGS_DIR, f"requests_{stamp}.log"), logging.INFO)
            )

    logger = structlog.get_logger()

    if settings.SENTRY_DSN and settings.SENTRY_DSN.strip():
        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.SENTRY_ENVIRONMENT,
            integrations=[
                FastApiIntegration(),
                SqlalchemyIntegration(),
            ],
            traces_sample_rate=0.1 if settings.ENV == "production" else 1.0,
        )

        logger.info("Sentry integration enabled", environment=settings.SENTRY_ENVIRONMENT)

    return logger


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)


def bind_user(user_id: int) -> None:
    """Attach the signed-in user to every event logged for the current request."""
    bind_contextvars(user_id=user_id)


async def log_request_middleware(request, call_next):
    """Tag the request with an id and log its start and completion."""
    clear_contextvars()
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    bind_contextvars(request_id=request_id, method=request.method, path=request.url.path)

    logger = get_logger("request")
    start_time = time.time()

    if settings.ENABLE_REQUEST_LOGGING:
        logger.info(
            "Request started",
            client_ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )

    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id

    if settings.ENABLE_REQUEST_LOGGING:
        logger.info(
            "Request completed",
            status_code=response.status_code,
            duration_ms=round((time.time() - start_time) * 1000, 1),
        )

    return response
