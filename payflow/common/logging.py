"""Structured JSON logging for payment routing.

Every record carries the correlation id of the inbound request, the provider
the router preferred for it, and the provider currently being attempted, so a
fallback reads as `preferred_provider != provider` in the log stream.
"""

import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter

from payflow.common.config import settings


trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")
preferred_provider_ctx: ContextVar[str] = ContextVar("preferred_provider", default="")
provider_ctx: ContextVar[str] = ContextVar("provider", default="")


class RoutingContextFilter(logging.Filter):
    """Inject service, correlation and routing fields into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = settings.service_name
        record.trace_id = trace_id_ctx.get()
        record.preferred_provider = preferred_provider_ctx.get()
        record.provider = provider_ctx.get()
        record.fallback = bool(record.provider) and record.provider != record.preferred_provider
        return True


def configure_logging() -> None:
    """Configure root logger once per service process."""

    handler = logging.StreamHandler(sys.stdout)
    routing_filter = RoutingContextFilter()
    handler.addFilter(routing_filter)
    handler.setFormatter(
        JsonFormatter(
            "%(asctime)s %(levelname)s %(service_name)s %(trace_id)s "
            "%(preferred_provider)s %(provider)s %(fallback)s %(message)s"
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level)
    root.addFilter(routing_filter)


logger = logging.getLogger("payflow")
