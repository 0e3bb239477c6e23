"""Routing context fields on log records."""

import logging

from payflow.common.logging import RoutingContextFilter, preferred_provider_ctx, provider_ctx, trace_id_ctx


def _filtered_record() -> logging.LogRecord:
    record = logging.LogRecord("payflow", logging.INFO, __file__, 1, "attempting payment", None, None)
    RoutingContextFilter().filter(record)
    return record


def test_fallback_attempt_is_flagged():
    """An attempt on a provider other than the preferred one is marked as fallback."""

    tokens = [
        (trace_id_ctx, trace_id_ctx.set("corr-1")),
        (preferred_provider_ctx, preferred_provider_ctx.set("FastPay")),
        (provider_ctx, provider_ctx.set("SecurePay")),
    ]
    try:
        record = _filtered_record()
    finally:
        for var, token in reversed(tokens):
            var.reset(token)

    assert record.trace_id == "corr-1"
    assert record.preferred_provider == "FastPay"
    assert record.provider == "SecurePay"
    assert record.fallback is True


def test_records_outside_an_attempt_are_not_fallbacks():
    record = _filtered_record()

    assert record.provider == ""
    assert record.fallback is False
