"""Shared fixtures for orchestrator and gateway tests."""

import pytest

from payflow.services.orchestrator.sequence import SequenceCounter
from payflow.services.orchestrator.service import PaymentOrchestrator
from payflow.services.provider_adapter.registry import ProviderRegistry

from fakes import ScriptedProvider


@pytest.fixture
def sequence() -> SequenceCounter:
    return SequenceCounter()


@pytest.fixture
def make_orchestrator(sequence):
    """Build an orchestrator over FastPay/SecurePay fakes."""

    def _make(fastpay, securepay, **kwargs):
        fast = ScriptedProvider("FastPay", fastpay)
        secure = ScriptedProvider("SecurePay", securepay)
        orchestrator = PaymentOrchestrator(ProviderRegistry([fast, secure]), sequence=sequence, **kwargs)
        return orchestrator, fast, secure

    return _make
