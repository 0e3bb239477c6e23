"""Unit tests for per-request routing state-machine guardrails."""

import pytest

from payflow.common.state_machine import TERMINAL_STATES, validate_transition


def test_valid_transition():
    """Sanity check: a legal transition should pass."""

    validate_transition("STARTED", "ATTEMPTING")
    validate_transition("ATTEMPTING", "ATTEMPTING")


def test_invalid_transition():
    """Approval without an attempt must raise to protect routing correctness."""

    with pytest.raises(ValueError):
        validate_transition("STARTED", "APPROVED")


def test_terminal_states_accept_nothing():
    """Approved, failed and cancelled requests never move again."""

    assert TERMINAL_STATES == {"APPROVED", "FAILED", "CANCELLED"}
    for state in TERMINAL_STATES:
        with pytest.raises(ValueError):
            validate_transition(state, "ATTEMPTING")
