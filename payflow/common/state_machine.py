"""Per-request routing state machine enforced by the orchestrator."""

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "STARTED": {"ATTEMPTING", "CANCELLED"},
    "ATTEMPTING": {"ATTEMPTING", "APPROVED", "FAILED", "CANCELLED"},
    "APPROVED": set(),
    "FAILED": set(),
    "CANCELLED": set(),
}

TERMINAL_STATES = frozenset(state for state, targets in ALLOWED_TRANSITIONS.items() if not targets)


def validate_transition(current: str, new: str) -> None:
    """Raise when a transition is not allowed by the state machine."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid transition: {current} -> {new}")
