"""
Wizard state machine.

Defines the valid states and transitions of the digital book wizard.
Pure module with no dependencies on repositories or sessions.
"""

from enum import Enum


class WizardState(str, Enum):
    """Wizard lifecycle states. EDITING is qualified by the session's step index."""
    LOADING = "loading"
    UNAVAILABLE = "unavailable"
    EDITING = "editing"
    FINISHED = "finished"


WIZARD_VALID_TRANSITIONS = {
    WizardState.LOADING: [WizardState.EDITING, WizardState.UNAVAILABLE],
    WizardState.EDITING: [WizardState.EDITING, WizardState.FINISHED],
    WizardState.UNAVAILABLE: [],  # Terminal state
    WizardState.FINISHED: [],  # Terminal state
}


class InvalidWizardTransitionError(ValueError):
    """Raised when an invalid wizard state transition is attempted."""

    def __init__(self, current: WizardState, target: WizardState):
        self.current = current
        self.target = target
        valid = [s.value for s in WIZARD_VALID_TRANSITIONS.get(current, [])]
        super().__init__(
            f"Invalid wizard transition: {current.value} -> {target.value}. "
            f"Valid targets from {current.value}: {valid}"
        )


class WizardNotEditableError(InvalidWizardTransitionError):
    """Raised when an editing operation is attempted outside EDITING."""

    def __init__(self, current: WizardState):
        super().__init__(current, WizardState.EDITING)


def validate_wizard_transition(current: WizardState, target: WizardState) -> bool:
    """
    Validate a wizard state transition.

    Args:
        current: Current state
        target: Desired target state

    Returns:
        True if the transition is valid

    Raises:
        InvalidWizardTransitionError: If the transition is not allowed
    """
    valid_targets = WIZARD_VALID_TRANSITIONS.get(current, [])
    if target not in valid_targets:
        raise InvalidWizardTransitionError(current, target)
    return True
