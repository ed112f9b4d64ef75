"""Tests for the wizard state machine transitions."""

import pytest

from digitalbook.domain import InvalidWizardTransitionError, WizardNotEditableError, WizardState
from digitalbook.domain.wizard_state import WIZARD_VALID_TRANSITIONS, validate_wizard_transition


class TestValidTransitions:

    @pytest.mark.parametrize(
        "current,target",
        [
            (WizardState.LOADING, WizardState.EDITING),
            (WizardState.LOADING, WizardState.UNAVAILABLE),
            (WizardState.EDITING, WizardState.EDITING),
            (WizardState.EDITING, WizardState.FINISHED),
        ],
    )
    def test_allowed(self, current, target):
        assert validate_wizard_transition(current, target) is True


class TestInvalidTransitions:

    @pytest.mark.parametrize(
        "current,target",
        [
            (WizardState.LOADING, WizardState.FINISHED),
            (WizardState.EDITING, WizardState.LOADING),
            (WizardState.EDITING, WizardState.UNAVAILABLE),
            (WizardState.UNAVAILABLE, WizardState.EDITING),
            (WizardState.FINISHED, WizardState.EDITING),
        ],
    )
    def test_rejected(self, current, target):
        with pytest.raises(InvalidWizardTransitionError):
            validate_wizard_transition(current, target)

    def test_terminal_states_have_no_targets(self):
        assert WIZARD_VALID_TRANSITIONS[WizardState.UNAVAILABLE] == []
        assert WIZARD_VALID_TRANSITIONS[WizardState.FINISHED] == []

    def test_error_message_lists_valid_targets(self):
        with pytest.raises(InvalidWizardTransitionError, match="editing"):
            validate_wizard_transition(WizardState.LOADING, WizardState.FINISHED)

    def test_not_editable_is_a_transition_error(self):
        error = WizardNotEditableError(WizardState.FINISHED)
        assert isinstance(error, InvalidWizardTransitionError)
        assert isinstance(error, ValueError)
        assert error.current == WizardState.FINISHED
