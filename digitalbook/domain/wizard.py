"""
Digital book wizard controller.

Drives the eight-step manual entry of a building's digital book: step
navigation, required-field gating and draft/complete saves. Each step maps to
one catalog section; a transition only happens once its save (if any) has
resolved.

Navigation rules:
- Save Draft stores the current step with complete=False, no validation.
- Previous stores a best-effort draft first; a failed draft does not block
  going back.
- Next requires every required field of the step to be filled, stores the
  step with complete=True, then advances (or finishes on the last step).
- While a save is outstanding, further actions return BUSY and issue no save.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from digitalbook.domain.attachments import AttachedFile, AttachmentPolicy, AttachmentResult
from digitalbook.domain.catalog import SECTION_CATALOG, SectionDefinition, section_index
from digitalbook.domain.exceptions import SectionSaveError
from digitalbook.domain.progress import BookProgress, project_progress
from digitalbook.domain.resolver import SectionIdentityResolver, default_resolver
from digitalbook.domain.section_validation import ValidationResult, validate_section
from digitalbook.domain.session import BookSession, SessionStatus
from digitalbook.domain.wizard_state import (
    WizardNotEditableError,
    WizardState,
    validate_wizard_transition,
)
from digitalbook.persistence.repositories import BookRepository
from digitalbook.settings import get_settings

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Could not save the section. Check your connection and try again."


class NavigationOutcome(str, Enum):
    """Result kinds of a wizard action."""
    SUCCESS = "success"
    VALIDATION_FAILED = "validation_failed"
    SAVE_FAILED = "save_failed"
    BUSY = "busy"
    NOT_ALLOWED = "not_allowed"


class RecoveryAction(str, Enum):
    """Recovery offered to the user when the wizard cannot be used."""
    RETURN_TO_HUB = "return_to_hub"


@dataclass
class NavigationResult:
    """What a wizard action did."""
    outcome: NavigationOutcome
    state: WizardState
    step_index: int
    moved: bool = False
    message: Optional[str] = None
    validation: Optional[ValidationResult] = None
    error: Optional[SectionSaveError] = None

    @property
    def ok(self) -> bool:
        return self.outcome == NavigationOutcome.SUCCESS


@dataclass
class StepView:
    """Everything the UI needs to render the current step."""
    index: int
    total: int
    section: SectionDefinition
    content: Dict[str, Any]
    validation: ValidationResult
    is_completed: bool
    documents: List[AttachedFile] = field(default_factory=list)

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == self.total - 1


class WizardController:
    """State machine for the manual digital book wizard."""

    def __init__(
        self,
        repository: BookRepository,
        resolver: SectionIdentityResolver = default_resolver,
        attachment_policy: Optional[AttachmentPolicy] = None,
    ):
        self._resolver = resolver
        self._session = BookSession(repository, resolver)
        self._attachment_policy = attachment_policy or AttachmentPolicy.from_settings(get_settings())
        self._state = WizardState.LOADING
        self._save_lock = asyncio.Lock()

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def session(self) -> BookSession:
        return self._session

    @property
    def current_step_index(self) -> int:
        return self._session.current_step_index

    @property
    def is_saving(self) -> bool:
        """True while a save is outstanding; the UI disables its actions."""
        return self._save_lock.locked()

    @property
    def recovery_action(self) -> Optional[RecoveryAction]:
        if self._state == WizardState.UNAVAILABLE:
            return RecoveryAction.RETURN_TO_HUB
        return None

    def _transition(self, target: WizardState) -> None:
        validate_wizard_transition(self._state, target)
        if target != self._state:
            logger.info(
                "Wizard %s -> %s", self._state.value, target.value,
                extra={"building_id": self._session.building_id},
            )
        self._state = target

    def _require_editing(self) -> None:
        if self._state != WizardState.EDITING:
            raise WizardNotEditableError(self._state)

    def _result(
        self,
        outcome: NavigationOutcome,
        moved: bool = False,
        **kwargs,
    ) -> NavigationResult:
        return NavigationResult(
            outcome=outcome,
            state=self._state,
            step_index=self._session.current_step_index,
            moved=moved,
            **kwargs,
        )

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    async def initialize(
        self,
        building_id: str,
        start_section_id: Optional[str] = None,
        source: Optional[str] = None,
    ) -> WizardState:
        """
        Load (or create) the building's book and enter the first step.

        Re-initializing is always allowed and restarts from LOADING; it is
        the only way out of UNAVAILABLE besides returning to the hub.

        Args:
            building_id: Building whose book is edited
            start_section_id: Optional UI id of the section to open first
            source: Origin recorded if the book has to be created
                (defaults to DEFAULT_BOOK_SOURCE)

        Returns:
            EDITING on success, UNAVAILABLE otherwise
        """
        self._state = WizardState.LOADING
        status = await self._session.initialize(
            building_id, source or get_settings().default_book_source
        )
        if status != SessionStatus.READY:
            self._transition(WizardState.UNAVAILABLE)
            return self._state

        start = 0
        if start_section_id:
            index = section_index(start_section_id)
            if index < 0:
                logger.warning(
                    "Unknown start section %s, opening the first section",
                    start_section_id,
                )
            else:
                start = index
        self._session.current_step_index = start
        self._transition(WizardState.EDITING)
        return self._state

    # =========================================================================
    # CURRENT STEP
    # =========================================================================

    def _current_section(self) -> SectionDefinition:
        return SECTION_CATALOG[self._session.current_step_index]

    def get_current_step(self) -> StepView:
        """Describe the current step, its content and its validation state."""
        self._require_editing()
        section = self._current_section()
        content = self._session.content_for(section.id)
        return StepView(
            index=self._session.current_step_index,
            total=len(SECTION_CATALOG),
            section=section,
            content=dict(content),
            validation=validate_section(section, content),
            is_completed=section.id in self._session.completed_section_ids,
            documents=list(self._session.attached_documents.get(section.id, [])),
        )

    def set_field_value(self, field_name: str, value: Any) -> None:
        """Edit one field of the current step (kept in memory until saved)."""
        self._require_editing()
        self._session.set_field(self._current_section().id, field_name, value)

    def attach_documents(self, files: Sequence[AttachedFile]) -> AttachmentResult:
        """Select files for the current step; they are shown, not persisted."""
        self._require_editing()
        result = self._attachment_policy.filter(files)
        self._session.set_documents(self._current_section().id, result.accepted)
        return result

    def get_progress(self) -> BookProgress:
        return project_progress(self._session.book, self._resolver)

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    async def save_draft(self) -> NavigationResult:
        """Store the current step with complete=False; the step does not change."""
        self._require_editing()
        if self._save_lock.locked():
            return self._result(NavigationOutcome.BUSY)

        async with self._save_lock:
            section = self._current_section()
            try:
                await self._session.save_section(section.id, complete=False)
            except SectionSaveError as e:
                return self._result(
                    NavigationOutcome.SAVE_FAILED, message=SAVE_FAILED_MESSAGE, error=e,
                )
            self._transition(WizardState.EDITING)
            return self._result(NavigationOutcome.SUCCESS, message="Draft saved")

    async def go_previous(self) -> NavigationResult:
        """
        Draft-save the current step, then go back one step.

        A failed draft is logged and reported, but navigation still happens.
        """
        self._require_editing()
        index = self._session.current_step_index
        if index == 0:
            return self._result(
                NavigationOutcome.NOT_ALLOWED, message="Already at the first section",
            )
        if self._save_lock.locked():
            return self._result(NavigationOutcome.BUSY)

        async with self._save_lock:
            section = self._current_section()
            error = None
            try:
                await self._session.save_section(section.id, complete=False)
            except SectionSaveError as e:
                logger.warning(
                    "Draft of section %s not saved while going back: %s",
                    section.id, e.message,
                    extra={"building_id": self._session.building_id},
                )
                error = e

            self._session.current_step_index = index - 1
            self._transition(WizardState.EDITING)
            if error is not None:
                return self._result(
                    NavigationOutcome.SAVE_FAILED,
                    moved=True,
                    message=SAVE_FAILED_MESSAGE,
                    error=error,
                )
            return self._result(NavigationOutcome.SUCCESS, moved=True)

    async def go_next(self) -> NavigationResult:
        """
        Validate and complete the current step, then advance.

        From the last step a successful Next finishes the wizard. A failed
        validation issues no save and keeps the step.
        """
        self._require_editing()
        if self._save_lock.locked():
            return self._result(NavigationOutcome.BUSY)

        async with self._save_lock:
            index = self._session.current_step_index
            section = self._current_section()
            validation = validate_section(section, self._session.content_for(section.id))
            if not validation.passed:
                logger.info(
                    "Next refused on section %s, missing: %s",
                    section.id, ", ".join(validation.missing_names),
                )
                return self._result(
                    NavigationOutcome.VALIDATION_FAILED,
                    message=validation.blocking_message(),
                    validation=validation,
                )

            try:
                await self._session.save_section(section.id, complete=True)
            except SectionSaveError as e:
                return self._result(
                    NavigationOutcome.SAVE_FAILED,
                    message=SAVE_FAILED_MESSAGE,
                    validation=validation,
                    error=e,
                )

            if index < len(SECTION_CATALOG) - 1:
                self._session.current_step_index = index + 1
                self._transition(WizardState.EDITING)
                return self._result(NavigationOutcome.SUCCESS, moved=True, validation=validation)

            self._transition(WizardState.FINISHED)
            return self._result(
                NavigationOutcome.SUCCESS,
                moved=True,
                message="Digital book completed",
                validation=validation,
            )
