"""Digital book domain: catalog, identity resolution, session, wizard, progress."""

from digitalbook.domain.catalog import (
    FieldDefinition,
    FieldKind,
    SECTION_CATALOG,
    SECTION_IDS,
    SectionDefinition,
    TOTAL_SECTIONS,
    get_section,
    section_index,
)
from digitalbook.domain.exceptions import (
    BookIntegrityError,
    DigitalBookError,
    InvalidImportError,
    SectionSaveError,
    UnknownSectionError,
)
from digitalbook.domain.resolver import SectionIdentityResolver, default_resolver
from digitalbook.domain.progress import BookProgress, ProgressStatus, project_progress
from digitalbook.domain.section_validation import ValidationResult, validate_section
from digitalbook.domain.attachments import AttachedFile, AttachmentPolicy, AttachmentResult
from digitalbook.domain.session import BookSession, SessionStatus
from digitalbook.domain.wizard_state import (
    InvalidWizardTransitionError,
    WizardNotEditableError,
    WizardState,
)
from digitalbook.domain.wizard import (
    NavigationOutcome,
    NavigationResult,
    RecoveryAction,
    StepView,
    WizardController,
)

__all__ = [
    # Catalog
    "FieldDefinition",
    "FieldKind",
    "SECTION_CATALOG",
    "SECTION_IDS",
    "SectionDefinition",
    "TOTAL_SECTIONS",
    "get_section",
    "section_index",
    # Exceptions
    "BookIntegrityError",
    "DigitalBookError",
    "InvalidImportError",
    "SectionSaveError",
    "UnknownSectionError",
    # Identity
    "SectionIdentityResolver",
    "default_resolver",
    # Progress
    "BookProgress",
    "ProgressStatus",
    "project_progress",
    # Validation and attachments
    "ValidationResult",
    "validate_section",
    "AttachedFile",
    "AttachmentPolicy",
    "AttachmentResult",
    # Session and wizard
    "BookSession",
    "SessionStatus",
    "InvalidWizardTransitionError",
    "WizardNotEditableError",
    "WizardState",
    "NavigationOutcome",
    "NavigationResult",
    "RecoveryAction",
    "StepView",
    "WizardController",
]
