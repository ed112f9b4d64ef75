"""Required-field validation of section form content."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from digitalbook.domain.catalog import SectionDefinition


@dataclass
class MissingField:
    """A required field left empty."""

    name: str
    label: str


@dataclass
class ValidationResult:
    """Result of validating a section's content against its schema."""

    section_id: str
    missing: List[MissingField] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.missing

    @property
    def missing_names(self) -> List[str]:
        return [m.name for m in self.missing]

    def blocking_message(self) -> Optional[str]:
        """User-facing message explaining why Next is refused."""
        if self.passed:
            return None
        labels = ", ".join(m.label for m in self.missing)
        return f"Complete all required fields before continuing: {labels}"


def is_filled(value: Any) -> bool:
    """
    A value counts as filled when it is truthy and its string form is
    non-empty after trimming. ``0``, ``False`` and empty containers are
    empty; a list is filled when any of its items is.
    """
    if not value:
        return False
    if isinstance(value, (list, tuple, set)):
        return any(is_filled(item) for item in value)
    return len(str(value).strip()) > 0


def validate_section(
    section: SectionDefinition,
    content: Optional[Dict[str, Any]],
) -> ValidationResult:
    """
    Check every required field of ``section`` against ``content``.

    Args:
        section: Catalog entry providing the field schema
        content: Opaque form content (field name -> value)

    Returns:
        ValidationResult listing the missing required fields in schema order
    """
    content = content or {}
    result = ValidationResult(section_id=section.id)
    for definition in section.required_fields:
        if not is_filled(content.get(definition.name)):
            result.missing.append(MissingField(definition.name, definition.label))
    return result
