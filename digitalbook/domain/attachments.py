"""
Section attachments.

Files picked for a section are kept for display only. Storage and linking to
section content belong to the document upload service.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from digitalbook.settings import Settings

_MB = 1024 * 1024


@dataclass(frozen=True)
class AttachedFile:
    """A file reference selected by the user."""
    file_name: str
    mime_type: str
    size_bytes: int

    @property
    def size_mb(self) -> float:
        return self.size_bytes / _MB


@dataclass
class AttachmentResult:
    """Outcome of applying the attachment policy to a batch of files."""
    accepted: List[AttachedFile] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class AttachmentPolicy:
    """Which files a section accepts."""
    accepted_types: Tuple[str, ...] = ("image/*", "application/pdf", ".doc", ".docx")
    max_files: int = 5
    max_size_mb: int = 10

    @classmethod
    def from_settings(cls, settings: Settings) -> "AttachmentPolicy":
        return cls(
            max_files=settings.attachment_max_files,
            max_size_mb=settings.attachment_max_size_mb,
        )

    def accepts_type(self, attached: AttachedFile) -> bool:
        for accepted in self.accepted_types:
            if accepted.endswith("/*"):
                if attached.mime_type.startswith(accepted[:-1]):
                    return True
            elif accepted.startswith("."):
                if attached.file_name.lower().endswith(accepted):
                    return True
            elif attached.mime_type == accepted:
                return True
        return False

    def filter(self, files: Sequence[AttachedFile]) -> AttachmentResult:
        """
        Keep the files that satisfy the policy.

        Too many files rejects the whole batch; otherwise each invalid file is
        skipped with a reason and the rest are kept.
        """
        result = AttachmentResult()
        if len(files) > self.max_files:
            result.errors.append(f"At most {self.max_files} files are allowed")
            return result

        for attached in files:
            if not self.accepts_type(attached):
                result.errors.append(
                    f"Invalid file type: {attached.file_name} ({attached.mime_type})"
                )
                continue
            if attached.size_mb > self.max_size_mb:
                result.errors.append(
                    f"File too large: {attached.file_name} ({attached.size_mb:.1f}MB)"
                )
                continue
            result.accepted.append(attached)
        return result
