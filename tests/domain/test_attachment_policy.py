"""Tests for the section attachment policy."""

from digitalbook.domain import AttachedFile, AttachmentPolicy

MB = 1024 * 1024


class TestAttachmentPolicy:

    def test_accepts_images_pdf_and_word(self):
        policy = AttachmentPolicy()
        files = [
            AttachedFile("fachada.jpg", "image/jpeg", 2 * MB),
            AttachedFile("cee.pdf", "application/pdf", MB),
            AttachedFile("acta.docx", "application/octet-stream", 300_000),
            AttachedFile("memoria.DOC", "application/msword", 300_000),
        ]
        result = policy.filter(files)

        assert result.ok
        assert [f.file_name for f in result.accepted] == [
            "fachada.jpg", "cee.pdf", "acta.docx", "memoria.DOC",
        ]

    def test_skips_invalid_type(self):
        result = AttachmentPolicy().filter([
            AttachedFile("plano.dwg", "application/acad", MB),
            AttachedFile("cee.pdf", "application/pdf", MB),
        ])
        assert [f.file_name for f in result.accepted] == ["cee.pdf"]
        assert result.errors == ["Invalid file type: plano.dwg (application/acad)"]

    def test_skips_oversized_file(self):
        result = AttachmentPolicy().filter([AttachedFile("big.pdf", "application/pdf", 11 * MB)])
        assert result.accepted == []
        assert result.errors == ["File too large: big.pdf (11.0MB)"]

    def test_too_many_files_rejects_batch(self):
        files = [AttachedFile(f"f{i}.pdf", "application/pdf", 1) for i in range(6)]
        result = AttachmentPolicy().filter(files)

        assert result.accepted == []
        assert result.errors == ["At most 5 files are allowed"]

    def test_custom_limits(self):
        policy = AttachmentPolicy(accepted_types=("application/pdf",), max_files=1, max_size_mb=1)
        result = policy.filter([AttachedFile("a.jpg", "image/png", 10)])
        assert not result.ok
