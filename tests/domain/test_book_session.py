"""Tests for the book session state."""

import pytest

from digitalbook.domain import (
    BookSession,
    SectionSaveError,
    SessionStatus,
    UnknownSectionError,
)
from digitalbook.persistence import (
    Book,
    BookAlreadyExistsError,
    BookFetchError,
    BookNotFoundError,
    BookSaveError,
    BookSection,
)


@pytest.fixture
def session(spy_repo):
    return BookSession(spy_repo)


class TestInitialize:

    @pytest.mark.asyncio
    async def test_existing_book_is_loaded_and_seeded(self, session, memory_repo, spy_repo):
        book = Book.create("B7")
        general = BookSection.create("general_data", {"ownership": "Privada"}, True)
        book.sections.append(general)
        await memory_repo.replace(book)

        status = await session.initialize("B7")

        assert status == SessionStatus.READY
        assert session.is_ready
        assert session.book.book_id == book.book_id
        assert session.completed_section_ids == {"general_data"}
        assert session.section_form_data["general_data"]["ownership"] == "Privada"
        assert session.section_form_data[general.section_id]["ownership"] == "Privada"
        assert spy_repo.calls_to("create") == []

    @pytest.mark.asyncio
    async def test_conflict_on_create_refetches(self, session, memory_repo, spy_repo):
        """A concurrent create (409) is resolved by fetching the existing book."""
        await memory_repo.create("B2")
        spy_repo.get_errors.append(BookNotFoundError("B2"))

        status = await session.initialize("B2")

        assert status == SessionStatus.READY
        assert [c.method for c in spy_repo.calls] == [
            "get_by_building", "create", "get_by_building",
        ]
        assert memory_repo.count() == 1

    @pytest.mark.asyncio
    async def test_create_conflict_then_fetch_failure(self, session, spy_repo):
        spy_repo.create_errors.append(BookAlreadyExistsError("B2"))
        spy_repo.get_errors.extend([
            BookNotFoundError("B2"),
            BookFetchError("backend down", 503),
        ])

        status = await session.initialize("B2")

        assert status == SessionStatus.UNAVAILABLE
        assert session.book is None
        assert "backend down" in session.unavailable_reason

    @pytest.mark.asyncio
    async def test_duplicate_sections_make_session_unavailable(self, session, memory_repo):
        book = Book.create("B3")
        book.sections.append(BookSection.create("general_data", {}, False))
        book.sections.append(BookSection.create("general_data", {}, True))
        await memory_repo.replace(book)

        status = await session.initialize("B3")

        assert status == SessionStatus.UNAVAILABLE
        assert "general_data" in session.unavailable_reason

    @pytest.mark.asyncio
    async def test_reinitialize_resets_state(self, session):
        await session.initialize("B1")
        session.set_field("general_data", "ownership", "x")
        session.current_step_index = 4

        await session.initialize("B9")

        assert session.building_id == "B9"
        assert session.current_step_index == 0
        assert session.content_for("general_data") == {}


class TestFormData:

    @pytest.mark.asyncio
    async def test_ui_id_and_type_share_content(self, session):
        await session.initialize("B1")
        session.set_field("certificates", "energy_certificate", "CEE B")

        assert session.section_form_data["certificates_and_licenses"]["energy_certificate"] == "CEE B"

    def test_unknown_section_raises(self, session):
        with pytest.raises(UnknownSectionError):
            session.content_for("energy")

    def test_step_index_bounds(self, session):
        session.current_step_index = 7
        with pytest.raises(IndexError):
            session.current_step_index = 8
        with pytest.raises(IndexError):
            session.current_step_index = -1
        assert session.current_step_index == 7


class TestSaveSection:

    @pytest.mark.asyncio
    async def test_save_replaces_book_and_completed_ids(self, session, spy_repo):
        await session.initialize("B1")
        session.set_field("sustainability", "energy_indicators", "120 kWh/m2")

        updated = await session.save_section("sustainability", complete=True)

        call = spy_repo.calls_to("upsert_section")[0]
        assert call.args[1] == "sustainability_and_esg"
        assert call.kwargs == {
            "content": {"energy_indicators": "120 kWh/m2"},
            "complete": True,
        }
        assert session.book is not None
        assert session.book.book_id == updated.book_id
        assert session.completed_section_ids == {"sustainability"}

    @pytest.mark.asyncio
    async def test_save_keeps_other_edits(self, session):
        """Only the saved section is reseeded from the returned book."""
        await session.initialize("B1")
        session.set_field("general_data", "ownership", "Pública")
        session.set_field("reforms", "renovation_history", "Rehabilitación 2015")

        await session.save_section("reforms", complete=False)

        assert session.content_for("general_data")["ownership"] == "Pública"
        assert session.content_for("reforms")["renovation_history"] == "Rehabilitación 2015"

    @pytest.mark.asyncio
    async def test_save_failure_wrapped(self, session, spy_repo):
        await session.initialize("B1")
        session.set_field("general_data", "ownership", "Pública")
        spy_repo.upsert_errors.append(BookSaveError("Request timed out after 25.0s", 0))

        with pytest.raises(SectionSaveError) as exc_info:
            await session.save_section("general_data", complete=True)

        assert exc_info.value.section_id == "general_data"
        assert exc_info.value.complete is True
        assert isinstance(exc_info.value.__cause__, BookSaveError)
        assert session.content_for("general_data")["ownership"] == "Pública"
        assert session.completed_section_ids == frozenset()

    @pytest.mark.asyncio
    async def test_save_without_book_raises(self, session, spy_repo):
        with pytest.raises(SectionSaveError):
            await session.save_section("general_data", complete=False)
        assert spy_repo.calls_to("upsert_section") == []

    @pytest.mark.asyncio
    async def test_save_unknown_section_raises(self, session):
        await session.initialize("B1")
        with pytest.raises(UnknownSectionError):
            await session.save_section("energy", complete=False)

    @pytest.mark.asyncio
    async def test_repeated_saves_keep_one_section_per_type(self, session, memory_repo):
        await session.initialize("B1")
        for complete in (False, True, False):
            await session.save_section("maintenance", complete=complete)

        book = await memory_repo.get_by_building("B1")
        assert len(book.sections) == 1
        assert book.sections[0].complete is False
