"""Tests for soft deletion and the trashed-row filter."""
import pytest
from sqlalchemy import func, select

from models.note import Note
from models.user import User
from tests.factories import NoteFactory, UserFactory


class TestSoftDeleteMixin:
    """Tests for SoftDeleteMixin helpers."""

    def test_soft_delete_sets_timestamp(self):
        user = User(name="Ada")
        user.soft_delete()
        assert user.deleted_at is not None
        assert user.trashed

    def test_soft_delete_keeps_first_timestamp(self):
        user = User(name="Ada")
        user.soft_delete()
        first = user.deleted_at
        user.soft_delete()
        assert user.deleted_at == first

    def test_restore(self):
        user = User(name="Ada")
        user.soft_delete()
        user.restore()
        assert user.deleted_at is None
        assert not user.trashed


class TestTrashedFilter:
    """ORM selects hide trashed rows unless asked not to."""

    @pytest.mark.asyncio
    async def test_trashed_users_hidden_from_queries(self, db_session):
        kept, gone = UserFactory(), UserFactory()
        db_session.add_all([kept, gone])
        await db_session.flush()

        gone.soft_delete()
        await db_session.flush()

        result = await db_session.execute(select(User))
        assert [u.id for u in result.scalars().all()] == [kept.id]

    @pytest.mark.asyncio
    async def test_include_deleted_shows_trashed_rows(self, db_session):
        user = UserFactory()
        db_session.add(user)
        await db_session.flush()
        user.soft_delete()
        await db_session.flush()

        stmt = select(func.count()).select_from(User).execution_options(include_deleted=True)
        result = await db_session.execute(select(User).execution_options(include_deleted=True))

        assert [u.id for u in result.scalars().all()] == [user.id]
        assert (await db_session.execute(stmt)).scalar_one() == 1

    @pytest.mark.asyncio
    async def test_trashed_notes_hidden_from_scopes(self, db_session, accountable_context, users):
        accountable_context.authenticated_user = users[0]
        note = NoteFactory()
        db_session.add(note)
        await db_session.flush()

        note.soft_delete()
        await db_session.flush()

        results = (await db_session.execute(Note.only_created_by(users[0]))).scalars().all()
        assert results == []


class TestDeletedBy:
    """Soft-deletable accountable records remember who deleted them."""

    @pytest.mark.asyncio
    async def test_soft_delete_stamps_deleter(self, db_session, accountable_context, users):
        creator, deleter = users[0], users[1]
        accountable_context.authenticated_user = creator
        note = NoteFactory()
        db_session.add(note)
        await db_session.flush()
        assert note.deleted_by_user_id is None
        assert await note.deleted_by() is None

        accountable_context.authenticated_user = deleter
        note.soft_delete()
        await db_session.flush()

        assert note.deleted_by_user_id == deleter.id
        assert note.updated_by_user_id == deleter.id
        assert note.created_by_user_id == creator.id
        assert await note.deleted_by() is deleter

    @pytest.mark.asyncio
    async def test_restore_clears_deleter(self, db_session, accountable_context, users):
        accountable_context.authenticated_user = users[0]
        note = NoteFactory()
        db_session.add(note)
        await db_session.flush()

        note.soft_delete()
        await db_session.flush()
        note.restore()
        await db_session.flush()

        assert note.deleted_by_user_id is None
        assert await note.deleted_by() is None

    @pytest.mark.asyncio
    async def test_plain_update_keeps_deleter(self, db_session, accountable_context, users):
        accountable_context.authenticated_user = users[0]
        note = NoteFactory()
        db_session.add(note)
        await db_session.flush()
        note.soft_delete()
        await db_session.flush()

        accountable_context.authenticated_user = users[1]
        note.title = "Edited in the trash"
        await db_session.flush()

        assert note.deleted_by_user_id == users[0].id
        assert note.updated_by_user_id == users[1].id

    @pytest.mark.asyncio
    async def test_soft_delete_not_stamped_when_disabled(self, db_session, accountable_context, users):
        accountable_context.authenticated_user = users[0]
        note = NoteFactory()
        db_session.add(note)
        await db_session.flush()

        with accountable_context.disabled():
            note.soft_delete()
            await db_session.flush()

        assert note.trashed
        assert note.deleted_by_user_id is None
