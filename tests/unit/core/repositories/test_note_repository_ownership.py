"""NoteRepository: owner-conditioned mutations and readable listings."""

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import InvalidRequestError

from notevault.core.models.note import NoteShare
from notevault.core.repositories.account_repository import AccountRepository
from notevault.core.repositories.note_repository import NoteRepository


@pytest.fixture
async def accounts(make_account):
    return (
        await make_account("owner@x.com"),
        await make_account("reader@x.com"),
        await make_account("stranger@x.com"),
    )


@pytest.fixture
def repo(session):
    return NoteRepository(session)


async def test_create_starts_unshared(repo, accounts):
    owner, _, _ = accounts
    note = await repo.create_note(owner, "trip", "plan")

    assert note.owner_id == owner
    assert note.shared_with == set()
    assert note.created_at is not None


async def test_get_readable_respects_shares(repo, accounts):
    owner, reader, stranger = accounts
    note = await repo.create_note(owner, "trip", "")
    await repo.share_owned(note.id, owner, reader)

    assert (await repo.get_readable(note.id, owner)).id == note.id
    assert (await repo.get_readable(note.id, reader)).id == note.id
    assert await repo.get_readable(note.id, stranger) is None
    assert await repo.get_owned(note.id, reader) is None


async def test_update_owned_changes_only_title_and_content(repo, accounts):
    owner, _, _ = accounts
    note = await repo.create_note(owner, "trip", "old")
    before = note.updated_at

    updated = await repo.update_owned(
        note.id, owner, {"content": "new", "owner_id": uuid.uuid4()}
    )

    assert updated.title == "trip"
    assert updated.content == "new"
    assert updated.owner_id == owner
    assert updated.updated_at.replace(tzinfo=None) >= before.replace(tzinfo=None)


async def test_update_by_non_owner_changes_nothing(repo, accounts):
    owner, reader, _ = accounts
    note = await repo.create_note(owner, "trip", "old")
    await repo.share_owned(note.id, owner, reader)

    assert await repo.update_owned(note.id, reader, {"content": "hacked"}) is None
    assert (await repo.get_by_id(note.id)).content == "old"


async def test_delete_owned_removes_note_and_grants(repo, accounts, session):
    owner, reader, _ = accounts
    note = await repo.create_note(owner, "trip", "")
    await repo.share_owned(note.id, owner, reader)

    assert await repo.delete_owned(note.id, reader) is False
    assert await repo.delete_owned(note.id, owner) is True
    assert await repo.get_by_id(note.id) is None

    remaining = await session.scalar(select(func.count()).select_from(NoteShare))
    assert remaining == 0
    assert await repo.delete_owned(note.id, owner) is False


async def test_share_is_idempotent_and_skips_owner(repo, accounts):
    owner, reader, _ = accounts
    note = await repo.create_note(owner, "trip", "")

    await repo.share_owned(note.id, owner, reader)
    again = await repo.share_owned(note.id, owner, reader)
    with_owner = await repo.share_owned(note.id, owner, owner)

    assert again.shared_with == {reader}
    assert with_owner.shared_with == {reader}


async def test_share_by_non_owner_is_refused(repo, accounts):
    owner, reader, stranger = accounts
    note = await repo.create_note(owner, "trip", "")
    await repo.share_owned(note.id, owner, reader)

    assert await repo.share_owned(note.id, reader, stranger) is None
    assert (await repo.get_by_id(note.id)).shared_with == {reader}


async def test_list_readable(repo, accounts):
    owner, reader, stranger = accounts
    mine = await repo.create_note(owner, "mine", "")
    shared = await repo.create_note(owner, "shared", "")
    theirs = await repo.create_note(stranger, "theirs", "")
    await repo.share_owned(shared.id, owner, reader)

    assert {n.id for n in await repo.list_readable(owner)} == {mine.id, shared.id}
    assert {n.id for n in await repo.list_readable(reader)} == {shared.id}
    assert {n.id for n in await repo.list_readable(stranger)} == {theirs.id}

    limited = await repo.list_readable(owner, [shared.id, theirs.id])
    assert [n.id for n in limited] == [shared.id]
    assert await repo.list_readable(owner, []) == []
    assert len(await repo.list_all()) == 3


async def test_back_references_are_never_loaded(repo, accounts, context):
    owner, reader, _ = accounts
    note = await repo.create_note(owner, "trip", "")
    await repo.share_owned(note.id, owner, reader)

    async with context.session_factory() as fresh:
        share = (await fresh.execute(select(NoteShare))).scalar_one()
        with pytest.raises(InvalidRequestError):
            share.note

        loaded = await NoteRepository(fresh).get_by_id(note.id)
        account = await AccountRepository(fresh).get_by_id(owner)

        assert loaded.shared_with == {reader}
        with pytest.raises(InvalidRequestError):
            loaded.owner
        with pytest.raises(InvalidRequestError):
            account.notes
