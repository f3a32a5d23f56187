"""NoteService: CRUD, sharing and the not-found-not-forbidden rule."""

import uuid

import pytest

from notevault.core.exceptions import InternalError, NotFoundError, ValidationError
from notevault.core.schemas.notes import NoteCreate, NoteUpdate
from notevault.core.schemas.sharing import ShareRequest


@pytest.fixture
def note_service(context, session):
    return context.note_service(session)


@pytest.fixture
async def accounts(make_account):
    return await make_account("a@x.com"), await make_account("b@x.com"), await make_account("c@x.com")


async def test_create_get_roundtrip(note_service, accounts):
    a, _, _ = accounts
    created = await note_service.create_note(a, NoteCreate(title="trip", content="plan"))

    fetched = await note_service.get_note(created.id, a)
    assert fetched.title == "trip"
    assert fetched.content == "plan"
    assert fetched.owner_id == a
    assert fetched.shared_with == []


async def test_unshared_note_is_not_found_for_others(note_service, accounts):
    a, b, _ = accounts
    created = await note_service.create_note(a, NoteCreate(title="trip"))

    with pytest.raises(NotFoundError) as hidden:
        await note_service.get_note(created.id, b)
    with pytest.raises(NotFoundError) as missing:
        await note_service.get_note(uuid.uuid4(), b)

    assert hidden.value.message == missing.value.message


async def test_shared_reader_cannot_modify(note_service, accounts):
    a, b, c = accounts
    created = await note_service.create_note(a, NoteCreate(title="trip"))
    await note_service.share_note(created.id, a, ShareRequest(user_id=b))

    assert (await note_service.get_note(created.id, b)).id == created.id
    with pytest.raises(NotFoundError):
        await note_service.update_note(created.id, b, NoteUpdate(title="mine now"))
    with pytest.raises(NotFoundError):
        await note_service.delete_note(created.id, b)
    with pytest.raises(NotFoundError):
        await note_service.share_note(created.id, b, ShareRequest(user_id=c))

    assert (await note_service.get_note(created.id, a)).title == "trip"


async def test_update_is_partial(note_service, accounts):
    a, _, _ = accounts
    created = await note_service.create_note(a, NoteCreate(title="trip", content="plan"))

    updated = await note_service.update_note(created.id, a, NoteUpdate(content="packed"))

    assert updated.title == "trip"
    assert updated.content == "packed"


async def test_share_by_email_is_idempotent(note_service, accounts):
    a, b, _ = accounts
    created = await note_service.create_note(a, NoteCreate(title="trip"))

    await note_service.share_note(created.id, a, ShareRequest(email="B@x.com"))
    shared = await note_service.share_note(created.id, a, ShareRequest(user_id=b))

    assert shared.shared_with == [b]


async def test_share_with_unknown_account(note_service, accounts):
    a, b, _ = accounts
    created = await note_service.create_note(a, NoteCreate(title="trip"))

    with pytest.raises(ValidationError) as exc:
        await note_service.share_note(created.id, a, ShareRequest(email="nobody@x.com"))
    assert exc.value.details["errors"][0]["field"] == "email"

    # a non-owner learns nothing about the grantee
    with pytest.raises(NotFoundError):
        await note_service.share_note(created.id, b, ShareRequest(user_id=uuid.uuid4()))


async def test_delete_hides_note_from_everyone(note_service, accounts):
    a, b, _ = accounts
    created = await note_service.create_note(a, NoteCreate(title="trip"))
    await note_service.share_note(created.id, a, ShareRequest(user_id=b))

    await note_service.delete_note(created.id, a)

    for principal in (a, b):
        with pytest.raises(NotFoundError):
            await note_service.get_note(created.id, principal)
    with pytest.raises(NotFoundError):
        await note_service.delete_note(created.id, a)


async def test_list_notes_owned_and_shared(note_service, accounts):
    a, b, c = accounts
    mine = await note_service.create_note(b, NoteCreate(title="b's own"))
    shared = await note_service.create_note(a, NoteCreate(title="shared"))
    await note_service.create_note(c, NoteCreate(title="private"))
    await note_service.share_note(shared.id, a, ShareRequest(user_id=b))

    listed = await note_service.list_notes(b)

    assert {n.id for n in listed} == {mine.id, shared.id}


class RecordingSearch:
    def __init__(self, session):
        self.session = session
        self.calls = []

    async def stage_note(self, note):
        # still inside the write's transaction
        self.calls.append(("stage", note.id, note.title, self.session.in_transaction()))

    async def stage_removal(self, note_id):
        self.calls.append(("unstage", note_id, None, self.session.in_transaction()))

    async def sync_note(self, note_id):
        self.calls.append(("sync", note_id, None, None))


async def test_writes_keep_index_in_step(session, accounts):
    from notevault.core.services.note_service import NoteService

    a, _, _ = accounts
    search = RecordingSearch(session)
    service = NoteService(session, search)

    created = await service.create_note(a, NoteCreate(title="trip"))
    await service.update_note(created.id, a, NoteUpdate(title="holiday"))
    await service.delete_note(created.id, a)

    assert search.calls == [
        ("stage", created.id, "trip", True),
        ("sync", created.id, None, None),
        ("stage", created.id, "holiday", True),
        ("sync", created.id, None, None),
        ("unstage", created.id, None, True),
        ("sync", created.id, None, None),
    ]


class FailingStage(RecordingSearch):
    async def stage_note(self, note):
        raise InternalError("Search index update failed")


async def test_failed_staging_leaves_note_unchanged(session, accounts):
    from notevault.core.services.note_service import NoteService

    a, _, _ = accounts
    created = await NoteService(session, RecordingSearch(session)).create_note(
        a, NoteCreate(title="trip", content="plan")
    )
    service = NoteService(session, FailingStage(session))

    with pytest.raises(InternalError):
        await service.update_note(created.id, a, NoteUpdate(content="changed"))
    with pytest.raises(InternalError):
        await service.create_note(a, NoteCreate(title="never saved"))

    listed = await service.list_notes(a)
    assert [(n.id, n.content) for n in listed] == [(created.id, "plan")]
