from fastapi import APIRouter, Depends, HTTPException, Request

from localnotes.models.notes import DraftChange, NoteOut, NoteSave, SearchRequest, SnapshotOut
from localnotes.storage.notes_store import Note, NotesStore

router = APIRouter(prefix="/notes", tags=["notes"])


def get_store(request: Request) -> NotesStore:
    # constructed once in create_app(); never a module-level instance
    return request.app.state.store


def _snapshot(store: NotesStore) -> SnapshotOut:
    return SnapshotOut.from_snapshot(store.snapshot())


@router.get("", response_model=SnapshotOut)
def read_state(store: NotesStore = Depends(get_store)) -> SnapshotOut:
    return _snapshot(store)


@router.get("/{note_id}", response_model=NoteOut)
def get_note(note_id: str, store: NotesStore = Depends(get_store)) -> NoteOut:
    note = store.get(note_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteOut.from_note(note)


@router.post("/select/{note_id}", response_model=SnapshotOut)
def select_note(note_id: str, store: NotesStore = Depends(get_store)) -> SnapshotOut:
    # unknown id is not an error: the store falls back to the empty state
    store.select(note_id)
    return _snapshot(store)


@router.post("/new", response_model=SnapshotOut)
def create_note(store: NotesStore = Depends(get_store)) -> SnapshotOut:
    store.create()
    return _snapshot(store)


@router.post("/save", response_model=SnapshotOut)
def save_note(payload: NoteSave, store: NotesStore = Depends(get_store)) -> SnapshotOut:
    store.save(note_id=payload.id, title=payload.title, content=payload.content)
    return _snapshot(store)


@router.put("/draft", response_model=SnapshotOut)
def change_draft(payload: DraftChange, store: NotesStore = Depends(get_store)) -> SnapshotOut:
    # typing in the editor never refreshes the timestamp
    updated_at = payload.updated_at
    if updated_at is None:
        updated_at = store.draft.updated_at if store.draft is not None else ""
    store.change_draft(Note(id=payload.id, title=payload.title, content=payload.content, updated_at=updated_at))
    return _snapshot(store)


@router.post("/search", response_model=SnapshotOut)
def search_notes(payload: SearchRequest, store: NotesStore = Depends(get_store)) -> SnapshotOut:
    store.search(payload.term)
    return _snapshot(store)


@router.delete("/{note_id}", response_model=SnapshotOut)
def delete_note(note_id: str, store: NotesStore = Depends(get_store)) -> SnapshotOut:
    store.delete(note_id)
    return _snapshot(store)
