from pydantic import BaseModel, Field

from localnotes.storage.notes_store import Note, StoreSnapshot

UNTITLED = "Untitled note"


class NoteSave(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    title: str = Field(default="", max_length=200)
    content: str = Field(default="", max_length=50_000)


class DraftChange(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    title: str = Field(default="", max_length=200)
    content: str = Field(default="", max_length=50_000)
    updated_at: str | None = None


class SearchRequest(BaseModel):
    term: str | None = Field(default=None, max_length=200)


class NoteOut(BaseModel):
    id: str
    title: str
    content: str
    updated_at: str

    @classmethod
    def from_note(cls, note: Note) -> "NoteOut":
        return cls(id=note.id, title=note.title, content=note.content, updated_at=note.updated_at)


class NoteListItem(BaseModel):
    id: str
    title: str
    display_title: str
    updated_at: str

    @classmethod
    def from_note(cls, note: Note) -> "NoteListItem":
        return cls(
            id=note.id,
            title=note.title,
            display_title=note.title or UNTITLED,
            updated_at=note.updated_at,
        )


class SnapshotOut(BaseModel):
    notes: list[NoteListItem]
    selected_id: str | None
    draft: NoteOut | None
    editing: bool
    search_term: str
    state: str

    @classmethod
    def from_snapshot(cls, snap: StoreSnapshot) -> "SnapshotOut":
        return cls(
            notes=[NoteListItem.from_note(n) for n in snap.notes],
            selected_id=snap.selected_id,
            draft=NoteOut.from_note(snap.draft) if snap.draft is not None else None,
            editing=snap.editing,
            search_term=snap.search_term,
            state=snap.state,
        )
