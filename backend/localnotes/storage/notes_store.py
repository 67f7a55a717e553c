import json
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable

from localnotes.storage.blob_store import BlobStore
from localnotes.utils.ids import new_note_id, to_iso, utc_now
from localnotes.utils.logging import get_logger
from localnotes.utils.search import project

logger = get_logger(__name__)

STATE_EMPTY = "empty"
STATE_VIEWING = "viewing"
STATE_CREATING = "creating"


@dataclass(frozen=True)
class Note:
    id: str
    title: str
    content: str
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Note":
        fields = (raw["id"], raw["title"], raw["content"], raw["updatedAt"])
        if not all(isinstance(v, str) for v in fields) or not raw["id"]:
            raise ValueError("Malformed note record")
        return cls(id=fields[0], title=fields[1], content=fields[2], updated_at=fields[3])


def dump_notes(notes: list[Note]) -> str:
    return json.dumps([n.to_dict() for n in notes], ensure_ascii=False)


def parse_notes(blob: str | None) -> list[Note]:
    """Decode a persisted blob. Raises ValueError on anything but a list of note records."""
    if not blob:
        return []
    raw = json.loads(blob)
    if not isinstance(raw, list):
        raise ValueError("Notes blob is not a list")
    out: list[Note] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, dict):
            raise ValueError("Malformed note record")
        try:
            note = Note.from_dict(item)
        except KeyError as exc:
            raise ValueError(f"Note record missing {exc}") from exc
        if note.id in seen:
            logger.warning("duplicate_note_id_dropped", note_id=note.id)
            continue
        seen.add(note.id)
        out.append(note)
    return out


@dataclass(frozen=True)
class StoreSnapshot:
    notes: list[Note]
    selected_id: str | None
    draft: Note | None
    editing: bool
    search_term: str
    state: str


class NotesStore:
    """Owns the note list and the selection / draft / editing state machine.

    Every operation that changes the list writes the whole list through `blob_store`
    exactly once. Draft and editing are re-derived at the end of each operation.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_note_id,
    ):
        self.blob_store = blob_store
        self.clock = clock
        self.id_factory = id_factory

        self.notes: list[Note] = self._load()
        self.selected_id: str | None = self.notes[0].id if self.notes else None
        self.search_term = ""
        self.editing = False
        self.draft: Note | None = None
        self._resync()

    def _load(self) -> list[Note]:
        try:
            return parse_notes(self.blob_store.load())
        except (ValueError, OSError, RecursionError) as exc:
            # json.JSONDecodeError is a ValueError; deeply nested arrays raise RecursionError
            logger.warning("notes_load_failed", error=str(exc))
            return []

    def _persist(self) -> None:
        self.blob_store.save(dump_notes(self.notes))

    def _now_iso(self) -> str:
        return to_iso(self.clock())

    def _resync(self, template: Note | None = None) -> None:
        selected = self.get(self.selected_id) if self.selected_id is not None else None
        if selected is not None:
            self.draft = replace(selected)
        else:
            self.draft = template
        self.editing = template is not None and selected is None

    def _index_of(self, note_id: str) -> int | None:
        for i, n in enumerate(self.notes):
            if n.id == note_id:
                return i
        return None

    # -- queries --

    def get(self, note_id: str) -> Note | None:
        idx = self._index_of(note_id)
        return None if idx is None else self.notes[idx]

    def selected_note(self) -> Note | None:
        if self.selected_id is None:
            return None
        return self.get(self.selected_id)

    @property
    def state(self) -> str:
        if self.editing:
            return STATE_CREATING
        if self.selected_note() is not None:
            return STATE_VIEWING
        return STATE_EMPTY

    def visible_notes(self) -> list[Note]:
        return project(self.notes, self.search_term)

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            notes=self.visible_notes(),
            selected_id=self.selected_id,
            draft=self.draft,
            editing=self.editing,
            search_term=self.search_term,
            state=self.state,
        )

    # -- intents --

    def select(self, note_id: str) -> None:
        self.selected_id = note_id if self.get(note_id) is not None else None
        self._resync()

    def create(self) -> Note:
        template = Note(id=self.id_factory(), title="", content="", updated_at=self._now_iso())
        self.selected_id = None
        self._resync(template=template)
        logger.debug("note_draft_started", note_id=template.id)
        return template

    def save(self, note_id: str, title: str, content: str) -> Note | None:
        """Persist the editor's fields.

        While composing a new note the note is prepended and selected. Otherwise the
        existing note with `note_id` gets the new title/content; an unknown id is a no-op.
        A new note whose id is already in the list is refused, so ids stay unique.
        """
        now = self._now_iso()
        if self.editing:
            if self._index_of(note_id) is not None:
                logger.warning("note_create_id_taken", note_id=note_id)
                return None
            saved = Note(id=note_id, title=title, content=content, updated_at=now)
            self.notes = [saved] + self.notes
            self.selected_id = saved.id
            self._persist()
            self._resync()
            logger.info("note_created", note_id=saved.id)
            return saved

        idx = self._index_of(note_id)
        if idx is None:
            logger.debug("note_save_ignored", note_id=note_id)
            return None
        saved = replace(self.notes[idx], title=title, content=content, updated_at=now)
        self.notes = self.notes[:idx] + [saved] + self.notes[idx + 1:]
        self._persist()
        self._resync()
        logger.info("note_updated", note_id=saved.id)
        return saved

    def delete(self, note_id: str) -> bool:
        if self._index_of(note_id) is None:
            logger.debug("note_delete_ignored", note_id=note_id)
            return False

        if len(self.notes) > 1:
            self.selected_id = next(n.id for n in self.notes if n.id != note_id)
        else:
            self.selected_id = None
        self.notes = [n for n in self.notes if n.id != note_id]
        self.draft = None
        self._persist()
        self._resync()
        logger.info("note_deleted", note_id=note_id, next_selected_id=self.selected_id)
        return True

    def change_draft(self, draft: Note) -> None:
        self.draft = draft

    def search(self, term: str | None) -> None:
        self.search_term = term or ""
