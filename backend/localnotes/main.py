import os
from pathlib import Path

from fastapi import FastAPI

from localnotes.api.notes import router as notes_router
from localnotes.storage.blob_store import DEFAULT_STORAGE_KEY, BlobStore, FileBlobStore, MemoryBlobStore
from localnotes.storage.notes_store import NotesStore
from localnotes.utils.logging import get_logger, setup_logging

# Base data dir: repository_root/data (we are in backend/localnotes/)
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"

logger = get_logger(__name__)


def build_blob_store() -> BlobStore:
    key = os.getenv("NOTES_STORAGE_KEY", DEFAULT_STORAGE_KEY)
    backend = os.getenv("NOTES_STORAGE", "file").lower()
    if backend == "memory":
        return MemoryBlobStore(key=key)
    if backend != "file":
        raise ValueError(f"Unknown NOTES_STORAGE backend: {backend}")
    data_dir = Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR)))
    return FileBlobStore(data_dir, key=key)


def create_app(store: NotesStore | None = None) -> FastAPI:
    setup_logging()

    app = FastAPI(title="Local Notes")
    app.state.store = store if store is not None else NotesStore(build_blob_store())
    logger.info("notes_store_ready", notes=len(app.state.store.notes))

    @app.get("/health")
    def health():
        return {"ok": True}

    app.include_router(notes_router)
    return app
