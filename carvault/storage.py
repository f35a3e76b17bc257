# carvault/storage.py
"""
Document stores backing the vehicle catalogue.

``DocumentStore`` is the small async contract the catalogue controller
relies on: insert, fetch-all, equality query, update-by-id and
delete-by-id over named collections. Two implementations are provided:

* ``InMemoryDocumentStore`` keeps documents in insertion-ordered dicts.
* ``JsonFileDocumentStore`` has the same semantics and persists every
  collection to a single JSON file after each mutation.

Each store also carries a readiness signal. ``connect()`` sets it once the
backend can serve requests and ``wait_ready()`` awaits it with a timeout.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
import secrets
import string
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .exceptions import RecordNotFoundError, StoreError, StoreNotReadyError


logger = logging.getLogger(__name__)

Document = Dict[str, Any]
Snapshot = List[Tuple[str, Document]]

_ID_ALPHABET = string.ascii_letters + string.digits
_ID_LENGTH = 20


def new_document_id() -> str:
    """Return a random 20-character alphanumeric document id."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


class DocumentStore(ABC):
    """Async document store contract used by the catalogue controller."""

    def __init__(self) -> None:
        self._ready = asyncio.Event()

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    async def connect(self) -> None:
        """Bring the backend up and signal readiness."""
        self._ready.set()

    async def wait_ready(self, timeout: float) -> None:
        """Wait once for :meth:`connect`, raising ``StoreNotReadyError`` on timeout."""
        try:
            await asyncio.wait_for(self._ready.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            raise StoreNotReadyError(timeout) from None

    @abstractmethod
    async def insert(self, collection: str, record: Document) -> str:
        ...

    @abstractmethod
    async def fetch_all(self, collection: str) -> Snapshot:
        ...

    @abstractmethod
    async def query_equals(self, collection: str, field: str, value: Any) -> Snapshot:
        ...

    @abstractmethod
    async def update_by_id(self, collection: str, record_id: str, partial: Document) -> None:
        ...

    @abstractmethod
    async def delete_by_id(self, collection: str, record_id: str) -> None:
        ...


class InMemoryDocumentStore(DocumentStore):
    """Process-local store; documents are copied in and out.

    Mutations build the next state beside the current one and hand it to
    :meth:`_persist`. Only when that returns is the new state installed,
    so a failed write leaves the store unchanged. Stored documents are
    replaced, never modified in place, which keeps the shallow copies of
    the collection maps safe to share.
    """

    def __init__(self) -> None:
        super().__init__()
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._mutation_lock = asyncio.Lock()

    def _collection(self, name: str) -> Dict[str, Document]:
        return self._collections.get(name, {})

    def _require(self, collection: str, record_id: str) -> Dict[str, Document]:
        docs = self._collection(collection)
        if record_id not in docs:
            raise RecordNotFoundError(collection, record_id)
        return docs

    async def _persist(self, collections: Dict[str, Dict[str, Document]]) -> None:
        """Make ``collections`` durable; raise ``StoreError`` to reject it."""

    async def _commit(self, collection: str, docs: Dict[str, Document]) -> None:
        candidate = dict(self._collections)
        candidate[collection] = docs
        await self._persist(candidate)
        self._collections = candidate

    async def insert(self, collection: str, record: Document) -> str:
        async with self._mutation_lock:
            docs = dict(self._collection(collection))
            record_id = new_document_id()
            while record_id in docs:
                record_id = new_document_id()
            docs[record_id] = copy.deepcopy(record)
            await self._commit(collection, docs)
        logger.debug("Inserted %s/%s", collection, record_id)
        return record_id

    async def fetch_all(self, collection: str) -> Snapshot:
        return [(rid, copy.deepcopy(doc)) for rid, doc in self._collection(collection).items()]

    async def query_equals(self, collection: str, field: str, value: Any) -> Snapshot:
        return [
            (rid, copy.deepcopy(doc))
            for rid, doc in self._collection(collection).items()
            if field in doc and doc[field] == value
        ]

    async def update_by_id(self, collection: str, record_id: str, partial: Document) -> None:
        async with self._mutation_lock:
            docs = dict(self._require(collection, record_id))
            docs[record_id] = {**docs[record_id], **copy.deepcopy(partial)}
            await self._commit(collection, docs)
        logger.debug("Updated %s/%s fields=%s", collection, record_id, sorted(partial))

    async def delete_by_id(self, collection: str, record_id: str) -> None:
        async with self._mutation_lock:
            docs = dict(self._require(collection, record_id))
            del docs[record_id]
            await self._commit(collection, docs)
        logger.debug("Deleted %s/%s", collection, record_id)

    def count(self, collection: str) -> int:
        return len(self._collection(collection))


class JsonFileDocumentStore(InMemoryDocumentStore):
    """In-memory store mirrored to a JSON file on disk.

    The file holds a mapping of collection name to ``{id: document}``.
    Each mutation writes the whole candidate state to a sibling temporary
    file in a worker thread and renames it over the store file; the
    in-memory state changes only after the rename succeeds. Writes are
    serialised with a ``threading.Lock``. A missing file is treated as an
    empty store; an unreadable or malformed file makes :meth:`connect`
    fail with ``StoreError``.
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)
        self._lock = threading.Lock()

    async def connect(self) -> None:
        self._collections = self._load()
        logger.info(
            "Loaded %d collection(s) from %s", len(self._collections), self.path
        )
        await super().connect()

    def _load(self) -> Dict[str, Dict[str, Document]]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StoreError(f"Cannot read store file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"Store file {self.path} does not hold a JSON object")
        return {
            str(name): {str(rid): doc for rid, doc in docs.items()}
            for name, docs in data.items()
            if isinstance(docs, dict)
        }

    async def _persist(self, collections: Dict[str, Dict[str, Document]]) -> None:
        await asyncio.to_thread(self._write, collections)

    def _write(self, collections: Dict[str, Dict[str, Document]]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with tmp.open("w", encoding="utf-8") as f:
                    json.dump(collections, f, ensure_ascii=False, indent=2)
                os.replace(tmp, self.path)
            except (OSError, TypeError, ValueError) as exc:
                tmp.unlink(missing_ok=True)
                raise StoreError(f"Cannot write store file {self.path}: {exc}") from exc


def build_store(backend: str, path: Path) -> DocumentStore:
    """Create the store selected by configuration."""
    if backend == "memory":
        return InMemoryDocumentStore()
    if backend == "json":
        return JsonFileDocumentStore(path)
    raise ValueError(f"Unknown store backend: {backend!r}")
