"""Test doubles and document builders."""

from typing import Any, Dict, List, Set

from carvault.exceptions import StoreError
from carvault.storage import InMemoryDocumentStore


COLLECTION = "cars"
FIXED_NOW = "2024-01-01T00:00:00.000Z"


class FlakyDocumentStore(InMemoryDocumentStore):
    """In-memory store whose operations can be made to fail on demand."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_on: Set[str] = set()

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StoreError(f"simulated {operation} failure")

    async def insert(self, collection, record):
        self._check("insert")
        return await super().insert(collection, record)

    async def fetch_all(self, collection):
        self._check("fetch_all")
        return await super().fetch_all(collection)

    async def query_equals(self, collection, field, value):
        self._check("query_equals")
        return await super().query_equals(collection, field, value)

    async def update_by_id(self, collection, record_id, partial):
        self._check("update_by_id")
        return await super().update_by_id(collection, record_id, partial)

    async def delete_by_id(self, collection, record_id):
        self._check("delete_by_id")
        return await super().delete_by_id(collection, record_id)


def vehicle_doc(
    make: str = "Tata",
    model: str = "Nexon",
    chassis: str = "CH001",
    category: str = "SUV",
    year: Any = 2022,
    price: Any = 1000000.0,
) -> Dict[str, Any]:
    return {
        "make": make,
        "model": model,
        "chassis": chassis,
        "category": category,
        "year": year,
        "price": price,
        "createdAt": FIXED_NOW,
    }


async def seed(store: InMemoryDocumentStore, *docs: Dict[str, Any]) -> List[str]:
    return [await store.insert(COLLECTION, doc) for doc in docs]
