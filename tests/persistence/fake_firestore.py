"""In-memory Firestore fake for repository unit tests.

Mimics the google-cloud-firestore AsyncClient interface just enough
to test BaseRepository and StrikeRepository without network access.
Set ``fail_with`` to an exception to make every write (and optionally
read) raise it.
"""

from __future__ import annotations

from typing import Any


class FakeDocumentSnapshot:
    def __init__(self, data: dict[str, Any] | None, doc_id: str):
        self._data = data
        self.id = doc_id
        self.exists = data is not None

    def to_dict(self) -> dict[str, Any]:
        if self._data is None:
            raise ValueError("Document does not exist")
        return dict(self._data)


class FakeDocumentRef:
    def __init__(self, client: "FakeFirestoreClient", path: str):
        self._client = client
        self._path = path
        self.id = path.rsplit("/", 1)[-1]

    async def get(self) -> FakeDocumentSnapshot:
        self._client.check_read()
        data = self._client.store.get(self._path)
        return FakeDocumentSnapshot(data, self.id)

    async def set(self, data: dict, merge: bool = False) -> None:
        self._client.check_write()
        store = self._client.store
        if merge and self._path in store:
            store[self._path].update(data)
        else:
            store[self._path] = dict(data)

    async def delete(self) -> None:
        self._client.check_write()
        self._client.store.pop(self._path, None)

    def collection(self, name: str) -> "FakeCollectionRef":
        return FakeCollectionRef(self._client, f"{self._path}/{name}")


class FakeCollectionRef:
    def __init__(self, client: "FakeFirestoreClient", path: str):
        self._client = client
        self._path = path

    def document(self, doc_id: str) -> FakeDocumentRef:
        return FakeDocumentRef(self._client, f"{self._path}/{doc_id}")

    async def stream(self):
        self._client.check_read()
        prefix = self._path + "/"
        for path, data in sorted(self._client.store.items()):
            if path.startswith(prefix):
                rest = path[len(prefix):]
                # Only yield direct children (no nested subcollections)
                if "/" not in rest:
                    yield FakeDocumentSnapshot(dict(data), rest)


class FakeFirestoreClient:
    """Drop-in replacement for ``google.cloud.firestore.AsyncClient``."""

    def __init__(self):
        self.store: dict[str, dict] = {}
        self.fail_with: Exception | None = None
        self.fail_reads = False

    def collection(self, name: str) -> FakeCollectionRef:
        return FakeCollectionRef(self, name)

    def check_write(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def check_read(self) -> None:
        if self.fail_with is not None and self.fail_reads:
            raise self.fail_with
