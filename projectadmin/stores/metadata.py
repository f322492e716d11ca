"""
Metadata store: the document store holding every record (folders, entries, projects, files, ...).

The cascade engine only talks to the MetadataStore protocol. ElasticMetadataStore implements it on
top of elasticsearch, with one index per Collection.
"""

import logging
from typing import Any, Mapping, Protocol

from elasticsearch import NotFoundError

from projectadmin.connections import es
from projectadmin.elastic.indices import index_name
from projectadmin.elastic.util import es_delete_ids, filters_to_query, index_scan
from projectadmin.models import Collection

logger = logging.getLogger(__name__)

# A record as returned by the store: (id, document)
StoredRecord = tuple[str, dict]


class RecordNotFound(LookupError):
    def __init__(self, collection: Collection, id: str):
        super().__init__(f"No {collection.value} record with id {id}")
        self.collection = collection
        self.id = id


class MetadataStore(Protocol):
    async def query(self, collection: Collection, filters: Mapping[str, Any]) -> list[StoredRecord]:
        """All records whose fields equal the given values (None matches a missing/null field)."""
        ...

    async def get(self, collection: Collection, id: str) -> dict | None: ...

    async def add(self, collection: Collection, doc: dict, id: str | None = None) -> str: ...

    async def update(self, collection: Collection, id: str, doc: dict) -> None: ...

    async def delete(self, collection: Collection, id: str) -> bool:
        """Delete one record. Returns False if it did not exist, which is not an error."""
        ...

    async def batch_delete(self, collection: Collection, ids: list[str]) -> int:
        """
        Delete several records of one collection in a single request. Missing ids are ignored.
        Not atomic: if the request fails, some of the records may already be deleted.
        """
        ...


class ElasticMetadataStore:
    """MetadataStore backed by elasticsearch. All writes refresh, so a following query sees them."""

    async def query(self, collection: Collection, filters: Mapping[str, Any]) -> list[StoredRecord]:
        query = filters_to_query(filters)
        return [(id, doc) async for id, doc in index_scan(index_name(collection), query=query)]

    async def get(self, collection: Collection, id: str) -> dict | None:
        doc = await es().options(ignore_status=[404]).get(index=index_name(collection), id=id)
        if not doc["found"]:
            return None
        return doc["_source"]

    async def add(self, collection: Collection, doc: dict, id: str | None = None) -> str:
        res = await es().index(index=index_name(collection), id=id, document=doc, refresh=True)
        return res["_id"]

    async def update(self, collection: Collection, id: str, doc: dict) -> None:
        await es().update(index=index_name(collection), id=id, doc=doc, refresh=True)

    async def delete(self, collection: Collection, id: str) -> bool:
        try:
            await es().delete(index=index_name(collection), id=id, refresh=True)
        except NotFoundError:
            logger.debug(f"{collection.value}/{id} was already deleted")
            return False
        return True

    async def batch_delete(self, collection: Collection, ids: list[str]) -> int:
        return await es_delete_ids(index_name(collection), ids)
