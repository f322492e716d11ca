from typing import Any, AsyncIterable, Mapping

import elasticsearch.helpers
from elasticsearch.helpers.errors import BulkIndexError
from pydantic import BaseModel

from projectadmin.connections import es


class BulkInsertAction(BaseModel):
    index: str
    id: str | None
    doc: dict


def filters_to_query(filters: Mapping[str, Any]) -> dict:
    """
    Convert an equality filter {field: value, ...} into an elasticsearch bool query.
    A value of None matches documents where the field is missing or null.
    """
    if not filters:
        return {"match_all": {}}
    must: list[dict] = []
    must_not: list[dict] = []
    for field, value in filters.items():
        if value is None:
            must_not.append({"exists": {"field": field}})
        else:
            must.append({"term": {field: value}})
    query: dict = {"bool": {}}
    if must:
        query["bool"]["filter"] = must
    if must_not:
        query["bool"]["must_not"] = must_not
    return query


async def index_scan(
    index: str,
    batchsize: int = 1000,
    query: dict | None = None,
    sort: list | None = None,
    source: list[str] | None = None,
    scroll: str = "5m",
) -> AsyncIterable[tuple[str, dict]]:
    """
    Scan an index in batches of the given size. Yields (id, document) one by one (batching behind the scenes).
    Helpers scan is much faster without sorting (which sets preserve_order to TRUE), so avoid it if you can.
    """
    query_body: dict = {}
    if query is not None:
        query_body["query"] = query
    if sort is not None:
        query_body["sort"] = sort
    if source is not None:
        query_body["_source"] = source

    async for hit in elasticsearch.helpers.async_scan(
        es(),
        index=index,
        query=query_body,
        scroll=scroll,
        size=batchsize,
        preserve_order=sort is not None,
    ):
        yield hit["_id"], hit["_source"]


async def es_bulk_create_or_overwrite(actions: list[BulkInsertAction], refresh: bool = True) -> None:
    """
    Create or overwrite documents in bulk. Each action needs to include the
    index name, optional id (random if empty), and the document to insert.
    """
    body = []
    for a in actions:
        action = {"_op_type": "index", "_index": a.index, **a.doc}
        if a.id is not None:
            action["_id"] = a.id
        body.append(action)
    if body:
        await bulk_helper_with_errors(body, refresh=refresh)


async def bulk_helper_with_errors(actions: list[dict], **kwargs) -> None:
    """
    elastic bulk but printing the reason for the first error if any
    """
    try:
        await elasticsearch.helpers.async_bulk(es(), actions, **kwargs)
    except BulkIndexError as e:
        if e.errors:
            _, error = list(e.errors[0].items())[0]
            reason = error.get("error", {}).get("reason", error)
            e.args = e.args + (f"First error: {reason}",)
        raise


async def es_delete_ids(index: str, ids: list[str], refresh: bool = True) -> int:
    """
    Delete the given document ids from an index in a single request. Ids that do not exist are ignored.
    Returns the number of deleted documents.
    """
    if not ids:
        return 0
    result = await es().delete_by_query(index=index, query={"ids": {"values": ids}}, refresh=refresh)
    if result.get("failures"):
        raise RuntimeError(f"Failed to delete {len(result['failures'])} documents from {index}: {result['failures'][0]}")
    return result["deleted"]
