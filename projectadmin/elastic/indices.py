"""
Elasticsearch indices for the metadata collections.

Every Collection is stored in its own index named <index_prefix>_<collection>. When running the
unit tests (use_test_db), the indices get a test_ prefix so they never touch real data.
"""

import logging

from elasticsearch import BadRequestError

from projectadmin.config import get_settings
from projectadmin.connections import es
from projectadmin.elastic.mapping import BOOLEAN, DATE, INTEGER, KEYWORD, TEXT, ElasticMapping, text_with_keyword
from projectadmin.models import Collection

logger = logging.getLogger(__name__)


class InvalidIndexMapping(Exception):
    pass


def index_name(collection: Collection) -> str:
    settings = get_settings()
    name = f"{settings.index_prefix}_{collection.value}"
    if settings.use_test_db:
        name = f"test_{name}"
    return name


MAPPINGS: dict[Collection, ElasticMapping] = {
    Collection.CATALOG_FOLDERS: dict(
        name=text_with_keyword(),
        parent_id=KEYWORD,
        order=INTEGER,
        created_at=DATE,
        updated_at=DATE,
    ),
    Collection.CATALOG_ENTRIES: dict(
        folder_id=KEYWORD,
        name=text_with_keyword(),
        description=TEXT,
        file_url=KEYWORD,
        file_name=KEYWORD,
        public_id=KEYWORD,
        order=INTEGER,
        created_at=DATE,
        updated_at=DATE,
    ),
    Collection.OFFER_FOLDERS: dict(
        name=text_with_keyword(),
        parent_id=KEYWORD,
        order=INTEGER,
        created_at=DATE,
        updated_at=DATE,
    ),
    Collection.OFFER_ITEMS: dict(
        folder_id=KEYWORD,
        name=text_with_keyword(),
        description=TEXT,
        unit=KEYWORD,
        price=KEYWORD,
        quantity_unit=KEYWORD,
        image_url=KEYWORD,
        order=INTEGER,
        created_at=DATE,
        updated_at=DATE,
    ),
    Collection.PROJECTS: dict(
        name=text_with_keyword(),
        description=TEXT,
        customer_id=KEYWORD,
    ),
    Collection.CUSTOMERS: dict(
        name=text_with_keyword(),
        email=KEYWORD,
        customer_number=KEYWORD,
    ),
    Collection.FILES: dict(
        project_id=KEYWORD,  # a project's files per taxonomy folder are addressed by (project_id, folder_key)
        folder_key=KEYWORD,
        folder_path=KEYWORD,
        file_name=KEYWORD,
        public_id=KEYWORD,
        uploaded_at=DATE,
    ),
    Collection.FILE_READ_STATUS: dict(
        project_id=KEYWORD,
        customer_id=KEYWORD,
        file_path=KEYWORD,
        read_at=DATE,
    ),
    Collection.REPORT_APPROVALS: dict(
        project_id=KEYWORD,
        customer_id=KEYWORD,
        file_path=KEYWORD,
        status=KEYWORD,  # "pending", "approved", "auto-approved"
        approved_at=DATE,
        uploaded_at=DATE,
        auto_approve_date=DATE,
    ),
    Collection.GALLERY: dict(
        url=KEYWORD,
        public_id=KEYWORD,
        category=KEYWORD,
        title=TEXT,
        is_active=BOOLEAN,
        uploaded_at=DATE,
    ),
}


async def create_or_update_indices() -> None:
    """
    Create the metadata indices that do not exist yet, and update the mappings of those that do.
    Call this at startup.
    """
    for collection, mapping in MAPPINGS.items():
        index = index_name(collection)
        if await es().indices.exists(index=index):
            try:
                await es().indices.put_mapping(index=index, properties=mapping)
            except BadRequestError as e:
                raise InvalidIndexMapping(
                    f"Failed to update mapping of index {index}. "
                    "This indicates that the existing mapping is incompatible with the mapping in indices.py."
                ) from e
        else:
            logger.info(f"Creating index {index}")
            await es().indices.create(index=index, mappings={"dynamic": "strict", "properties": mapping})


async def delete_indices() -> None:
    for collection in MAPPINGS:
        await es().indices.delete(index=index_name(collection), ignore_unavailable=True)
