from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Self


class Collection(str, Enum):
    """The metadata collections. Each maps to one elasticsearch index."""

    CATALOG_FOLDERS = "catalog_folders"
    CATALOG_ENTRIES = "catalog_entries"
    OFFER_FOLDERS = "offer_folders"
    OFFER_ITEMS = "offer_items"
    PROJECTS = "projects"
    CUSTOMERS = "customers"
    FILES = "files"
    FILE_READ_STATUS = "file_read_status"
    REPORT_APPROVALS = "report_approvals"
    GALLERY = "gallery"


class AssetOutcome(str, Enum):
    """Result of an asset store deletion. Asset deletion never raises, so callers must inspect this."""

    DELETED = "deleted"
    NOT_FOUND = "not_found"
    ERROR = "error"

    @property
    def ok(self) -> bool:
        return self is not AssetOutcome.ERROR


def _now() -> datetime:
    return datetime.now(UTC)


######################## FIXED TAXONOMY #########################


class FolderNode(BaseModel):
    """One node of the fixed project folder taxonomy."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    children: tuple["FolderNode", ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children


######################## FOLDER TREES #########################


class FolderTree(BaseModel):
    """
    A user-created folder tree: folders nest through parent_id (None for top level folders),
    items belong to a folder through folder_id.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    folders: Collection
    items: Collection


CATALOG_TREE = FolderTree(name="catalog", folders=Collection.CATALOG_FOLDERS, items=Collection.CATALOG_ENTRIES)
OFFER_TREE = FolderTree(name="offer", folders=Collection.OFFER_FOLDERS, items=Collection.OFFER_ITEMS)


######################## METADATA RECORDS #########################


class Record(BaseModel):
    """
    Base class for everything stored in the metadata store.
    The id is the document id in the store and is never part of the stored document itself.
    """

    id: str | None = None

    @classmethod
    def from_record(cls, id: str, doc: dict) -> Self:
        return cls.model_validate({**doc, "id": id})

    def to_doc(self) -> dict:
        return self.model_dump(mode="json", exclude={"id"})


class Folder(Record):
    """A folder in one of the user-created folder trees (catalog or offers)."""

    name: Annotated[str, Field(min_length=1)]
    parent_id: str | None = None
    order: int = 0
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class OfferItem(Record):
    folder_id: str
    name: Annotated[str, Field(min_length=1)]
    description: str = ""
    unit: str = ""
    price: str = ""  # free text, e.g. "12.50" or "on request"
    quantity_unit: str = ""
    image_url: str | None = None
    order: int = 0
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class CatalogEntry(Record):
    folder_id: str
    name: Annotated[str, Field(min_length=1)]
    description: str = ""
    file_url: str
    file_name: str = ""
    public_id: str | None = None  # asset store key, if the upload recorded it
    order: int = 0
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class Customer(Record):
    name: str = ""
    email: str | None = None
    customer_number: str | None = None


class Project(Record):
    name: str = ""
    description: str = ""
    customer_id: str | None = None


class ProjectFile(Record):
    project_id: str
    folder_key: str  # flattened taxonomy path, see projectadmin.paths.folder_storage_key
    folder_path: str
    file_name: str
    public_id: str | None = None
    uploaded_at: datetime = Field(default_factory=_now)


class FileReadStatus(Record):
    project_id: str
    customer_id: str
    file_path: str  # public id of the file in the asset store
    read_at: datetime = Field(default_factory=_now)


ReportStatus = Literal["pending", "approved", "auto-approved"]


class ReportApproval(Record):
    project_id: str
    customer_id: str
    file_path: str  # public id of the file in the asset store
    status: ReportStatus = "pending"
    approved_at: datetime | None = None
    uploaded_at: datetime | None = None
    auto_approve_date: datetime | None = None


class GalleryImage(Record):
    url: str
    public_id: str | None = None
    category: str = ""
    title: str = ""
    is_active: bool = True
    uploaded_at: datetime = Field(default_factory=_now)
