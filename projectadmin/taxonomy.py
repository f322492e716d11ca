"""
Fixed project folder structure.

Every project exposes the same two-level folder tree: a fixed set of top-level categories,
most of them with a fixed set of subfolders. The tree is built once at import and never changes.

    00_New_Not_Viewed_Yet_
    01_Customer_Uploads/{Photos, Documents, Other}
    02_Photos/{Before, During_Work, After, Damages_and_Defects}
    03_Reports/{Daily_Reports, Weekly_Reports, Acceptance_Protocols}
    04_Emails/{Incoming, Outgoing}
    05_Quotations/{Drafts, Approved, Rejected}
    06_Invoices/{Progress_Invoices, Final_Invoices, Credit_Notes}
    07_Delivery_Notes/{Material_Delivery_Notes, Piecework_Delivery_Notes, Reports_Linked_to_Delivery_Notes}
    08_General/{Contracts, Plans, Other_Documents}
    09_Admin_Only

09_Admin_Only holds private files (material prices, internal notes) and is never shown to customers.
00_New_Not_Viewed_Yet_ and 01_Customer_Uploads are only filled by the intake process and are
hidden from the edit and customer views.
"""

from functools import cache

from projectadmin.models import FolderNode

ADMIN_ONLY_FOLDER_PATH = "09_Admin_Only"
REPORTS_FOLDER_PATH = "03_Reports"
BOOTSTRAP_ONLY_FOLDER_PATHS = frozenset({"00_New_Not_Viewed_Yet_", "01_Customer_Uploads"})


def _folder(name: str, *children: str) -> FolderNode:
    return FolderNode(
        name=name,
        path=name,
        children=tuple(FolderNode(name=child, path=f"{name}/{child}") for child in children),
    )


PROJECT_FOLDER_STRUCTURE: tuple[FolderNode, ...] = (
    _folder("00_New_Not_Viewed_Yet_"),
    _folder("01_Customer_Uploads", "Photos", "Documents", "Other"),
    _folder("02_Photos", "Before", "During_Work", "After", "Damages_and_Defects"),
    _folder("03_Reports", "Daily_Reports", "Weekly_Reports", "Acceptance_Protocols"),
    _folder("04_Emails", "Incoming", "Outgoing"),
    _folder("05_Quotations", "Drafts", "Approved", "Rejected"),
    _folder("06_Invoices", "Progress_Invoices", "Final_Invoices", "Credit_Notes"),
    _folder(
        "07_Delivery_Notes",
        "Material_Delivery_Notes",
        "Piecework_Delivery_Notes",
        "Reports_Linked_to_Delivery_Notes",
    ),
    _folder("08_General", "Contracts", "Plans", "Other_Documents"),
    _folder(ADMIN_ONLY_FOLDER_PATH),
)

VISIBLE_FOLDER_STRUCTURE: tuple[FolderNode, ...] = tuple(
    f for f in PROJECT_FOLDER_STRUCTURE if f.path not in BOOTSTRAP_ONLY_FOLDER_PATHS
)


def _flatten(folders: tuple[FolderNode, ...]) -> list[str]:
    paths: list[str] = []
    for folder in folders:
        paths.append(folder.path)
        paths.extend(child.path for child in folder.children)
    return paths


@cache
def _all_paths() -> tuple[str, ...]:
    return tuple(_flatten(PROJECT_FOLDER_STRUCTURE))


def get_all_folder_paths() -> list[str]:
    """
    All valid folder paths (top-level and subfolders) in taxonomy order.
    This includes the admin-only and bootstrap folders, so it is what a project cascade iterates over.
    """
    return list(_all_paths())


def get_all_valid_folder_paths() -> frozenset[str]:
    return frozenset(_all_paths())


def is_valid_folder_path(folder_path: str) -> bool:
    return folder_path in get_all_valid_folder_paths()


def is_admin_only_path(folder_path: str) -> bool:
    """Whether the path is the admin-only folder or lies below it."""
    return folder_path == ADMIN_ONLY_FOLDER_PATH or folder_path.startswith(f"{ADMIN_ONLY_FOLDER_PATH}/")


def is_report_path(folder_path: str) -> bool:
    return folder_path == REPORTS_FOLDER_PATH or folder_path.startswith(f"{REPORTS_FOLDER_PATH}/")


def get_visible_folder_paths_for_edit() -> list[str]:
    """Folder paths shown in the admin edit table (no intake/bootstrap folders, no admin-only folder)."""
    return [p for p in _flatten(VISIBLE_FOLDER_STRUCTURE) if not is_admin_only_path(p)]


def get_scope_folder(selected_folder_path: str) -> FolderNode | None:
    """
    The visible top-level folder that contains (or is) the selected path.
    Used so a files view shows only the opened folder and its subfolders.
    """
    for folder in VISIBLE_FOLDER_STRUCTURE:
        if selected_folder_path == folder.path:
            return folder
        if any(child.path == selected_folder_path for child in folder.children):
            return folder
    return None


def get_default_folder_path() -> str:
    """The first visible leaf: the folder that is opened when no folder is selected."""
    for folder in VISIBLE_FOLDER_STRUCTURE:
        if folder.children:
            return folder.children[0].path
        return folder.path
    return ""
