import pytest
from pydantic import ValidationError

from projectadmin.taxonomy import (
    ADMIN_ONLY_FOLDER_PATH,
    PROJECT_FOLDER_STRUCTURE,
    get_all_folder_paths,
    get_all_valid_folder_paths,
    get_default_folder_path,
    get_scope_folder,
    get_visible_folder_paths_for_edit,
    is_admin_only_path,
    is_report_path,
    is_valid_folder_path,
)


def test_structure():
    assert [f.name for f in PROJECT_FOLDER_STRUCTURE] == [
        "00_New_Not_Viewed_Yet_",
        "01_Customer_Uploads",
        "02_Photos",
        "03_Reports",
        "04_Emails",
        "05_Quotations",
        "06_Invoices",
        "07_Delivery_Notes",
        "08_General",
        "09_Admin_Only",
    ]
    photos = PROJECT_FOLDER_STRUCTURE[2]
    assert [c.path for c in photos.children] == [
        "02_Photos/Before",
        "02_Photos/During_Work",
        "02_Photos/After",
        "02_Photos/Damages_and_Defects",
    ]
    assert all(c.is_leaf for c in photos.children)
    assert PROJECT_FOLDER_STRUCTURE[0].is_leaf


def test_structure_is_immutable():
    with pytest.raises(ValidationError):
        PROJECT_FOLDER_STRUCTURE[0].name = "changed"  # type: ignore[misc]


def test_all_folder_paths():
    paths = get_all_folder_paths()
    # 10 top level folders, 24 subfolders
    assert len(paths) == 34
    assert len(set(paths)) == len(paths)
    assert paths[0] == "00_New_Not_Viewed_Yet_"
    assert paths[1:5] == [
        "01_Customer_Uploads",
        "01_Customer_Uploads/Photos",
        "01_Customer_Uploads/Documents",
        "01_Customer_Uploads/Other",
    ]
    assert ADMIN_ONLY_FOLDER_PATH in paths
    assert set(paths) == get_all_valid_folder_paths()
    # callers cannot modify the taxonomy through the returned list
    paths.clear()
    assert len(get_all_folder_paths()) == 34


def test_valid_paths():
    assert is_valid_folder_path("02_Photos")
    assert is_valid_folder_path("02_Photos/Before")
    assert is_valid_folder_path("09_Admin_Only")
    assert not is_valid_folder_path("02_Photos/Nope")
    assert not is_valid_folder_path("")
    assert not is_valid_folder_path("02_Photos/")


def test_admin_only():
    assert is_admin_only_path("09_Admin_Only")
    assert is_admin_only_path("09_Admin_Only/Prices")
    assert not is_admin_only_path("09_Admin_Only_Not")
    assert not is_admin_only_path("02_Photos")
    assert not is_admin_only_path("")


def test_report_path():
    assert is_report_path("03_Reports")
    assert is_report_path("03_Reports/Daily_Reports")
    assert not is_report_path("07_Delivery_Notes/Reports_Linked_to_Delivery_Notes")


def test_visible_paths():
    visible = get_visible_folder_paths_for_edit()
    assert ADMIN_ONLY_FOLDER_PATH not in visible
    assert not any(is_admin_only_path(p) for p in visible)
    assert not any(p.startswith(("00_", "01_")) for p in visible)
    assert visible[0] == "02_Photos"
    assert "08_General/Other_Documents" in visible
    assert set(visible) < set(get_all_folder_paths())


def test_default_folder_path():
    assert get_default_folder_path() == "02_Photos/Before"


def test_scope_folder():
    assert get_scope_folder("02_Photos/After").path == "02_Photos"
    assert get_scope_folder("03_Reports").path == "03_Reports"
    assert get_scope_folder("01_Customer_Uploads/Photos") is None
    assert get_scope_folder("does/not/exist") is None
