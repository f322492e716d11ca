import pytest

from projectadmin.cascade import CascadeFailed
from projectadmin.models import Collection
from tests.tools import StoreError, add_project_file, references


@pytest.mark.anyio
async def test_delete_file_related_data(engine, metadata, assets):
    _, report = await add_project_file(metadata, assets, "p1", "03_Reports/Daily_Reports", "day1.pdf", "c1")
    _, other_report = await add_project_file(metadata, assets, "p1", "03_Reports/Daily_Reports", "day2.pdf", "c1")

    await engine.delete_file_related_data("p1", report)

    for collection in (Collection.FILE_READ_STATUS, Collection.REPORT_APPROVALS):
        assert references(metadata, collection, file_path=report) == []
        assert len(references(metadata, collection, file_path=other_report)) == 1
    # the file itself and its asset are not touched
    assert len(references(metadata, Collection.FILES, public_id=report)) == 1
    assert report in assets.keys


@pytest.mark.anyio
async def test_only_exact_project(engine, metadata, assets):
    _, report = await add_project_file(metadata, assets, "p1", "03_Reports/Daily_Reports", "day1.pdf", "c1")
    # a read status in another project that happens to use the same path
    await metadata.add(Collection.FILE_READ_STATUS, {"project_id": "p2", "customer_id": "c1", "file_path": report})

    await engine.delete_file_related_data("p1", report)

    assert references(metadata, Collection.FILE_READ_STATUS, file_path=report) == [
        {"project_id": "p2", "customer_id": "c1", "file_path": report}
    ]


@pytest.mark.anyio
async def test_nothing_to_delete(engine, metadata):
    await engine.delete_file_related_data("p1", "projects/p1/nothing.pdf")
    # no batch request is made for an empty result
    assert ("batch_delete", Collection.FILE_READ_STATUS) not in metadata.calls


@pytest.mark.anyio
async def test_both_collections_complete(engine, metadata, assets):
    _, report = await add_project_file(metadata, assets, "p1", "03_Reports/Daily_Reports", "day1.pdf", "c1")
    metadata.fail_on.add(("batch_delete", Collection.FILE_READ_STATUS))

    with pytest.raises(CascadeFailed) as exc_info:
        await engine.delete_file_related_data("p1", report)
    assert isinstance(exc_info.value.__cause__, StoreError)
    assert len(references(metadata, Collection.FILE_READ_STATUS, file_path=report)) == 1
    assert references(metadata, Collection.REPORT_APPROVALS, file_path=report) == []
