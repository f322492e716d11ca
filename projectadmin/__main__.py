"""
Project administration backend
"""

import argparse
import asyncio
import inspect
import logging
import os
import sys
from pathlib import Path

import uvicorn
from pydantic.fields import FieldInfo
from uvicorn.config import LOGGING_CONFIG

from projectadmin.cascade import CascadeEngine, CascadeFailed
from projectadmin.config import ENV_PREFIX, get_settings
from projectadmin.connections import es, projectadmin_connections, s3_enabled
from projectadmin.elastic.indices import create_or_update_indices, delete_indices, index_name
from projectadmin.elastic.util import BulkInsertAction, es_bulk_create_or_overwrite
from projectadmin.models import (
    CATALOG_TREE,
    OFFER_TREE,
    Collection,
    Customer,
    FileReadStatus,
    Project,
    ProjectFile,
    ReportApproval,
)
from projectadmin.objectstorage.s3bucket import add_s3_object, get_bucket
from projectadmin.paths import folder_storage_key, project_asset_prefix
from projectadmin.stores import default_asset_store, default_metadata_store
from projectadmin.taxonomy import is_report_path

DEMO_CUSTOMER = "demo_customer"
DEMO_PROJECT = "demo_project"


async def _check_elastic_connection():
    async with projectadmin_connections():
        if await es().ping():
            logging.info(f"Connect to elasticsearch {get_settings().elastic_host}")


def run(args):
    logging.info(f"Starting server at port {args.port}, debug={not args.nodebug}")
    logging.info(
        "To change server config, create an .env file and/or set environment parameters,\n"
        f"{' ' * 26}see projectadmin/config.py for more information.\n"
        f"{' ' * 26}You can also run `python -m projectadmin config` to create the .env settings file interactively\n"
    )

    asyncio.run(_check_elastic_connection())
    log_config = "logging.yml" if Path("logging.yml").exists() else LOGGING_CONFIG
    uvicorn.run("projectadmin.api:app", host="0.0.0.0", reload=not args.nodebug, port=int(args.port), log_config=log_config)


async def create_indices(args) -> None:
    async with projectadmin_connections():
        if args.recreate:
            logging.warning("**** Deleting all metadata indices ****")
            await delete_indices()
        await create_or_update_indices()


async def create_demo_data(_args) -> None:
    """Create a customer with one project with a few files, read statuses and approvals, to try out the cascades."""
    logging.info(f"**** Creating demo customer {DEMO_CUSTOMER} with project {DEMO_PROJECT} ****")
    prefix = project_asset_prefix(DEMO_PROJECT)
    public_ids: list[str] = []
    actions = [
        BulkInsertAction(
            index=index_name(Collection.CUSTOMERS),
            id=DEMO_CUSTOMER,
            doc=Customer(name="Demo customer", email="demo@example.com").to_doc(),
        ),
        BulkInsertAction(
            index=index_name(Collection.PROJECTS),
            id=DEMO_PROJECT,
            doc=Project(name="Demo project", customer_id=DEMO_CUSTOMER).to_doc(),
        ),
    ]
    for folder_path, file_name in [
        ("02_Photos/Before", "kitchen.jpg"),
        ("03_Reports/Daily_Reports", "day1.pdf"),
        ("09_Admin_Only", "material_prices.pdf"),
    ]:
        public_id = f"{prefix}{folder_storage_key(folder_path)}/{file_name}"
        public_ids.append(public_id)
        file = ProjectFile(
            project_id=DEMO_PROJECT,
            folder_key=folder_storage_key(folder_path),
            folder_path=folder_path,
            file_name=file_name,
            public_id=public_id,
        )
        actions.append(BulkInsertAction(index=index_name(Collection.FILES), id=None, doc=file.to_doc()))
        if is_report_path(folder_path):
            status = FileReadStatus(project_id=DEMO_PROJECT, customer_id=DEMO_CUSTOMER, file_path=public_id)
            approval = ReportApproval(project_id=DEMO_PROJECT, customer_id=DEMO_CUSTOMER, file_path=public_id)
            actions += [
                BulkInsertAction(index=index_name(Collection.FILE_READ_STATUS), id=None, doc=status.to_doc()),
                BulkInsertAction(index=index_name(Collection.REPORT_APPROVALS), id=None, doc=approval.to_doc()),
            ]

    async with projectadmin_connections():
        await create_or_update_indices()
        await es_bulk_create_or_overwrite(actions)
        if s3_enabled():
            bucket = await get_bucket()
            for public_id in public_ids:
                await add_s3_object(bucket, public_id, b"demo")


async def _run_cascade(kind: str, id: str) -> None:
    async with projectadmin_connections():
        engine = CascadeEngine(default_metadata_store(), default_asset_store())
        cascade = {
            "catalog folder": lambda id: engine.delete_folder_cascade(id, CATALOG_TREE),
            "offer folder": lambda id: engine.delete_folder_cascade(id, OFFER_TREE),
            "project": engine.delete_project_cascade,
            "customer": engine.delete_customer_cascade,
        }[kind]
        try:
            await cascade(id)
        except CascadeFailed as e:
            logging.error(f"{e}. Run the command again to continue deleting.")
            sys.exit(1)


async def delete_folder(args) -> None:
    tree = OFFER_TREE if args.offers else CATALOG_TREE
    await _run_cascade(f"{tree.name} folder", args.id)


async def delete_project(args) -> None:
    await _run_cascade("project", args.id)


async def delete_customer(args) -> None:
    await _run_cascade("customer", args.id)


def config_projectadmin(args):
    settings = get_settings()
    # Not a useful entry in an actual env_file
    print(f"Reading/writing settings from {settings.env_file}")
    for fieldname, fieldinfo in type(settings).model_fields.items():
        if fieldname == "env_file":
            continue

        value = getattr(settings, fieldname)
        value = menu(fieldname, fieldinfo, value)
        if value is ABORTED:
            return
        if value is not UNCHANGED:
            setattr(settings, fieldname, value)

    with settings.env_file.open("w") as f:
        for fieldname, fieldinfo in type(settings).model_fields.items():
            if fieldname == "env_file":
                continue
            value = getattr(settings, fieldname)
            if doc := fieldinfo.description:
                f.write(f"# {doc}\n")
            if value is None:
                f.write(f"#{ENV_PREFIX}{fieldname}=\n\n")
            else:
                f.write(f"{ENV_PREFIX}{fieldname}={value}\n\n")
    os.chmod(settings.env_file, 0o600)
    print(f"*** Written {bold('.env')} file to {settings.env_file} ***")


def bold(x):
    return "\033[1m" + str(x) + "\033[0m"


ABORTED = object()
UNCHANGED = object()


def menu(fieldname: str, fieldinfo: FieldInfo, value):
    print(f"\n{bold(fieldname)}: {fieldinfo.description}")
    print(f"The current value for {bold(fieldname)} is {bold(value)}.")
    try:
        value = input("Enter a new value, press [enter] to leave unchanged, or press [control+c] to abort: ")
    except KeyboardInterrupt:
        return ABORTED
    if not value.strip():
        return UNCHANGED
    return value


def main():
    parser = argparse.ArgumentParser(description=__doc__, prog="python -m projectadmin")

    subparsers = parser.add_subparsers(dest="action", title="action", help="Action to perform:", required=True)
    p = subparsers.add_parser("run", help="Run the backend API in development mode")
    p.add_argument(
        "--no-debug",
        action="store_true",
        dest="nodebug",
        help="Disable debug mode (useful for testing downstream clients)",
    )
    p.add_argument("-p", "--port", help="Port", default=5000)
    p.set_defaults(func=run)

    p = subparsers.add_parser("config", help="Configure projectadmin settings in an interactive menu.")
    p.set_defaults(func=config_projectadmin)

    p = subparsers.add_parser("create-indices", help="Create the metadata indices or update their mappings")
    p.add_argument(
        "--recreate",
        action="store_true",
        help="DANGER: delete the existing indices (and all their data) first",
    )
    p.set_defaults(func=create_indices)

    p = subparsers.add_parser("create-demo-data", help=f"Create demo customer {DEMO_CUSTOMER} with a project")
    p.set_defaults(func=create_demo_data)

    p = subparsers.add_parser(
        "delete-folder", help="Delete a catalog (or offer) folder with its subfolders and their contents"
    )
    p.add_argument("id", help="Id of the folder")
    p.add_argument("--offers", action="store_true", help="The folder is an offer folder instead of a catalog folder")
    p.set_defaults(func=delete_folder)

    p = subparsers.add_parser("delete-project", help="Delete a project with its files, read statuses and approvals")
    p.add_argument("id", help="Id of the project")
    p.set_defaults(func=delete_project)

    p = subparsers.add_parser("delete-customer", help="Delete a customer with all its projects")
    p.add_argument("id", help="Id of the customer")
    p.set_defaults(func=delete_customer)

    args = parser.parse_args()

    logging.basicConfig(format="[%(levelname)-7s:%(name)-15s] %(message)s", level=logging.INFO)
    es_logger = logging.getLogger("elasticsearch")
    es_logger.setLevel(logging.WARNING)

    if inspect.iscoroutinefunction(args.func):
        asyncio.run(args.func(args))
    else:
        args.func(args)


if __name__ == "__main__":
    main()
