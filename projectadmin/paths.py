"""
Storage coordinates for taxonomy folders.

Files of a project are stored per (project, folder). The folder part of that address is a single
flat key: the path segments joined with a reserved joiner, e.g. "02_Photos/Before" -> "02_Photos__Before".
The mapping is one-way; the original path is stored on the file record itself.
"""

from projectadmin.config import get_settings
from projectadmin.taxonomy import PROJECT_FOLDER_STRUCTURE

PATH_SEPARATOR = "/"
KEY_JOINER = "__"


def folder_segments(folder_path: str) -> list[str]:
    """Split a folder path, dropping empty segments from leading, trailing or double separators."""
    return [s for s in folder_path.split(PATH_SEPARATOR) if s]


def folder_storage_key(folder_path: str) -> str:
    segments = folder_segments(folder_path)
    if not segments:
        raise ValueError(f"Folder path {folder_path!r} has no segments")
    return KEY_JOINER.join(segments)


def validate_taxonomy_segments() -> None:
    """
    Every taxonomy segment must be free of the joiner, otherwise two different paths could flatten to the same key.
    """
    for folder in PROJECT_FOLDER_STRUCTURE:
        for node in (folder, *folder.children):
            for segment in folder_segments(node.path):
                if KEY_JOINER in segment:
                    raise ValueError(f"Folder segment {segment!r} of {node.path} contains the reserved {KEY_JOINER!r}")


def project_asset_prefix(project_id: str) -> str:
    """Prefix under which all asset store objects of a project live (always ends with a slash)."""
    root = get_settings().asset_root_prefix.strip(PATH_SEPARATOR)
    if not project_id or PATH_SEPARATOR in project_id:
        raise ValueError(f"Invalid project id {project_id!r}")
    return f"{root}/{project_id}/" if root else f"{project_id}/"


validate_taxonomy_segments()
