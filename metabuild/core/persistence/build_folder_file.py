"""
Build folder persistence — atomic read/write of a folder's info.json.

Each build folder lives in its own directory:

    <folders>/<name>/info.json        ← BuildFolder
    <folders>/<name>/CMakeLists.txt   ← generated
    <folders>/<name>/build/           ← cmake output

Writes are atomic (write to temp file, then rename) so an interrupted
save never leaves a half-written info.json behind.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from pydantic import ValidationError

from metabuild.core.models.folder import BuildFolder

logger = logging.getLogger(__name__)

FOLDER_INFO_FILE = "info.json"


class FolderError(Exception):
    """Raised when a build folder is missing or its info.json is unusable."""


def folder_info_path(folder_dir: Path) -> Path:
    """Path of the info file inside a build folder directory."""
    return folder_dir / FOLDER_INFO_FILE


def load_build_folder(folder_dir: Path) -> BuildFolder:
    """Load a build folder.

    Raises:
        FolderError: If the folder has no info.json or it can't be parsed.
    """
    path = folder_info_path(folder_dir)
    if not path.is_file():
        raise FolderError(f"Build folder '{folder_dir.name}' does not exist ({path})")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        folder = BuildFolder.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise FolderError(f"Cannot load build folder from {path}: {e}") from e

    logger.debug("Loaded build folder '%s' (%d roots)", folder.name, len(folder.root_targets))
    return folder


def _atomic_write(path: Path, content: str) -> None:
    """Write *content* next to *path* under a temp name, then rename over it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}_", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with open(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
        tmp.replace(path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def save_build_folder(folder: BuildFolder, folder_dir: Path) -> Path:
    """Save a build folder (atomic write). Returns the info file path."""
    path = folder_info_path(folder_dir)
    content = json.dumps(folder.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"
    try:
        _atomic_write(path, content)
    except OSError as e:
        logger.error("Failed to save build folder to %s: %s", path, e)
        raise
    logger.debug("Build folder saved to %s", path)
    return path


def list_build_folders(folders_dir: Path) -> list[str]:
    """Names of every build folder under *folders_dir*, sorted."""
    if not folders_dir.is_dir():
        return []
    return sorted(
        child.name
        for child in folders_dir.iterdir()
        if child.is_dir() and folder_info_path(child).is_file()
    )


def write_if_changed(path: Path, content: str) -> bool:
    """Write *content* to *path* unless it already holds exactly that.

    Returns True if the file was written. Leaving an unchanged
    CMakeLists.txt alone keeps cmake from re-running its configure step.
    """
    if path.is_file() and path.read_text(encoding="utf-8") == content:
        return False
    _atomic_write(path, content)
    return True
