"""
Catalog loader — loads target declarations from targets.yml.

Expects::

    targets:
      - name: core
        module: engine
        kind: static_lib
        root: src/core
        sources: [Core.cpp]
        include_dirs: [src/core]
      - name: app
        kind: executable
        deps: [core]
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from metabuild.core.config.loader import read_yaml_mapping
from metabuild.core.models.catalog import Catalog
from metabuild.core.services.catalog import CatalogError, TargetCatalog

logger = logging.getLogger(__name__)


def load_catalog(path: Path, workspace_folder: Path | None = None) -> TargetCatalog:
    """Load targets.yml into a validated TargetCatalog.

    Args:
        path: Path to the catalog file.
        workspace_folder: Base for relative target paths (default: the
            catalog file's directory).

    Raises:
        CatalogError: If the file is missing, malformed or inconsistent.
    """
    if not path.is_file():
        raise CatalogError(f"Target catalog not found: {path}")

    data = read_yaml_mapping(path, CatalogError)
    try:
        catalog = Catalog.model_validate(data)
    except ValidationError as e:
        raise CatalogError(f"Invalid target catalog {path}: {e}") from e

    base = workspace_folder if workspace_folder is not None else path.parent
    result = TargetCatalog(catalog.targets, workspace_folder=str(base.resolve()))
    logger.info("Loaded %d targets from %s", len(result), path)
    return result
