"""Preset catalog and project bootstrapping.

Quick usage::

    from infragen.presets import PresetManager

    config = PresetManager().create_project("web-app", "blog", "development")
"""

from .catalog import PresetCatalog, PresetCatalogError, PresetNotFoundError
from .manager import PresetManager, project_type_for

__all__ = [
    "PresetCatalog",
    "PresetCatalogError",
    "PresetManager",
    "PresetNotFoundError",
    "project_type_for",
]
