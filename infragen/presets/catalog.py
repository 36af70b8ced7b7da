"""Preset catalog: read-only lookup of project presets.

Presets are YAML files, one per preset, shipped in ``infragen/presets/data``.
Extra directories (``Settings.preset_dirs``) are loaded afterwards and
replace bundled presets that share an id.
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..models import Preset


BUNDLED_PRESET_DIR = Path(__file__).parent / "data"


class PresetNotFoundError(LookupError):
    """Raised when a preset id is not in the catalog."""

    def __init__(self, preset_id: str) -> None:
        self.preset_id = preset_id
        super().__init__(f"preset '{preset_id}' not found")


class PresetCatalogError(Exception):
    """Raised when a preset file cannot be parsed."""


class PresetCatalog:
    """An immutable set of presets keyed by id."""

    def __init__(self, presets: list[Preset] | None = None) -> None:
        self._presets: dict[str, Preset] = {}
        for preset in presets or []:
            self._presets[preset.id] = preset

    @classmethod
    def load(cls, *directories: Path) -> "PresetCatalog":
        """Load the bundled presets, then every ``*.yaml`` in *directories*."""
        presets: list[Preset] = []
        for directory in (BUNDLED_PRESET_DIR, *directories):
            presets.extend(load_preset_dir(directory))
        return cls(presets)

    def get_preset(self, preset_id: str) -> Preset:
        try:
            return self._presets[preset_id]
        except KeyError:
            raise PresetNotFoundError(preset_id) from None

    def list_presets(self) -> list[Preset]:
        """All presets, sorted by id."""
        return [self._presets[key] for key in sorted(self._presets)]

    def list_presets_by_category(self, category: str) -> list[Preset]:
        return [p for p in self.list_presets() if p.category == category]

    def categories(self) -> dict[str, int]:
        """Preset count per category, sorted by category name."""
        counts = Counter(p.category for p in self._presets.values())
        return dict(sorted(counts.items()))

    def __contains__(self, preset_id: object) -> bool:
        return preset_id in self._presets

    def __len__(self) -> int:
        return len(self._presets)


def load_preset_dir(directory: Path) -> list[Preset]:
    """Parse every ``*.yaml`` preset file in *directory*, sorted by filename.

    Files without an ``id`` take it from the file stem.

    Raises:
        PresetCatalogError: If a file is not valid YAML or not a valid preset.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise PresetCatalogError(f"preset directory not found: {directory}")

    presets: list[Preset] = []
    for path in sorted(directory.glob("*.yaml")):
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise PresetCatalogError(f"invalid YAML in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PresetCatalogError(f"preset file {path} must contain a mapping")

        data.setdefault("id", path.stem)
        try:
            presets.append(Preset.model_validate(data))
        except ValidationError as exc:
            raise PresetCatalogError(f"invalid preset in {path}: {exc}") from exc
    return presets
