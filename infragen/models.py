"""Pydantic v2 models for the infra-gen domain.

Defines the project description consumed by every generator (projects,
services, ports, volumes), the preset catalog entries a project is
bootstrapped from, and the ``GeneratedFile`` records generators return.

Fields default to empty values instead of being required so that a
half-filled project still loads; completeness is checked by
:mod:`infragen.validation`, which reports every missing field at once.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Optional

import yaml
from pydantic import BaseModel, BeforeValidator, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ProjectType(str, Enum):
    """Archetype of a project, derived from the preset it was created from."""
    WEB_APP = "web-app"
    MICROSERVICE = "microservice"
    DATABASE = "database"
    ML = "ml"
    INFRASTRUCTURE = "infrastructure"


class Target(str, Enum):
    """Infrastructure ecosystem a generator emits artifacts for."""
    DOCKER = "docker"
    ANSIBLE = "ansible"
    TERRAFORM = "terraform"


def utcnow() -> datetime:
    """Current instant as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _scalar_to_str(value: Any) -> Any:
    """Render unquoted YAML scalars the way they were written (``true``, ``8080``)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if value is None:
        return ""
    return value


# Keys and values of environment and variable maps.
ScalarStr = Annotated[str, BeforeValidator(_scalar_to_str)]


# ---------------------------------------------------------------------------
# Service building blocks
# ---------------------------------------------------------------------------

class PortConfig(BaseModel):
    """A port mapping. ``host`` is optional; ``container`` is always set."""
    host: Optional[int] = Field(default=None, description="Port published on the host")
    container: int = Field(..., description="Port the container listens on")
    protocol: str = Field(default="", description="Protocol label, e.g. 'tcp'")

    def mapping(self) -> str:
        """Return ``"host:container"``, or just ``"container"`` without a host port."""
        if self.host:
            return f"{self.host}:{self.container}"
        return str(self.container)


class VolumeConfig(BaseModel):
    """A mount. ``type == "volume"`` marks a named volume, anything else a bind mount."""
    source: str = Field(default="", description="Volume name or host path")
    target: str = Field(default="", description="Mount point inside the container")
    read_only: bool = Field(default=False)
    type: str = Field(default="", description="'volume' or 'bind'")

    @property
    def is_named(self) -> bool:
        return self.type == "volume"

    def mapping(self) -> str:
        return f"{self.source}:{self.target}"


class ServiceConfig(BaseModel):
    """One deployable unit of a project."""
    name: str = Field(default="")
    type: str = Field(default="", description="Free-form type tag, e.g. 'frontend', 'database'")
    image: str = Field(default="", description="Container image reference")
    ports: list[PortConfig] = Field(default_factory=list)
    volumes: list[VolumeConfig] = Field(default_factory=list)
    environment: dict[ScalarStr, ScalarStr] = Field(default_factory=dict)
    depends_on: list[str] = Field(default_factory=list)
    enabled: bool = Field(default=True)


# ---------------------------------------------------------------------------
# Project
# ---------------------------------------------------------------------------

class ProjectConfig(BaseModel):
    """A deployable project: the single input of every generator.

    Instances are created by :class:`infragen.presets.PresetManager` or loaded
    from ``infra-gen.yml``.  Generators only read them.
    """

    name: str = Field(default="")
    type: str = Field(default="", description="ProjectType value")
    description: str = Field(default="")
    version: str = Field(default="")
    environment: str = Field(default="")
    services: list[ServiceConfig] = Field(default_factory=list)
    variables: dict[ScalarStr, ScalarStr] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def enabled_services(self) -> list[ServiceConfig]:
        return [service for service in self.services if service.enabled]

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def to_yaml(self) -> str:
        """Serialise to the persisted ``infra-gen.yml`` document."""
        return yaml.safe_dump(
            self.model_dump(mode="json"),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )

    @classmethod
    def from_yaml(cls, text: str) -> "ProjectConfig":
        data = yaml.safe_load(text) or {}
        return cls.model_validate(data)

    def save(self, path: Path) -> Path:
        """Persist the project to a YAML file.

        Args:
            path: Destination file.  Parent directories are created.

        Returns:
            The path that was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.to_yaml(), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ProjectConfig":
        """Load a previously-saved project from YAML."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.from_yaml(raw)


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

class PresetService(BaseModel):
    """A service template inside a preset. ``optional`` services start disabled."""
    name: str
    type: str
    description: str = Field(default="")
    image: str = Field(default="")
    ports: list[PortConfig] = Field(default_factory=list)
    volumes: list[VolumeConfig] = Field(default_factory=list)
    environment: dict[ScalarStr, ScalarStr] = Field(default_factory=dict)
    depends_on: list[str] = Field(default_factory=list)
    optional: bool = Field(default=False)


class Preset(BaseModel):
    """A named catalog template describing the default services of a project archetype."""
    id: str
    name: str = Field(default="")
    description: str = Field(default="")
    category: str = Field(default="General")
    services: list[PresetService] = Field(default_factory=list)
    variables: dict[ScalarStr, ScalarStr] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

class GeneratedFile(BaseModel):
    """One rendered artifact, relative to the caller's output directory."""
    path: str
    content: str
    target: Target
    encoding: str = Field(default="utf-8")
