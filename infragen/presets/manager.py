"""Bootstrap new projects from catalog presets."""

from __future__ import annotations

from ..models import (
    Preset,
    PresetService,
    ProjectConfig,
    ProjectType,
    ServiceConfig,
    utcnow,
)
from .catalog import PresetCatalog


PROJECT_TYPES: dict[str, ProjectType] = {
    "web-app": ProjectType.WEB_APP,
    "microservice": ProjectType.MICROSERVICE,
    "database": ProjectType.DATABASE,
    "ml": ProjectType.ML,
    "infrastructure": ProjectType.INFRASTRUCTURE,
}

DEFAULT_PROJECT_TYPE = ProjectType.WEB_APP
INITIAL_VERSION = "1.0.0"


def project_type_for(preset_id: str) -> ProjectType:
    """Project type for a preset id, falling back to ``web-app``."""
    return PROJECT_TYPES.get(preset_id, DEFAULT_PROJECT_TYPE)


class PresetManager:
    """Creates :class:`ProjectConfig` values from the presets of a catalog."""

    def __init__(self, catalog: PresetCatalog | None = None) -> None:
        self.catalog = catalog if catalog is not None else PresetCatalog.load()

    def get_preset(self, preset_id: str) -> Preset:
        return self.catalog.get_preset(preset_id)

    def list_presets(self) -> list[Preset]:
        return self.catalog.list_presets()

    def list_presets_by_category(self, category: str) -> list[Preset]:
        return self.catalog.list_presets_by_category(category)

    def create_project(
        self,
        preset_id: str,
        project_name: str,
        environment: str = "development",
    ) -> ProjectConfig:
        """Instantiate a new project from a preset.

        Optional preset services start disabled.  Nothing in the returned
        project shares mutable state with the catalog.

        Raises:
            PresetNotFoundError: If *preset_id* is not in the catalog.
        """
        preset = self.catalog.get_preset(preset_id)
        now = utcnow()

        return ProjectConfig(
            name=project_name,
            type=project_type_for(preset_id).value,
            description=preset.description,
            version=INITIAL_VERSION,
            environment=environment,
            services=[_service_from_preset(s) for s in preset.services],
            variables=dict(preset.variables),
            created_at=now,
            updated_at=now,
        )


def _service_from_preset(preset_service: PresetService) -> ServiceConfig:
    return ServiceConfig(
        name=preset_service.name,
        type=preset_service.type,
        image=preset_service.image,
        ports=[port.model_copy() for port in preset_service.ports],
        volumes=[volume.model_copy() for volume in preset_service.volumes],
        environment=dict(preset_service.environment),
        depends_on=list(preset_service.depends_on),
        enabled=not preset_service.optional,
    )
