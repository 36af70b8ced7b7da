"""infra-gen -- one project description, three infrastructure targets.

Turns a :class:`ProjectConfig` into Docker Compose manifests, Ansible
playbooks and Terraform definitions.

Quick usage::

    from infragen import PresetManager, get_generator, Target

    config = PresetManager().create_project("web-app", "blog")
    files = get_generator(Target.DOCKER).generate(config)
"""

from infragen.generators import (
    GenerationError,
    GenerationReport,
    Generator,
    generate_targets,
    get_generator,
    resolve_targets,
)
from infragen.models import (
    GeneratedFile,
    PortConfig,
    Preset,
    PresetService,
    ProjectConfig,
    ProjectType,
    ServiceConfig,
    Target,
    VolumeConfig,
)
from infragen.presets import PresetCatalog, PresetManager, PresetNotFoundError
from infragen.validation import FieldError, ValidationErrors, validate_project

__all__ = [
    "FieldError",
    "GeneratedFile",
    "GenerationError",
    "GenerationReport",
    "Generator",
    "PortConfig",
    "Preset",
    "PresetCatalog",
    "PresetManager",
    "PresetNotFoundError",
    "PresetService",
    "ProjectConfig",
    "ProjectType",
    "ServiceConfig",
    "Target",
    "ValidationErrors",
    "VolumeConfig",
    "generate_targets",
    "get_generator",
    "resolve_targets",
    "validate_project",
]
