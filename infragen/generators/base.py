"""Generator contract shared by the Docker Compose, Ansible and Terraform renderers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import ClassVar

import yaml
from jinja2 import TemplateError

from ..models import GeneratedFile, ProjectConfig, Target
from ..validation import ValidationErrors, check_required_fields
from .templates import TemplateRenderer


class GenerationError(Exception):
    """Raised when a target's artifacts cannot be rendered."""

    def __init__(self, target: Target, message: str) -> None:
        self.target = target
        super().__init__(f"{target.value}: {message}")


class Generator(ABC):
    """Turns a validated :class:`ProjectConfig` into a list of files for one target.

    Subclasses set :attr:`target`, implement :meth:`_render` and may add
    target-specific checks in :meth:`_validate_target`.  Generators keep no
    per-call state, so one instance can serve many projects and threads.
    """

    target: ClassVar[Target]

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    def target_identifier(self) -> Target:
        return self.target

    def validate(self, config: ProjectConfig) -> None:
        """Check *config* for this target.

        Raises:
            ValidationErrors: Listing every problem found, in check order.
        """
        errors = ValidationErrors()
        check_required_fields(config, errors)
        self._validate_target(config, errors)
        errors.raise_if_errors()

    def generate(self, config: ProjectConfig) -> list[GeneratedFile]:
        """Validate *config*, then render this target's files.

        Raises:
            ValidationErrors: If validation fails; nothing is rendered.
            GenerationError: If a template or serialisation step fails.
        """
        self.validate(config)
        try:
            return self._render(config)
        except (TemplateError, yaml.YAMLError) as exc:
            raise GenerationError(self.target, f"failed to render: {exc}") from exc

    # -- Hooks -------------------------------------------------------------

    def _validate_target(self, config: ProjectConfig, errors: ValidationErrors) -> None:
        """Target-specific checks. The default adds nothing."""

    @abstractmethod
    def _render(self, config: ProjectConfig) -> list[GeneratedFile]:
        ...

    # -- Helpers -----------------------------------------------------------

    def _file(self, path: str, content: str) -> GeneratedFile:
        return GeneratedFile(path=path, content=content, target=self.target)

    def _check_unique_identifiers(
        self,
        config: ProjectConfig,
        errors: ValidationErrors,
        transform: Callable[[str], str],
        what: str,
    ) -> None:
        """Report distinct service names that collapse to the same derived identifier."""
        owners: dict[str, str] = {}
        for i, service in enumerate(config.services):
            if not service.name:
                continue
            ident = transform(service.name)
            owner = owners.setdefault(ident, service.name)
            if owner != service.name:
                errors.add(
                    f"services[{i}].name",
                    f"{what} '{ident}' of service '{service.name}' clashes with service '{owner}'",
                    service.name,
                )
