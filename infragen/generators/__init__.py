"""infra-gen generators -- one renderer per infrastructure target.

Quick usage::

    from infragen.generators import generate_targets, resolve_targets

    report = generate_targets(config, resolve_targets("all"))
    for target, error in report.failures.items():
        ...
    files = report.all_files()
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import Settings
from ..models import GeneratedFile, ProjectConfig, Target
from ..validation import ValidationErrors
from .ansible import AnsibleGenerator
from .base import GenerationError, Generator
from .compose import DockerComposeGenerator
from .templates import TemplateRenderer
from .terraform import TerraformGenerator


GENERATORS: dict[Target, type[Generator]] = {
    Target.DOCKER: DockerComposeGenerator,
    Target.ANSIBLE: AnsibleGenerator,
    Target.TERRAFORM: TerraformGenerator,
}

ALL_TARGETS = "all"


class UnknownTargetError(ValueError):
    """Raised for a target name that is neither a known target nor ``"all"``."""

    def __init__(self, name: str) -> None:
        self.name = name
        choices = ", ".join([ALL_TARGETS, *(t.value for t in Target)])
        super().__init__(f"unknown target: {name} (available: {choices})")


def resolve_targets(name: str) -> list[Target]:
    """Map a CLI target name to the targets it stands for."""
    if name == ALL_TARGETS:
        return list(Target)
    try:
        return [Target(name)]
    except ValueError:
        raise UnknownTargetError(name) from None


def get_generator(
    target: Target | str,
    settings: Settings | None = None,
    renderer: TemplateRenderer | None = None,
) -> Generator:
    """Instantiate the generator registered for *target*."""
    try:
        kind = Target(target)
    except ValueError:
        raise UnknownTargetError(str(target)) from None

    if kind is Target.TERRAFORM:
        tf_settings = settings.terraform if settings else None
        return TerraformGenerator(renderer, settings=tf_settings)
    return GENERATORS[kind](renderer)


@dataclass
class GenerationReport:
    """Outcome of generating several targets for one project.

    ``files`` holds the output of every target that succeeded and
    ``failures`` the exception of every target that did not.
    """

    files: dict[Target, list[GeneratedFile]] = field(default_factory=dict)
    failures: dict[Target, Exception] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.failures

    def all_files(self) -> list[GeneratedFile]:
        return [f for files in self.files.values() for f in files]


def generate_targets(
    config: ProjectConfig,
    targets: list[Target],
    settings: Settings | None = None,
) -> GenerationReport:
    """Generate every target in *targets*, in order.

    A target that fails validation or rendering is recorded in
    ``report.failures`` and the remaining targets still run.
    """
    report = GenerationReport()
    renderer = TemplateRenderer()
    for target in targets:
        generator = get_generator(target, settings, renderer)
        try:
            report.files[target] = generator.generate(config)
        except (ValidationErrors, GenerationError) as exc:
            report.failures[target] = exc
    return report


__all__ = [
    "ALL_TARGETS",
    "AnsibleGenerator",
    "DockerComposeGenerator",
    "GENERATORS",
    "GenerationError",
    "GenerationReport",
    "Generator",
    "TemplateRenderer",
    "TerraformGenerator",
    "UnknownTargetError",
    "generate_targets",
    "get_generator",
    "resolve_targets",
]
