"""Validation substrate shared by every generator.

A validation pass creates one :class:`ValidationErrors` accumulator, threads
it through the check functions below and finally calls
:meth:`ValidationErrors.raise_if_errors`.  Checks never stop at the first
problem, so a caller always sees the complete set of violations.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from .models import ProjectConfig


SENSITIVE_KEYWORDS: tuple[str, ...] = ("PASSWORD", "SECRET", "KEY", "TOKEN")

_MAX_PORT = 65535


# ---------------------------------------------------------------------------
# Error types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure."""

    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        return f"validation error on field '{self.field}': {self.message}"


class ValidationErrors(Exception):
    """Ordered collection of :class:`FieldError` values from one validation pass.

    The same object is used to accumulate errors and, once the pass is over,
    is raised as the exception describing all of them.
    """

    def __init__(self, errors: Iterable[FieldError] | None = None) -> None:
        self.errors: list[FieldError] = list(errors or [])
        super().__init__()

    def add(self, field: str, message: str, value: Any = None) -> None:
        self.errors.append(FieldError(field=field, message=message, value=value))

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def raise_if_errors(self) -> None:
        if self.has_errors():
            raise self

    def fields(self) -> list[str]:
        """Field paths in the order the errors were added."""
        return [error.field for error in self.errors]

    def __iter__(self) -> Iterator[FieldError]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __str__(self) -> str:
        if not self.errors:
            return "no validation errors"
        lines = [f"{len(self.errors)} validation error(s):"]
        for index, error in enumerate(self.errors, start=1):
            lines.append(f"{index}. {error}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

def check_required_fields(config: ProjectConfig, errors: ValidationErrors) -> None:
    """Checks every generator runs before rendering.

    Covers the project name, the presence of services, each service's name and
    type, port ranges, volume endpoints and duplicate service names.
    """
    if not config.name:
        errors.add("name", "project name is required", config.name)

    if len(config.services) == 0:
        errors.add("services", "at least one service is required", len(config.services))

    for i, service in enumerate(config.services):
        if not service.name:
            errors.add(f"services[{i}].name", "service name is required", service.name)
        if not service.type:
            errors.add(f"services[{i}].type", "service type is required", service.type)

        for j, port in enumerate(service.ports):
            if not 0 < port.container <= _MAX_PORT:
                errors.add(
                    f"services[{i}].ports[{j}].container",
                    f"container port must be between 1 and {_MAX_PORT}",
                    port.container,
                )
            if port.host is not None and not 0 < port.host <= _MAX_PORT:
                errors.add(
                    f"services[{i}].ports[{j}].host",
                    f"host port must be between 1 and {_MAX_PORT}",
                    port.host,
                )
            # Rendered verbatim after the Compose port entry.
            if not port.protocol.isprintable():
                errors.add(
                    f"services[{i}].ports[{j}].protocol",
                    "protocol must not contain control characters",
                    port.protocol,
                )

        for j, volume in enumerate(service.volumes):
            if not volume.source:
                errors.add(f"services[{i}].volumes[{j}].source", "volume source is required", volume.source)
            if not volume.target:
                errors.add(f"services[{i}].volumes[{j}].target", "volume target is required", volume.target)

    check_unique_names(config, errors)


def check_unique_names(config: ProjectConfig, errors: ValidationErrors) -> None:
    """Report each service name that appears more than once."""
    seen: set[str] = set()
    for service in config.services:
        if not service.name:
            continue
        if service.name in seen:
            errors.add("services", f"duplicate service name: {service.name}", service.name)
        seen.add(service.name)


def check_dependencies(config: ProjectConfig, errors: ValidationErrors) -> None:
    """Report ``depends_on`` entries that do not name a service of the project."""
    known = {service.name for service in config.services}
    for i, service in enumerate(config.services):
        for dependency in service.depends_on:
            if dependency not in known:
                errors.add(
                    f"services[{i}].depends_on",
                    f"unknown dependency: {dependency}",
                    dependency,
                )
            elif dependency == service.name:
                errors.add(
                    f"services[{i}].depends_on",
                    f"service cannot depend on itself: {dependency}",
                    dependency,
                )


def validate_project(config: ProjectConfig) -> None:
    """Whole-project validation, independent of any target.

    Raises:
        ValidationErrors: With every problem found.
    """
    errors = ValidationErrors()
    check_required_fields(config, errors)
    if not config.type:
        errors.add("type", "project type is required", config.type)
    check_dependencies(config, errors)
    errors.raise_if_errors()


# ---------------------------------------------------------------------------
# Advisories
# ---------------------------------------------------------------------------

def is_sensitive_key(key: str) -> bool:
    """Return ``True`` if *key* looks like it holds a credential."""
    upper = key.upper()
    return any(keyword in upper for keyword in SENSITIVE_KEYWORDS)


@dataclass(frozen=True)
class Advisory:
    """A non-fatal recommendation about a project."""

    kind: str  # "warning" or "security"
    message: str


def advisories(config: ProjectConfig) -> list[Advisory]:
    """Collect recommendations that do not block generation."""
    found: list[Advisory] = []

    for service in config.services:
        if service.enabled and not service.image:
            found.append(Advisory(
                "warning",
                f"Service '{service.name}' is enabled but has no Docker image specified",
            ))
        if service.type == "frontend" and not service.ports:
            found.append(Advisory(
                "warning", f"Frontend service '{service.name}' has no ports specified",
            ))
        if service.type == "database" and not service.volumes:
            found.append(Advisory(
                "warning", f"Database service '{service.name}' has no persistent volumes",
            ))

    for key in sorted(config.variables):
        if is_sensitive_key(key):
            found.append(Advisory(
                "security",
                f"Variable '{key}' contains sensitive data - consider using environment variables",
            ))

    for service in config.services:
        for key in sorted(service.environment):
            if is_sensitive_key(key):
                found.append(Advisory(
                    "security",
                    f"Service '{service.name}' environment variable '{key}' contains sensitive data",
                ))

    return found


def count_by_kind(items: Iterable[Advisory]) -> dict[str, int]:
    return dict(Counter(item.kind for item in items))
