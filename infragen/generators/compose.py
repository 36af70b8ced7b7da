"""Docker Compose generation.

Renders ``docker-compose.yml`` from the ``compose/docker-compose.yml.j2``
template and, when any variable qualifies, a ``.env`` file holding the
project variables and the credential-like service environment entries.
"""

from __future__ import annotations

from typing import Any

from ..models import GeneratedFile, PortConfig, ProjectConfig, ServiceConfig, Target
from ..validation import is_sensitive_key
from .base import Generator


class DockerComposeGenerator(Generator):
    """Generates a Compose manifest and its ``.env`` companion."""

    target = Target.DOCKER

    COMPOSE_FILE = "docker-compose.yml"
    ENV_FILE = ".env"

    def _render(self, config: ProjectConfig) -> list[GeneratedFile]:
        content = self.renderer.render(
            "compose/docker-compose.yml.j2", self._build_context(config)
        )
        files = [self._file(self.COMPOSE_FILE, content)]

        env_content = build_env_file(config)
        if env_content:
            files.append(self._file(self.ENV_FILE, env_content))
        return files

    # -- Context building --------------------------------------------------

    def _build_context(self, config: ProjectConfig) -> dict[str, Any]:
        return {
            "services": [_service_context(s) for s in config.enabled_services],
            "named_volumes": named_volumes(config),
        }


def _port_entry(port: PortConfig) -> str:
    entry = f'"{port.mapping()}"'
    if port.protocol:
        entry += f" # {port.protocol}"
    return entry


def _service_context(service: ServiceConfig) -> dict[str, Any]:
    volumes = []
    for volume in service.volumes:
        entry = volume.mapping()
        if volume.read_only:
            entry += ":ro"
        volumes.append(entry)

    return {
        "name": service.name,
        "image": service.image,
        "ports": [_port_entry(p) for p in service.ports],
        "volumes": volumes,
        "environment": sorted(service.environment.items()),
        "depends_on": list(service.depends_on),
    }


def named_volumes(config: ProjectConfig) -> list[str]:
    """Sources of every named volume declaration, in service order.

    Repeated declarations of the same source are kept, one entry each.
    """
    return [
        volume.source
        for service in config.services
        for volume in service.volumes
        if volume.is_named
    ]


def build_env_file(config: ProjectConfig) -> str:
    """Build ``.env`` content, or an empty string when nothing qualifies.

    Project variables come first, sorted by key.  Credential-like service
    environment entries follow in service order, renamed to
    ``<SERVICE>_<KEY>``.
    """
    lines = [f"{key}={value}" for key, value in sorted(config.variables.items())]

    for service in config.services:
        for key, value in sorted(service.environment.items()):
            if is_sensitive_key(key):
                lines.append(f"{service.name.upper()}_{key}={value}")

    if not lines:
        return ""
    return "\n".join(lines) + "\n"
