"""Ansible playbook and inventory generation.

The playbook installs Docker on every host, prepares volume directories,
pulls the service images and deploys the project with Docker Compose.  The
inventory groups hosts by the kinds of services the project contains.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml

from ..models import GeneratedFile, ProjectConfig, ServiceConfig, Target
from ..validation import ValidationErrors
from .base import Generator


WEB_SERVICE_TYPES: tuple[str, ...] = ("web", "frontend", "nginx")
DATABASE_SERVICE_TYPES: tuple[str, ...] = ("database", "postgres", "mysql", "mongo")

DEPLOY_DIR = "/opt/{{ project_name }}"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_USER = "ubuntu"


@dataclass
class PlaybookTask:
    """A single task: one module invocation with its arguments."""

    name: str
    module: str
    args: dict[str, Any] = field(default_factory=dict)


class AnsibleGenerator(Generator):
    """Generates ``playbook.yml``, ``inventory.yml`` and, when needed, ``requirements.yml``."""

    target = Target.ANSIBLE

    def _validate_target(self, config: ProjectConfig, errors: ValidationErrors) -> None:
        self._check_unique_identifiers(config, errors, var_prefix, "variable prefix")

    def _render(self, config: ProjectConfig) -> list[GeneratedFile]:
        files = [
            self._file("playbook.yml", self._playbook(config)),
            self._file("inventory.yml", self._inventory(config)),
        ]

        requirements = self._requirements(config)
        if requirements:
            files.append(self._file("requirements.yml", requirements))
        return files

    # -- Playbook ----------------------------------------------------------

    def _playbook(self, config: ProjectConfig) -> str:
        return self.renderer.render(
            "ansible/playbook.yml.j2",
            {
                "play_name": f"Deploy {config.name}",
                "play_vars": build_vars(config),
                "tasks": build_tasks(config),
            },
        )

    # -- Inventory ---------------------------------------------------------

    def _inventory(self, config: ProjectConfig) -> str:
        children: dict[str, Any] = {}
        if has_service_type(config.services, WEB_SERVICE_TYPES):
            children["webservers"] = _placeholder_group("webserver1", "webserver_ip")
        if has_service_type(config.services, DATABASE_SERVICE_TYPES):
            children["databases"] = _placeholder_group("database1", "database_ip")

        inventory_vars: dict[str, Any] = {
            "project_name": config.name,
            "environment": config.environment,
        }
        for key, value in sorted(config.variables.items()):
            inventory_vars[key] = value

        inventory = {"all": {"children": children, "vars": inventory_vars}}
        return yaml.safe_dump(
            inventory, sort_keys=False, default_flow_style=False, allow_unicode=True
        )

    # -- Requirements ------------------------------------------------------

    def _requirements(self, config: ProjectConfig) -> str:
        """Collections and roles the playbook needs. The builtin modules need none."""
        return ""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def var_prefix(service_name: str) -> str:
    return service_name.replace("-", "_")


def build_vars(config: ProjectConfig) -> dict[str, Any]:
    """Playbook variables: project variables, then four per service."""
    play_vars: dict[str, Any] = dict(sorted(config.variables.items()))

    for service in config.services:
        prefix = var_prefix(service.name)
        play_vars[f"{prefix}_image"] = service.image
        play_vars[f"{prefix}_ports"] = [port.mapping() for port in service.ports]
        play_vars[f"{prefix}_volumes"] = [volume.mapping() for volume in service.volumes]
        play_vars[f"{prefix}_enabled"] = service.enabled

    return play_vars


def build_tasks(config: ProjectConfig) -> list[PlaybookTask]:
    tasks = [
        PlaybookTask("Update package cache", "apt", {"update_cache": True}),
        PlaybookTask("Install Docker", "package", {"name": "docker.io", "state": "present"}),
        PlaybookTask(
            "Start and enable Docker service",
            "systemd",
            {"name": "docker", "state": "started", "enabled": True},
        ),
    ]

    for service in config.enabled_services:
        tasks.extend(_service_tasks(service))

    tasks.append(PlaybookTask(
        "Ensure deployment directory exists",
        "file",
        {"path": DEPLOY_DIR, "state": "directory"},
    ))
    tasks.append(PlaybookTask(
        "Deploy services with Docker Compose",
        "docker_compose",
        {"project_src": DEPLOY_DIR, "state": "present"},
    ))
    return tasks


def _service_tasks(service: ServiceConfig) -> list[PlaybookTask]:
    tasks: list[PlaybookTask] = []

    # Absolute sources are host paths managed elsewhere.
    for volume in service.volumes:
        if volume.source and not volume.source.startswith("/"):
            tasks.append(PlaybookTask(
                f"Create directory for {volume.source} volume",
                "file",
                {"path": volume.source, "state": "directory"},
            ))

    if service.image:
        tasks.append(PlaybookTask(
            f"Pull {service.name} Docker image",
            "docker_image",
            {"name": service.image, "source": "pull"},
        ))
    return tasks


def has_service_type(services: list[ServiceConfig], kinds: tuple[str, ...]) -> bool:
    """Case-insensitive substring match of any service type against *kinds*."""
    for service in services:
        service_type = service.type.lower()
        if any(kind.lower() in service_type for kind in kinds):
            return True
    return False


def _placeholder_group(host: str, address_var: str) -> dict[str, Any]:
    return {
        "hosts": {
            host: {
                "ansible_host": f"{{{{ {address_var} | default('{DEFAULT_HOST}') }}}}",
                "ansible_user": f"{{{{ ansible_user | default('{DEFAULT_USER}') }}}}",
            },
        },
    }
