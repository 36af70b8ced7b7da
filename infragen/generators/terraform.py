"""Terraform generation for AWS.

Every enabled service becomes one EC2 instance whose ``user_data`` installs
Docker and runs the service image.  A shared security group opens the
published ports, and each service gets an image variable and a URL output.
"""

from __future__ import annotations

import shlex
from typing import Any

from ..config import TerraformSettings
from ..models import GeneratedFile, ProjectConfig, ServiceConfig, Target
from ..validation import ValidationErrors
from .base import Generator
from .templates import TemplateRenderer, escape_interpolation, hcl_identifier


_TEMPLATES: dict[str, str] = {
    "terraform/main.tf.j2": "main.tf",
    "terraform/variables.tf.j2": "variables.tf",
    "terraform/outputs.tf.j2": "outputs.tf",
    "terraform/provider.tf.j2": "provider.tf",
}

_PROTOCOLS = ("tcp", "udp")


class TerraformGenerator(Generator):
    """Generates ``main.tf``, ``variables.tf``, ``outputs.tf`` and ``provider.tf``."""

    target = Target.TERRAFORM

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        settings: TerraformSettings | None = None,
    ) -> None:
        super().__init__(renderer)
        self.settings = settings or TerraformSettings()

    def _validate_target(self, config: ProjectConfig, errors: ValidationErrors) -> None:
        self._check_unique_identifiers(config, errors, hcl_identifier, "resource name")
        # user_data pulls and runs the image on boot.
        for i, service in enumerate(config.services):
            if service.enabled and not service.image:
                errors.add(
                    f"services[{i}].image",
                    f"service '{service.name}' needs an image to run on an instance",
                    service.image,
                )

    def _render(self, config: ProjectConfig) -> list[GeneratedFile]:
        context = self._build_context(config)
        return [
            self._file(output_name, self.renderer.render(template_name, context))
            for template_name, output_name in _TEMPLATES.items()
        ]

    # -- Context building --------------------------------------------------

    def _build_context(self, config: ProjectConfig) -> dict[str, Any]:
        services = config.enabled_services
        return {
            "project_name": config.name,
            "project_id": hcl_identifier(config.name),
            "environment": config.environment or "development",
            "settings": self.settings,
            "services": [_service_context(s) for s in services],
            "ingress": ingress_rules(services),
        }


def _protocol(label: str) -> str:
    label = label.lower()
    return label if label in _PROTOCOLS else "tcp"


def _shell_arg(text: str) -> str:
    """Quote for bash, then keep Terraform from interpolating inside the heredoc."""
    return escape_interpolation(shlex.quote(text))


def _service_context(service: ServiceConfig) -> dict[str, Any]:
    flags: list[str] = []
    for port in service.ports:
        published = port.host or port.container
        suffix = "/udp" if _protocol(port.protocol) == "udp" else ""
        flags.append(f"-p {published}:{port.container}{suffix}")
    for volume in service.volumes:
        mount = volume.mapping() + (":ro" if volume.read_only else "")
        flags.append(f"-v {_shell_arg(mount)}")
    for key, value in sorted(service.environment.items()):
        flags.append(f"-e {_shell_arg(f'{key}={value}')}")

    return {
        "id": hcl_identifier(service.name),
        "name": service.name,
        "container_name": _shell_arg(service.name),
        "image": service.image,
        "flags": flags,
        "url_port": service.ports[0].container if service.ports else None,
    }


def ingress_rules(services: list[ServiceConfig]) -> list[dict[str, Any]]:
    """Distinct (published port, protocol) pairs, sorted."""
    rules = {
        (port.host or port.container, _protocol(port.protocol))
        for service in services
        for port in service.ports
    }
    return [{"port": port, "protocol": protocol} for port, protocol in sorted(rules)]
