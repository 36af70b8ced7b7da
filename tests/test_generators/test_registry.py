"""Tests for the generator registry and multi-target generation."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from jinja2 import TemplateError

from infragen.config import Settings, TerraformSettings
from infragen.generators import (
    GENERATORS,
    AnsibleGenerator,
    DockerComposeGenerator,
    GenerationError,
    TerraformGenerator,
    UnknownTargetError,
    generate_targets,
    get_generator,
    resolve_targets,
)
from infragen.models import ProjectConfig, ServiceConfig, Target
from infragen.validation import ValidationErrors


pytestmark = pytest.mark.unit


class TestResolveTargets:
    def test_all(self):
        assert resolve_targets("all") == [Target.DOCKER, Target.ANSIBLE, Target.TERRAFORM]

    @pytest.mark.parametrize("name", ["docker", "ansible", "terraform"])
    def test_single(self, name):
        assert resolve_targets(name) == [Target(name)]

    def test_unknown(self):
        with pytest.raises(UnknownTargetError) as exc_info:
            resolve_targets("kubernetes")
        assert str(exc_info.value) == (
            "unknown target: kubernetes (available: all, docker, ansible, terraform)"
        )
        assert isinstance(exc_info.value, ValueError)


class TestGetGenerator:
    def test_registry_covers_every_target(self):
        assert set(GENERATORS) == set(Target)

    @pytest.mark.parametrize("target, cls", [
        (Target.DOCKER, DockerComposeGenerator),
        ("ansible", AnsibleGenerator),
        (Target.TERRAFORM, TerraformGenerator),
    ])
    def test_lookup(self, target, cls):
        generator = get_generator(target)
        assert isinstance(generator, cls)
        assert generator.target_identifier() is Target(target)

    def test_unknown(self):
        with pytest.raises(UnknownTargetError):
            get_generator("helm")

    def test_terraform_receives_settings(self):
        settings = Settings(terraform=TerraformSettings(aws_region="ap-south-1"))
        generator = get_generator(Target.TERRAFORM, settings)
        assert generator.settings.aws_region == "ap-south-1"


class TestGenerateTargets:
    def test_all_targets(self, web_config):
        report = generate_targets(web_config, resolve_targets("all"))
        assert report.success
        assert [f.path for f in report.files[Target.DOCKER]] == ["docker-compose.yml", ".env"]
        assert len(report.all_files()) == 2 + 2 + 4

    def test_failures_are_per_target(self):
        config = ProjectConfig(name="x", services=[
            ServiceConfig(name="Web", type="web", image="nginx"),
            ServiceConfig(name="web", type="web", image="nginx"),
        ])
        report = generate_targets(config, resolve_targets("all"))
        assert not report.success
        assert set(report.failures) == {Target.TERRAFORM}
        assert isinstance(report.failures[Target.TERRAFORM], ValidationErrors)
        assert set(report.files) == {Target.DOCKER, Target.ANSIBLE}

    def test_render_errors_become_generation_errors(self, minimal_config):
        with patch.object(
            DockerComposeGenerator, "_render", side_effect=TemplateError("boom"),
        ):
            report = generate_targets(minimal_config, [Target.DOCKER])
        error = report.failures[Target.DOCKER]
        assert isinstance(error, GenerationError)
        assert error.target is Target.DOCKER
        assert str(error) == "docker: failed to render: boom"
        assert isinstance(error.__cause__, TemplateError)
