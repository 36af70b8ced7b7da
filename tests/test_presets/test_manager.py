"""Tests for project bootstrapping from presets (infragen.presets.manager)."""

from __future__ import annotations

import pytest

from infragen.generators import generate_targets, resolve_targets
from infragen.models import ProjectType
from infragen.presets import PresetCatalog, PresetManager, PresetNotFoundError, project_type_for
from infragen.validation import validate_project


pytestmark = pytest.mark.unit


class TestProjectTypeFor:
    @pytest.mark.parametrize("preset_id, expected", [
        ("web-app", ProjectType.WEB_APP),
        ("microservice", ProjectType.MICROSERVICE),
        ("database", ProjectType.DATABASE),
        ("ml", ProjectType.ML),
        ("infrastructure", ProjectType.INFRASTRUCTURE),
        ("queue", ProjectType.WEB_APP),
    ])
    def test_mapping(self, preset_id, expected):
        assert project_type_for(preset_id) is expected


class TestCreateProject:
    def test_web_app(self, preset_manager):
        config = preset_manager.create_project("web-app", "blog", "development")
        assert config.name == "blog"
        assert config.type == "web-app"
        assert config.version == "1.0.0"
        assert config.environment == "development"
        assert config.description == preset_manager.get_preset("web-app").description
        assert [s.name for s in config.services] == ["frontend", "api", "database"]
        assert all(s.enabled for s in config.services)
        assert config.services[1].depends_on == ["database"]
        assert config.services[0].depends_on == []
        assert config.created_at == config.updated_at
        assert config.created_at.tzinfo is not None

    def test_optional_services_start_disabled(self, preset_manager):
        config = preset_manager.create_project("database", "data")
        assert [(s.name, s.enabled) for s in config.services] == [
            ("postgres", True), ("mysql", False), ("mongo", False),
        ]

    def test_default_environment(self, preset_manager):
        assert preset_manager.create_project("ml", "models").environment == "development"

    def test_variables_are_copied(self, preset_manager):
        config = preset_manager.create_project("ml", "models")
        assert config.variables == {"MODEL_NAME": "default"}
        config.variables["MODEL_NAME"] = "changed"
        assert preset_manager.get_preset("ml").variables["MODEL_NAME"] == "default"

    def test_services_do_not_share_state_with_preset(self, preset_manager):
        config = preset_manager.create_project("web-app", "blog")
        config.services[2].environment["POSTGRES_PASSWORD"] = "other"
        config.services[2].ports[0].container = 1
        config.services[1].depends_on.append("frontend")

        preset = preset_manager.get_preset("web-app")
        assert preset.services[2].environment["POSTGRES_PASSWORD"] == "changeme"
        assert preset.services[2].ports[0].container == 5432
        assert preset.services[1].depends_on == ["database"]

    def test_unknown_preset(self, preset_manager):
        with pytest.raises(PresetNotFoundError):
            preset_manager.create_project("nonexistent", "x")

    def test_custom_preset_falls_back_to_web_app_type(self, custom_preset_dir):
        manager = PresetManager(PresetCatalog.load(custom_preset_dir))
        config = manager.create_project("queue", "jobs")
        assert config.type == "web-app"
        assert config.variables == {"QUEUE_NAME": "jobs"}

    @pytest.mark.parametrize("preset_id", ["database", "infrastructure", "microservice", "ml", "web-app"])
    def test_every_bundled_preset_generates(self, preset_manager, preset_id):
        config = preset_manager.create_project(preset_id, "demo")
        validate_project(config)
        report = generate_targets(config, resolve_targets("all"))
        assert report.success, report.failures


class TestListing:
    def test_list_presets(self, preset_manager):
        assert len(preset_manager.list_presets()) == 5

    def test_list_presets_by_category(self, preset_manager):
        presets = preset_manager.list_presets_by_category("Machine Learning")
        assert [p.id for p in presets] == ["ml"]

    def test_default_catalog(self):
        assert len(PresetManager().list_presets()) == 5
