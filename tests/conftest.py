"""Shared pytest fixtures for the infra-gen test suite.

Provides reusable fixtures for:
- Hand-built project configurations (web stack, minimal, invalid)
- The bundled preset catalog and a preset manager over it
- A temporary directory of custom presets
"""

from __future__ import annotations

import textwrap
from datetime import datetime, timezone
from pathlib import Path

import pytest

from infragen.models import PortConfig, ProjectConfig, ServiceConfig, VolumeConfig
from infragen.presets import PresetCatalog, PresetManager


FIXED_TIME = datetime(2026, 1, 15, 10, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Project configurations
# ---------------------------------------------------------------------------

@pytest.fixture
def web_config() -> ProjectConfig:
    """A three-tier project with ports, volumes, secrets and one disabled service."""
    return ProjectConfig(
        name="shop",
        type="web-app",
        description="Online shop",
        version="1.0.0",
        environment="staging",
        variables={"REGION": "eu-west-1", "APP_SECRET": "s3cr3t"},
        services=[
            ServiceConfig(
                name="web-frontend",
                type="frontend",
                image="nginx:alpine",
                ports=[PortConfig(host=8080, container=80, protocol="tcp")],
                volumes=[
                    VolumeConfig(source="./static", target="/usr/share/nginx/html", read_only=True, type="bind"),
                ],
                environment={"API_URL": "http://api:8000"},
                depends_on=["api"],
            ),
            ServiceConfig(
                name="api",
                type="api",
                image="python:3.12-slim",
                ports=[PortConfig(container=8000)],
                environment={"DB_PASSWORD": "hunter2", "DEBUG": "true", "API_TOKEN": "abc"},
                depends_on=["db"],
            ),
            ServiceConfig(
                name="db",
                type="postgres",
                image="postgres:15",
                ports=[PortConfig(container=5432, protocol="tcp")],
                volumes=[VolumeConfig(source="pg_data", target="/var/lib/postgresql/data", type="volume")],
                environment={"POSTGRES_USER": "shop"},
            ),
            ServiceConfig(
                name="worker",
                type="worker",
                image="python:3.12-slim",
                volumes=[VolumeConfig(source="worker_cache", target="/cache", type="volume")],
                environment={"WORKER_KEY": "k"},
                enabled=False,
            ),
        ],
        created_at=FIXED_TIME,
        updated_at=FIXED_TIME,
    )


@pytest.fixture
def minimal_config() -> ProjectConfig:
    """One service, no ports, volumes, variables or environment."""
    return ProjectConfig(
        name="tiny",
        type="microservice",
        services=[ServiceConfig(name="app", type="api", image="busybox:latest")],
        created_at=FIXED_TIME,
        updated_at=FIXED_TIME,
    )


@pytest.fixture
def empty_config() -> ProjectConfig:
    """No name and no services."""
    return ProjectConfig(created_at=FIXED_TIME, updated_at=FIXED_TIME)


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

@pytest.fixture
def catalog() -> PresetCatalog:
    """The bundled preset catalog."""
    return PresetCatalog.load()


@pytest.fixture
def preset_manager(catalog: PresetCatalog) -> PresetManager:
    return PresetManager(catalog)


@pytest.fixture
def custom_preset_dir(tmp_path: Path) -> Path:
    """A directory holding one new preset and one override of a bundled id."""
    directory = tmp_path / "presets"
    directory.mkdir()
    (directory / "queue.yaml").write_text(
        textwrap.dedent("""\
            name: Queue
            description: Message queue stack
            category: Messaging
            tags: [rabbitmq]
            variables:
              QUEUE_NAME: jobs
            services:
              - name: rabbitmq
                type: queue
                image: rabbitmq:3-management
                ports:
                  - container: 5672
                  - host: 15672
                    container: 15672
                environment:
                  RABBITMQ_DEFAULT_PASS: guest
        """),
        encoding="utf-8",
    )
    (directory / "web-app.yaml").write_text(
        textwrap.dedent("""\
            id: web-app
            name: Custom web app
            description: Overridden web app
            category: Web Applications
            services:
              - name: site
                type: web
                image: caddy:2
        """),
        encoding="utf-8",
    )
    return directory
