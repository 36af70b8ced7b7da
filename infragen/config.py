"""infra-gen configuration.

Typed settings for the command line and the generators.  All settings use
Pydantic v2 models so they are validated at construction time and can be
built from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class TerraformSettings(BaseModel):
    """Defaults baked into the generated Terraform variables and provider block."""

    aws_region: str = Field(default="us-east-1")
    instance_type: str = Field(default="t3.micro")
    ami_id: str = Field(
        default="ami-0c7217cdde317cfec",
        description="Ubuntu 22.04 LTS in us-east-1",
    )
    aws_provider_version: str = Field(default="~> 5.0")
    terraform_version: str = Field(default=">= 1.3.0")


class Settings(BaseModel):
    """Global infra-gen settings.

    Instances are created once by the CLI entry point and passed to the
    preset catalog and the generators.
    """

    config_file: Path = Field(default=Path("infra-gen.yml"))
    output_dir: Path = Field(default=Path("."))
    environment: str = Field(default="development")
    preset_dirs: list[Path] = Field(
        default_factory=list,
        description="Extra directories of preset YAML files, loaded after the bundled ones",
    )
    terraform: TerraformSettings = Field(default_factory=TerraformSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            INFRAGEN_CONFIG, INFRAGEN_OUTPUT_DIR, INFRAGEN_ENVIRONMENT,
            INFRAGEN_PRESET_DIRS (``os.pathsep`` separated),
            INFRAGEN_AWS_REGION, INFRAGEN_INSTANCE_TYPE, INFRAGEN_AMI_ID.
        """
        terraform_kwargs: dict[str, Any] = {}
        if os.environ.get("INFRAGEN_AWS_REGION"):
            terraform_kwargs["aws_region"] = os.environ["INFRAGEN_AWS_REGION"]
        if os.environ.get("INFRAGEN_INSTANCE_TYPE"):
            terraform_kwargs["instance_type"] = os.environ["INFRAGEN_INSTANCE_TYPE"]
        if os.environ.get("INFRAGEN_AMI_ID"):
            terraform_kwargs["ami_id"] = os.environ["INFRAGEN_AMI_ID"]

        preset_dirs_str = os.environ.get("INFRAGEN_PRESET_DIRS", "")
        preset_dirs = [Path(p) for p in preset_dirs_str.split(os.pathsep) if p.strip()]

        return cls(
            config_file=Path(os.environ.get("INFRAGEN_CONFIG", "infra-gen.yml")),
            output_dir=Path(os.environ.get("INFRAGEN_OUTPUT_DIR", ".")),
            environment=os.environ.get("INFRAGEN_ENVIRONMENT", "development"),
            preset_dirs=preset_dirs,
            terraform=TerraformSettings(**terraform_kwargs),
        )
