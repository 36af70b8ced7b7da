"""Jinja2 template rendering for the generators.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``infragen/generators/templates/`` directory and renders them with a
per-target context, plus the escaping filters that keep emitted YAML and HCL
well-formed.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for generated artifacts.

    Templates live under ``<template_dir>/<target>/<file>.j2``.  Undefined
    context variables raise instead of rendering as empty strings so a
    missing key surfaces as a generation error.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        # Register custom filters
        self.env.filters["yaml_quote"] = yaml_quote
        self.env.filters["yaml_value"] = yaml_value
        self.env.filters["hcl_string"] = hcl_string
        self.env.filters["hcl_escape"] = hcl_escape

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"terraform/main.tf.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


# ---------------------------------------------------------------------------
# YAML filters
# ---------------------------------------------------------------------------

_YAML_INDICATORS = set("-?:,[]{}#&*!|>'\"%@`")


def _needs_yaml_quotes(text: str) -> bool:
    if not text or text != text.strip():
        return True
    if text[0] in _YAML_INDICATORS:
        return True
    if ": " in text or " #" in text or text.endswith(":") or "{{" in text:
        return True
    if any(ch in text for ch in "\n\r\t") or not text.isprintable():
        return True
    try:
        # Plain scalars that YAML would load as bool, number, null or date.
        return yaml.safe_load(text) != text
    except yaml.YAMLError:
        return True


def yaml_quote(value: Any) -> str:
    """Render *value* as a YAML scalar, double-quoting it only when needed.

    JSON string syntax is a subset of YAML double-quoted scalars, so
    ``json.dumps`` provides the escaping.
    """
    text = str(value)
    if _needs_yaml_quotes(text):
        return json.dumps(text, ensure_ascii=False)
    return text


def yaml_value(value: Any) -> str:
    """Render a playbook variable: booleans, flow lists or scalars."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(json.dumps(str(item), ensure_ascii=False) for item in value) + "]"
    if isinstance(value, int):
        return str(value)
    return yaml_quote(value)


# ---------------------------------------------------------------------------
# HCL filters
# ---------------------------------------------------------------------------

def hcl_escape(value: Any) -> str:
    """Escape *value* for use inside an HCL quoted string (without the quotes)."""
    text = str(value)
    text = text.replace("\\", "\\\\").replace('"', '\\"')
    text = text.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")
    return escape_interpolation(text)


def hcl_string(value: Any) -> str:
    """Render *value* as an HCL quoted string literal."""
    return f'"{hcl_escape(value)}"'


def escape_interpolation(text: str) -> str:
    """Neutralise ``${`` and ``%{`` sequences so Terraform keeps them literal."""
    return text.replace("${", "$${").replace("%{", "%%{")


def hcl_identifier(name: str) -> str:
    """Turn a service name into a Terraform identifier.

    ``"API-Gateway"`` -> ``"api_gateway"``, ``"9lives"`` -> ``"svc_9lives"``.
    """
    ident = re.sub(r"[^a-z0-9_]", "_", name.lower())
    if not ident or not (ident[0].isalpha() or ident[0] == "_"):
        ident = f"svc_{ident}"
    return ident
