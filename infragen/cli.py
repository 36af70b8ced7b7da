"""infra-gen command line.

Usage::

    infragen init web-app --name blog --environment development
    infragen generate all --output ./deploy
    infragen validate --target docker
    infragen list presets
"""

from __future__ import annotations

import argparse
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape
from yaml import YAMLError

from .config import Settings
from .generators import (
    ALL_TARGETS,
    UnknownTargetError,
    generate_targets,
    get_generator,
    resolve_targets,
)
from .models import ProjectConfig, Target
from .presets import PresetCatalog, PresetCatalogError, PresetManager, PresetNotFoundError
from .utils import (
    console,
    print_error,
    print_header,
    print_success,
    print_summary_table,
    print_warning,
    write_generated_files,
)
from .validation import ValidationErrors, advisories, count_by_kind, validate_project


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _manager(settings: Settings) -> PresetManager:
    return PresetManager(PresetCatalog.load(*settings.preset_dirs))


def _load_project(path: Path) -> ProjectConfig | None:
    try:
        return ProjectConfig.load(path)
    except FileNotFoundError:
        print_error(f"Error loading project config: {path} not found")
    except (YAMLError, ValidationError) as exc:
        print_error(f"Error loading project config {path}: {exc}")
    return None


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_init(args: argparse.Namespace, settings: Settings) -> int:
    manager = _manager(settings)
    try:
        preset = manager.get_preset(args.preset)
        config = manager.create_project(args.preset, args.name, args.environment)
    except PresetNotFoundError as exc:
        print_error(f"Error: {exc}")
        return 1

    config_file = Path(args.output) / settings.config_file.name
    config.save(config_file)

    print_success(f"Project '{config.name}' initialized successfully!")
    print_summary_table(
        {
            "Configuration": str(config_file),
            "Preset": f"{preset.name} - {preset.description}",
            "Environment": config.environment,
            "Services": str(len(config.services)),
        },
        title="New project",
    )
    console.print("Next steps:")
    for target in Target:
        console.print(f"  infragen generate {target.value}")
    return 0


def cmd_generate(args: argparse.Namespace, settings: Settings) -> int:
    try:
        targets = resolve_targets(args.target)
    except UnknownTargetError as exc:
        print_error(str(exc))
        return 1

    config = _load_project(Path(args.config))
    if config is None:
        return 1

    try:
        validate_project(config)
    except ValidationErrors as exc:
        print_error(f"Validation error: {exc}")
        return 1

    report = generate_targets(config, targets, settings)
    output_dir = Path(args.output)
    written = 0
    for target in targets:
        if target in report.failures:
            print_error(f"Error generating {target.value}: {report.failures[target]}")
            continue
        for path in write_generated_files(report.files[target], output_dir):
            console.print(f"  [green]Generated:[/green] {escape(str(path))}")
            written += 1

    if written:
        print_success(f"Generated {written} files for project '{config.name}'")
    else:
        print_warning("No files generated")
    return 0 if report.success else 1


def cmd_validate(args: argparse.Namespace, settings: Settings) -> int:
    config = _load_project(Path(args.config))
    if config is None:
        return 1

    try:
        validate_project(config)
    except ValidationErrors as exc:
        print_error(f"Project validation failed:\n{exc}")
        return 1

    print_success("Project configuration is valid")
    console.print(f"Project: {escape(config.name)} ({escape(config.type)})")
    console.print(f"Services: {len(config.services)}")

    try:
        targets = resolve_targets(args.target)
    except UnknownTargetError as exc:
        print_error(str(exc))
        return 1

    all_valid = True
    for target in targets:
        try:
            get_generator(target, settings).validate(config)
        except ValidationErrors as exc:
            print_error(f"{target.value} validation failed: {exc}")
            all_valid = False
        else:
            print_success(f"{target.value} configuration is valid")

    if all_valid:
        console.print("\nAll validations passed! Ready to generate infrastructure.")
    else:
        console.print("\nSome validations failed. Please fix issues before generating.")

    found = advisories(config)
    if found:
        counts = count_by_kind(found)
        summary = ", ".join(f"{count} {kind}" for kind, count in sorted(counts.items()))
        console.print(f"\nRecommendations ({summary}):")
        for advisory in found:
            print_warning(f"  {advisory.kind.upper()}: {advisory.message}")
    return 0 if all_valid else 1


def cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    if args.what == "project":
        return _list_project(Path(args.config))

    catalog = PresetCatalog.load(*settings.preset_dirs)
    if len(catalog) == 0:
        print_warning("No presets available")
        return 0

    if args.what == "categories":
        print_header("Available Categories")
        for category, count in catalog.categories().items():
            console.print(f"  {escape(category):<20} ({count} presets)")
        console.print(f"\nTotal: {len(catalog.categories())} categories")
        return 0

    print_header("Available Project Presets")
    for category in catalog.categories():
        console.print(f"[bold]{escape(category)}:[/bold]")
        for preset in catalog.list_presets_by_category(category):
            console.print(f"  {escape(preset.id):<14} - {escape(preset.description)}")
            if preset.tags:
                console.print(f"      [dim]Tags: {escape(', '.join(preset.tags))}[/dim]")
    console.print(
        f"\nTotal: {len(catalog)} presets across {len(catalog.categories())} categories"
    )
    return 0


def _list_project(path: Path) -> int:
    config = _load_project(path)
    if config is None:
        return 1

    print_summary_table(
        {
            "Name": config.name,
            "Type": config.type,
            "Description": config.description,
            "Environment": config.environment,
            "Version": config.version,
            "Created": config.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            "Updated": config.updated_at.strftime("%Y-%m-%d %H:%M:%S"),
        },
        title="Project Information",
    )
    if config.services:
        console.print(f"Services ({len(config.services)}):")
        for service in config.services:
            status = "Enabled" if service.enabled else "Disabled"
            console.print(f"  {status:<8} {escape(service.name):<15} ({escape(service.type)})")
    if config.variables:
        console.print(f"\nVariables ({len(config.variables)}):")
        for key, value in sorted(config.variables.items()):
            console.print(f"  {escape(key)}: {escape(value)}")
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="infragen",
        description="Generate Docker Compose, Ansible and Terraform configurations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  infragen init web-app --name blog\n"
            "  infragen generate all --output ./deploy\n"
            "  infragen validate --target terraform\n"
        ),
    )
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init", help="Initialize a new project from a preset")
    init.add_argument("preset", help="Preset id, e.g. web-app")
    init.add_argument("--name", "-n", required=True, help="Project name")
    init.add_argument(
        "--environment", "-e",
        default=settings.environment,
        help=f"Environment (default: {settings.environment})",
    )
    init.add_argument("--output", "-o", default=str(settings.output_dir), help="Output directory")
    init.set_defaults(handler=cmd_init)

    generate = sub.add_parser("generate", help="Generate infrastructure configurations")
    generate.add_argument(
        "target", nargs="?", default=ALL_TARGETS,
        help="docker, ansible, terraform or all (default: all)",
    )
    generate.add_argument("--config", "-c", default=str(settings.config_file))
    generate.add_argument("--output", "-o", default=str(settings.output_dir))
    generate.set_defaults(handler=cmd_generate)

    validate = sub.add_parser("validate", help="Validate the project configuration")
    validate.add_argument("--config", "-c", default=str(settings.config_file))
    validate.add_argument("--target", "-t", default=ALL_TARGETS)
    validate.set_defaults(handler=cmd_validate)

    listing = sub.add_parser("list", help="List presets, categories or the current project")
    listing.add_argument(
        "what", nargs="?", default="presets", choices=["presets", "categories", "project"],
    )
    listing.add_argument("--config", "-c", default=str(settings.config_file))
    listing.set_defaults(handler=cmd_list)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``infragen`` and ``python -m infragen``."""
    settings = Settings.from_env()
    args = build_parser(settings).parse_args(argv)
    try:
        return args.handler(args, settings)
    except PresetCatalogError as exc:
        print_error(f"Error loading presets: {exc}")
        return 1
