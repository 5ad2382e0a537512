"""
Command-line interface for coatpath.

Provides commands for planning coating toolpaths from a shapes file and
inspecting coating profiles.
"""

import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from coatpath import __version__
from coatpath.core.config import CoatingSettings, ConfigManager, load_settings
from coatpath.core.exceptions import CoatPathError
from coatpath.core.logging import configure_logging
from coatpath.core.shapes import load_shapes
from coatpath.pipeline import CoatingJob, JobResult

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config-dir",
    type=click.Path(path_type=Path),
    default="config",
    help="Configuration directory",
)
@click.option("--log-level", default="WARNING", help="Minimum log level")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write JSON logs to a file")
@click.option("--planner-log-level", default=None, help="Minimum level for per-shape planning logs")
@click.pass_context
def main(
    ctx: click.Context,
    config_dir: Path,
    log_level: str,
    json_logs: bool,
    log_file: Optional[str],
    planner_log_level: Optional[str],
) -> None:
    """coatpath - Coating toolpath planner for 2D design shapes."""
    configure_logging(
        level=log_level,
        json_output=json_logs,
        log_file=log_file,
        planner_level=planner_log_level,
    )
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir


def _resolve_settings(
    config_dir: Path, settings_path: Optional[Path], profile: Optional[str]
) -> CoatingSettings:
    if settings_path is not None:
        return load_settings(settings_path)
    if profile is not None:
        return ConfigManager(config_dir).get_profile(profile)
    return CoatingSettings()


def _result_to_dict(result: JobResult, relative: bool) -> dict:
    shapes = []
    for item in result.shapes:
        shape = item.shape
        segments = item.segments
        if relative:
            segments = [seg.translated(-shape.x, -shape.y) for seg in segments]
        entry = {
            "name": shape.label,
            "coating_type": shape.coating_type.value,
            "skipped": item.skipped,
            "segments": [
                [seg.start.x, seg.start.y, seg.end.x, seg.end.y] for seg in segments
            ],
        }
        if relative:
            entry["transform"] = {
                "x": shape.x,
                "y": shape.y,
                "rotation": shape.rotation,
                "scale_x": shape.scale_x,
                "scale_y": shape.scale_y,
            }
        shapes.append(entry)
    return {"shapes": shapes, "errors": result.errors}


# =============================================================================
# Planning Commands
# =============================================================================


@main.command("plan")
@click.argument("shapes_path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(exists=True, path_type=Path),
    help="Coating settings YAML file",
)
@click.option("--profile", "-p", help="Coating profile from the config directory")
@click.option("--relative", is_flag=True, help="Write segments relative to each shape")
@click.option("--optimize-travel", is_flag=True, help="Reorder segments to shorten travel")
@click.option(
    "--output", "-o", type=click.Path(path_type=Path), help="Write toolpaths as JSON"
)
@click.pass_context
def plan(
    ctx: click.Context,
    shapes_path: Path,
    settings_path: Optional[Path],
    profile: Optional[str],
    relative: bool,
    optimize_travel: bool,
    output: Optional[Path],
) -> None:
    """Plan coating toolpaths for every shape in SHAPES_PATH."""
    if settings_path is not None and profile is not None:
        raise click.UsageError("--settings and --profile are mutually exclusive")

    try:
        settings = _resolve_settings(ctx.obj["config_dir"], settings_path, profile)
        shapes = load_shapes(shapes_path)
        result = CoatingJob(shapes, settings, optimize_travel=optimize_travel).execute()
    except CoatPathError as e:
        console.print(f"[red]✗[/red] Planning failed: {e}")
        raise SystemExit(1)

    table = Table(title=f"Toolpaths: {shapes_path.name}")
    table.add_column("Shape", style="cyan")
    table.add_column("Type")
    table.add_column("Segments", justify="right")
    table.add_column("Length (mm)", justify="right")
    table.add_column("Note")

    for item in result.shapes:
        table.add_row(
            item.shape.label,
            item.shape.coating_type.value,
            str(len(item.segments)),
            f"{item.coating_length:.1f}",
            "inside mask" if item.skipped else "",
        )
    console.print(table)
    console.print(f"  Travel: {result.travel_distance():.1f} mm")

    for error in result.errors:
        console.print(f"[red]✗[/red] {error}")

    if output is not None:
        with open(output, "w") as f:
            json.dump(_result_to_dict(result, relative), f, indent=2)
        console.print(f"[green]✓[/green] Wrote {output}")

    if not result.success:
        raise SystemExit(1)


# =============================================================================
# Profile Commands
# =============================================================================


@main.group()
def profiles() -> None:
    """Coating profile commands."""
    pass


@profiles.command("list")
@click.pass_context
def profiles_list(ctx: click.Context) -> None:
    """List available coating profiles."""
    try:
        config_mgr = ConfigManager(ctx.obj["config_dir"])
        names = config_mgr.list_profiles()

        if not names:
            console.print("[yellow]No coating profiles found.[/yellow]")
            return

        table = Table(title="Available Profiles")
        table.add_column("Name", style="cyan")
        table.add_column("Width (mm)", justify="right")
        table.add_column("Spacing (mm)", justify="right")
        table.add_column("Pattern")
        table.add_column("Masking")

        for name in names:
            settings = config_mgr.get_profile(name)
            table.add_row(
                name,
                f"{settings.coating_width:g}",
                f"{settings.line_spacing:g}",
                settings.fill_pattern.value,
                settings.mask_avoidance.value if settings.enable_masking else "off",
            )

        console.print(table)

    except CoatPathError as e:
        console.print(f"[red]✗[/red] Failed to list profiles: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
