#!/usr/bin/env python3
"""
geotool_converter.cli.cli

Typer-based CLI around the gdal_translate / ogr2ogr conversion core.

Examples
--------
Install core + CLI:

    uv pip install -e ".[cli]"

List the formats the installed gdal_translate can produce:

    geotool-convert formats --family gdal --config-dir /etc/geotool

Convert a raster:

    geotool-convert convert sfdem.tiff out/ --format GDAL-JPEG2000 --crs EPSG:4326
"""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import TYPE_CHECKING

import typer

from geotool_converter.errors import FamilyError, GeotoolError

if TYPE_CHECKING:
    from geotool_converter.application.use_cases import ToolRuntime

app = typer.Typer(
    name="geotool-convert",
    help="Convert geospatial datasets with gdal_translate / ogr2ogr.",
    no_args_is_help=True,
)

FAMILY_HELP = "Tool family: 'gdal' (gdal_translate) or 'ogr' (ogr2ogr)."
CONFIG_DIR_HELP = (
    "Directory holding the family configuration file "
    "(defaults to $GEOTOOL_CONFIG_DIR or the working directory)."
)
FAMILY_MODULE_HELP = "Extra family module import path or file path (repeatable)."


def _print_conversion_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly conversion error.

    Parameters
    ----------
    exc : Exception
        Exception raised during conversion.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"[red]✗ {type(exc).__name__}:[/red] {exc}", err=True)
    if debug:
        typer.echo("\n[dim]Traceback:[/dim]", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _runtime(
    family: str,
    config_dir: Path | None,
    family_module: list[str] | None,
    timeout: float | None = None,
) -> ToolRuntime:
    """Build a one-shot runtime, turning unknown families into usage errors."""
    from geotool_converter.application.use_cases import create_tool_runtime

    try:
        return create_tool_runtime(
            family,
            config_dir,
            watch=False,
            timeout=timeout,
            family_modules=family_module,
        )
    except FamilyError as exc:
        raise typer.BadParameter(str(exc)) from exc


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False, "--debug", help="Show full tracebacks and debug logging."
    ),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug error output.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("formats")
def formats_cmd(
    family: str = typer.Option("gdal", "--family", help=FAMILY_HELP),
    config_dir: Path | None = typer.Option(None, "--config-dir", help=CONFIG_DIR_HELP),
    family_module: list[str] | None = typer.Option(
        None, "--family-module", help=FAMILY_MODULE_HELP
    ),
) -> None:
    """List the configured formats the installed tool supports."""
    from geotool_converter.application.service import (
        response_file_extension,
        response_mime_type,
    )

    with _runtime(family, config_dir, family_module) as runtime:
        snapshot = runtime.registry.snapshot()
        typer.echo(f"executable: {snapshot.executable}")
        if not snapshot.formats:
            typer.echo("no formats available")
            return
        for descriptor in snapshot.formats.values():
            typer.echo(
                f"{descriptor.public_name}\t{descriptor.tool_format}\t"
                f"{response_mime_type(descriptor) or '-'}\t"
                f"{response_file_extension(descriptor) or '-'}\t"
                f"{descriptor.type.value}"
            )


@app.command("probe")
def probe_cmd(
    executable: str = typer.Argument(..., help="Tool executable name or path."),
    family: str = typer.Option("gdal", "--family", help=FAMILY_HELP),
) -> None:
    """Report availability and supported format codes of an executable."""
    from geotool_converter.application.use_cases import probe_tool

    try:
        available, formats = probe_tool(executable, family)
    except FamilyError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(f"available: {'yes' if available else 'no'}")
    typer.echo(f"formats: {', '.join(sorted(formats)) or '<none>'}")
    if not available:
        raise typer.Exit(code=1)


@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    input_path: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        help="Dataset file to convert.",
    ),
    output_dir: Path = typer.Argument(..., help="Directory receiving the output."),
    format_name: str = typer.Option(
        ..., "--format", help="Public output format name, e.g. GDAL-JPEG2000."
    ),
    type_name: str | None = typer.Option(
        None,
        "--type-name",
        help="Logical type name used as output file stem (defaults to the input stem).",
    ),
    crs: str | None = typer.Option(
        None, "--crs", help="CRS to assign to the output (EPSG:4326, WKT, PROJ string)."
    ),
    family: str = typer.Option("gdal", "--family", help=FAMILY_HELP),
    config_dir: Path | None = typer.Option(None, "--config-dir", help=CONFIG_DIR_HELP),
    timeout: float | None = typer.Option(
        None, "--timeout", min=0.0, help="Kill the tool after this many seconds."
    ),
    family_module: list[str] | None = typer.Option(
        None, "--family-module", help=FAMILY_MODULE_HELP
    ),
) -> None:
    """Convert a dataset to one of the active output formats."""
    debug: bool = bool(ctx.obj.get("debug", False))

    output_dir.mkdir(parents=True, exist_ok=True)
    with _runtime(family, config_dir, family_module, timeout) as runtime:
        try:
            out = runtime.service.convert(
                input_path,
                output_dir,
                type_name or input_path.stem,
                format_name,
                crs,
            )
            typer.echo(f"[green]✓ Saved:[/green] {out}")
        except GeotoolError as exc:
            raise typer.Exit(code=_print_conversion_error(exc, debug))


@app.command("default-config")
def default_config_cmd(
    family: str = typer.Option("gdal", "--family", help=FAMILY_HELP),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write to this file instead of stdout."
    ),
) -> None:
    """Print the compiled-in configuration as an editable XML file."""
    from geotool_converter.application.use_cases import default_configuration_xml

    try:
        document = default_configuration_xml(family)
    except FamilyError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if output is None:
        typer.echo(document, nl=False)
        return
    output.write_text(document, encoding="utf-8")
    typer.echo(f"[green]✓ Saved:[/green] {output}")


@app.command("doctor")
def doctor_cmd(
    config_dir: Path | None = typer.Option(None, "--config-dir", help=CONFIG_DIR_HELP),
) -> None:
    """Print library versions and the state of every tool family."""
    import importlib.metadata as metadata

    modules = ["pydantic", "pyproj", "watchdog", "defusedxml", "typer"]

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in modules:
        try:
            version = metadata.version(module)
            typer.echo(f"{module}: {version}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    from geotool_converter.application.use_cases import (
        create_tool_runtime,
        resolve_config_dir,
    )
    from geotool_converter.families import create_default_registry

    families = create_default_registry()
    typer.echo(f"config dir: {resolve_config_dir(config_dir)}")
    typer.echo(f"families: {', '.join(families.names())}")
    for name in families.names():
        family = families.get(name)
        with create_tool_runtime(family, config_dir, watch=False) as runtime:
            snapshot = runtime.registry.snapshot()
            available = family.create_probe().is_available(
                snapshot.executable, snapshot.environment
            )
            typer.echo(
                f"{name}: {snapshot.executable} "
                f"({'available' if available else '<not available>'}), "
                f"formats: {', '.join(snapshot.names()) or '<none>'}"
            )


if __name__ == "__main__":
    app()
