"""Typer based command line entry points for excelgrid."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .config import PaginationMode, build_render_options, import_object, load_render_options
from .errors import ExcelGridError
from .records import load_records
from .renderer import ExcelDocument, expected_sheet_count
from .resource import prepare_render_resource
from .utils.log import get_logger, set_console_level

app = typer.Typer(help="Render annotated record types into XLSX workbooks.")
logger = get_logger("cli")


def _load_model(spec: str) -> type:
    model = import_object(spec)
    if not isinstance(model, type):
        raise typer.BadParameter(f"{spec} is not a class")
    return model


def _parse_mode(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    allowed = {mode.value for mode in PaginationMode}
    if value not in allowed:
        raise typer.BadParameter(f"mode must be one of {', '.join(sorted(allowed))}")
    return value


@app.callback()
def main_callback(
    log_level: str = typer.Option("WARNING", "--log-level", help="Console log level (DEBUG/INFO/WARNING)."),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    set_console_level(log_level.upper())


@app.command("render")
def render_command(
    model: str = typer.Option(..., help="Record type as 'package.module:ClassName'."),
    data: Path = typer.Option(..., exists=True, dir_okay=False, readable=True, help="JSON/YAML/CSV/XLSX records."),
    out: Path = typer.Option(..., help="Output workbook path."),
    config: Optional[Path] = typer.Option(None, help="YAML file with render options."),
    mode: Optional[str] = typer.Option(None, callback=_parse_mode, help="single-sheet-strict or multi-sheet-paginated."),
    sheet_name: Optional[str] = typer.Option(None, help="Base sheet name (a 1-based index is appended)."),
    row_ceiling: Optional[int] = typer.Option(None, min=1, help="Rows per sheet, header included."),
    records_key: Optional[str] = typer.Option(None, help="Key holding the record list in JSON/YAML documents."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only report the planned sheets."),
) -> None:
    """Render DATA as rows of MODEL into OUT."""

    overrides = {"mode": mode, "sheet_name": sheet_name, "row_ceiling": row_ceiling}
    try:
        record_type = _load_model(model)
        if config is not None:
            options = load_render_options(config, **overrides)
        else:
            options = build_render_options({k: v for k, v in overrides.items() if v is not None})
        records = load_records(data, key=records_key)
        document = ExcelDocument(record_type, options)

        if dry_run:
            sheets = expected_sheet_count(len(records), document.body_capacity)
            if options.mode is PaginationMode.SINGLE_SHEET and len(records) > document.body_capacity:
                typer.echo(f"Rows: {len(records)} exceed single-sheet capacity {document.body_capacity}")
                raise typer.Exit(code=1)
            typer.echo(f"Rows: {len(records)}")
            typer.echo(f"Planned sheets: {sheets} (up to {document.body_capacity} rows each)")
            return

        document.render(records)
        document.save(out)
    except ExcelGridError as exc:
        logger.error("Render failed", extra={"error": str(exc), "model": model})
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"Rows rendered: {len(records)}")
    typer.echo(f"Sheets: {', '.join(document.sheet_names)}")
    typer.echo(f"Output: {out}")


@app.command("layout")
def layout_command(
    model: str = typer.Option(..., help="Record type as 'package.module:ClassName'."),
) -> None:
    """Print the compiled header grid of MODEL."""

    try:
        resource = prepare_render_resource(_load_model(model))
    except ExcelGridError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"Header height: {resource.header_height}")
    for field_path in resource.field_paths:
        cell = resource.header_cell(field_path)
        kind = "leaf" if field_path in resource.leaf_field_paths else "group"
        typer.echo(
            f"{field_path}\t{cell.header_name}\t{kind}\t"
            f"rows {cell.first_row}-{cell.last_row}\tcols {cell.first_column}-{cell.last_column}"
        )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
