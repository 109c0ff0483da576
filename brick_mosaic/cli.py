"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import typer
from PIL import UnidentifiedImageError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from brick_mosaic.catalog import CatalogError, ShapeCategory, load_catalog
from brick_mosaic.config import MosaicConfig
from brick_mosaic.driver import export_outputs, prepare_source, render_mosaic
from brick_mosaic.template import CELL_SHAPES

app = typer.Typer(
    name="brick-mosaic",
    help="Turn a photo into a buildable mosaic of coloured plates and rounds.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(1)


# Defaults come from MosaicConfig - single source of truth
_DEFAULTS = MosaicConfig()


# -- render command ----------------------------------------------------

@app.command()
def render(
    catalog_file: Path = typer.Argument(..., help="Colour catalog (CSV)"),
    image: Path = typer.Argument(..., help="Source photo"),
    out_name: Path | None = typer.Argument(
        None, help="Output base name; .jpg/.ldr/.csv are appended",
    ),
    tiles: int = typer.Option(
        _DEFAULTS.tiles_long_side, "--tiles", "-t",
        help="Tiles along the long side (halved for 2- and 3-layer builds)",
    ),
    layers: int = typer.Option(_DEFAULTS.layers, "--layers", "-l", help="1, 2 or 3"),
    sigma: int = typer.Option(
        _DEFAULTS.sigma, "--sigma", help="Sharpen blur radius (1/100 px)",
    ),
    threshold: int = typer.Option(
        _DEFAULTS.threshold, "--threshold",
        help="Sharpen low-contrast threshold (1/100 Lab units)",
    ),
    amount: int = typer.Option(
        _DEFAULTS.amount, "--amount", help="Sharpen strength (1/100)",
    ),
    luminance: int = typer.Option(
        _DEFAULTS.luminance_factor, "--luminance",
        help="Luminance importance for colour matching (500 = neutral)",
    ),
    ldraw: bool = typer.Option(
        _DEFAULTS.write_build_file, "--ldraw/--no-ldraw", help="Write LDraw build file",
    ),
    parts: bool = typer.Option(
        _DEFAULTS.write_part_list, "--parts/--no-parts", help="Write part list",
    ),
    output_format: str = typer.Option(
        _DEFAULTS.output_format, "--format", "-f", help="Mosaic image format",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Render IMAGE as a mosaic using the colours in CATALOG_FILE."""
    _setup_logging(verbose)

    try:
        cfg = MosaicConfig(
            tiles_long_side=tiles,
            layers=layers,
            sigma=sigma,
            threshold=threshold,
            amount=amount,
            luminance_factor=luminance,
            write_build_file=ldraw,
            write_part_list=parts,
            output_format=output_format,
        )
    except ValueError as exc:
        _fail(str(exc))

    t_total = time.perf_counter()
    try:
        catalog = load_catalog(catalog_file)
        source = prepare_source(image, cfg)
        result = render_mosaic(source, catalog, cfg)
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        # CatalogError is a ValueError
        _fail(str(exc))

    rows, cols = result.mosaic.assignments.shape[:2]
    console.print(Panel.fit(
        f"[bold]BRICK MOSAIC[/bold]\n"
        f"Tiles: {cols}x{rows}  |  Tile side: {result.template.side} px\n"
        f"Colours: {len(catalog)}  |  Parts: {result.mosaic.tile_count * 6}",
        border_style="cyan",
    ))

    if out_name is None:
        console.print("[yellow]No output name given, nothing written.[/yellow]")
        return

    out_name.parent.mkdir(parents=True, exist_ok=True)
    try:
        written = export_outputs(result, catalog, cfg, out_name)
    except (OSError, ValueError) as exc:
        _fail(str(exc))

    elapsed = time.perf_counter() - t_total
    for path in written:
        console.print(f"  [green]✓[/green] {path}")
    console.print(f"[dim]time={elapsed:.1f}s[/dim]")


# -- catalog command ---------------------------------------------------

@app.command("catalog")
def show_catalog(
    catalog_file: Path = typer.Argument(..., help="Colour catalog (CSV)"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """List catalog colours and the shapes each one exists in."""
    _setup_logging(verbose)
    try:
        catalog = load_catalog(catalog_file)
    except (OSError, CatalogError) as exc:
        _fail(str(exc))

    table = Table(title=f"{catalog_file.name} ({len(catalog)} colours)")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("RGB")
    for shape in ShapeCategory:
        table.add_column(shape.name, justify="center")
    for swatch in catalog:
        table.add_row(
            swatch.id,
            swatch.name,
            f"[on #{swatch.hex}]      [/] #{swatch.hex}",
            *("[green]+[/green]" if ok else "[dim]-[/dim]" for ok in swatch.availability),
        )
    console.print(table)

    missing = [
        ShapeCategory(s).name for s in sorted(set(CELL_SHAPES))
        if not catalog.eligible(s).any()
    ]
    if missing:
        console.print(
            f"[bold red]No colour available for:[/bold red] {', '.join(missing)}"
        )
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
