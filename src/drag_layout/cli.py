"""CLI for drag-layout."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from loguru import logger

from drag_layout import __version__
from drag_layout.layout import mount_layout, reduce_layout
from drag_layout.layout.collision import find_collisions
from drag_layout.layout.constants import DROP_STRATEGIES
from drag_layout.layout.events import Drop, Scroll
from drag_layout.layout.units import compute_grid
from drag_layout.parser import LayoutState, dump_layout, load_layout
from drag_layout.render import render_svg
from drag_layout.themes import THEMES


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log engine decisions to stderr.")
def cli(verbose: bool) -> None:
    """drag-layout: Pack, compact and inspect widget grid layouts."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")
    logger.enable("drag_layout")


def _read_layout(input_file: Path) -> LayoutState:
    try:
        return load_layout(input_file.read_text())
    except ValueError as e:
        click.echo(f"Parse error: {e}", err=True)
        raise SystemExit(1)


def _mount(state: LayoutState) -> LayoutState:
    return mount_layout(state.config, state.widgets)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def info(input_file: Path) -> None:
    """Show information about a layout document."""
    state = _mount(_read_layout(input_file))
    config = state.config
    grid = compute_grid(config)

    click.echo(f"Layout: {config.layout_id}")
    click.echo(f"Canvas: {config.width:g}x{config.height:g} px, "
               f"scale {config.scale:g}")
    click.echo(f"Grid: {config.cols} cols x {grid.col_width:g} px, "
               f"rows {grid.row_height:g} px")
    click.echo(f"Widgets: {len(state.widgets)}")
    kinds = {
        "grid": sum(1 for w in state.widgets if not w.is_float),
        "float": sum(1 for w in state.widgets if w.is_float),
        "static": sum(1 for w in state.widgets if w.is_static),
        "nested": sum(1 for w in state.widgets if w.is_nested),
        "sticky": sum(1 for w in state.widgets if w.is_sticky),
    }
    for kind, count in kinds.items():
        if count:
            click.echo(f"  {kind}: {count}")
    rows = max((w.y + w.h for w in state.widgets if not w.is_float), default=0)
    click.echo(f"Rows used: {rows:g}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def validate(input_file: Path) -> None:
    """Validate a layout document."""
    declared = _read_layout(input_file)
    config = declared.config

    errors = []
    if not isinstance(config.row_height, (int, float)) or config.row_height <= 0:
        errors.append(f"'row_height' must be positive, got {config.row_height!r}")
    if config.drop_strategy not in DROP_STRATEGIES:
        errors.append(f"Unknown drop_strategy '{config.drop_strategy}' "
                      f"(expected one of {', '.join(DROP_STRATEGIES)})")
    if errors:
        click.echo("Validation errors:", err=True)
        for err in errors:
            click.echo(f"  - {err}", err=True)
        raise SystemExit(1)

    # Overlaps in the declared positions are legal (compaction resolves
    # them) but worth pointing out.
    grid_widgets = [w for w in declared.widgets if not w.is_float]
    notes = []
    for i, widget in enumerate(grid_widgets):
        for other in find_collisions(widget, grid_widgets[i + 1:]):
            notes.append(f"'{widget.id}' overlaps '{other.id}' as declared")

    state = _mount(declared)
    for note in notes:
        click.echo(f"Note: {note}")
    click.echo(f"Valid: {len(state.widgets)} widgets, "
               f"{config.cols} cols, "
               f"{len(notes)} declared overlaps")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output file path. Defaults to <input>_compact.json")
def compact(input_file: Path, output: Path | None) -> None:
    """Normalize and compact a layout document."""
    state = _mount(_read_layout(input_file))

    if output is None:
        output = input_file.with_name(input_file.stem + "_compact.json")

    output.write_text(dump_layout(state))
    moved = sum(1 for w in state.widgets if w.moved)
    click.echo(f"Compacted {len(state.widgets)} widgets "
               f"({moved} moved) -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output SVG file path. Defaults to <input>.svg")
@click.option("--theme", type=click.Choice(list(THEMES.keys())), default="light",
              help="Visual theme (default: light)")
@click.option("--width", type=int, default=None, help="SVG width in pixels")
@click.option("--height", type=int, default=None, help="SVG height in pixels")
@click.option("--scroll-top", type=float, default=None,
              help="Viewport scroll offset; pinned sticky widgets are drawn there")
def render(
    input_file: Path,
    output: Path | None,
    theme: str,
    width: int | None,
    height: int | None,
    scroll_top: float | None,
) -> None:
    """Render a layout document to SVG."""
    state = _mount(_read_layout(input_file))
    if scroll_top is not None:
        state = reduce_layout(state, Scroll(scroll_top=scroll_top)).state

    svg = render_svg(state, THEMES[theme], width=width, height=height,
                     scroll_top=scroll_top)

    if output is None:
        output = input_file.with_suffix(".svg")

    output.write_text(svg)
    click.echo(f"Rendered {len(state.widgets)} widgets -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("--x", "pointer_x", type=float, required=True,
              help="Pointer x in canvas pixels")
@click.option("--y", "pointer_y", type=float, required=True,
              help="Pointer y in canvas pixels")
@click.option("--w", "width", type=float, default=None, help="Dropped item width")
@click.option("--h", "height", type=float, default=None, help="Dropped item height")
@click.option("--id", "widget_id", default=None, help="Id of the new widget")
@click.option("--strategy", type=click.Choice(list(DROP_STRATEGIES)), default=None,
              help="Insertion strategy (default: from the layout)")
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Write the resulting layout here")
def drop(
    input_file: Path,
    pointer_x: float,
    pointer_y: float,
    width: float | None,
    height: float | None,
    widget_id: str | None,
    strategy: str | None,
    output: Path | None,
) -> None:
    """Simulate dropping a new item onto a layout."""
    state = _mount(_read_layout(input_file))
    if strategy is not None:
        state.config.drop_strategy = strategy

    before = {w.id: (w.x, w.y) for w in state.widgets}
    template = {}
    if width is not None:
        template["w"] = width
    if height is not None:
        template["h"] = height

    result = reduce_layout(
        state,
        Drop(pointer_x=pointer_x, pointer_y=pointer_y,
             template=template or None, widget_id=widget_id),
    )
    if result.rejected:
        click.echo(f"Drop rejected: {result.reason}", err=True)
        raise SystemExit(1)

    new = result.widget
    moved = [
        w.id for w in result.state.widgets
        if w.id in before and (w.x, w.y) != before[w.id]
    ]
    click.echo(f"Dropped '{new.id}' at x={new.x:g}, y={new.y:g} "
               f"({new.w:g}x{new.h:g})")
    if moved:
        click.echo(f"Moved: {', '.join(moved)}")
    if output is not None:
        output.write_text(dump_layout(result.state))
        click.echo(f"Wrote layout -> {output}")
