"""unfold command-line interface."""

from __future__ import annotations

import logging

import click
import yaml

from unfold.domain.errors import DataSourceError


@click.group()
@click.option("--config", "-c", default="config.yaml", help="Path to config YAML.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config: str, verbose: bool) -> None:
    """unfold: Louvain community detection on weighted graphs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def _load_settings(ctx: click.Context):
    from unfold.config import load_config

    try:
        return load_config(ctx.obj["config"])
    except FileNotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def _detection_options(f):
    f = click.option(
        "--multilevel/--single-level",
        default=None,
        help="Keep coarsening and re-optimising (overrides detection.mode).",
    )(f)
    f = click.option(
        "--coarse",
        is_flag=True,
        help="Also print the graph of communities.",
    )(f)
    return f


def _run(
    ctx: click.Context,
    kind: str,
    path: str | None,
    multilevel: bool | None,
    coarse: bool,
    stop_word: str | None = None,
) -> None:
    from unfold.config import build_detection_service, build_report, build_source

    settings = _load_settings(ctx)
    if multilevel is not None:
        settings.detection.mode = "multilevel" if multilevel else "single"
    if stop_word is not None:
        settings.source.stop_word = stop_word
    if coarse:
        settings.report.coarse = True

    source = build_source(kind, path, settings)
    try:
        graph = source.load()
    except DataSourceError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)

    service = build_detection_service(settings)
    report = build_report(settings)

    result = service.detect(graph)
    click.echo(report.render_result(result), nl=False)

    if settings.report.coarse and result.graph is not None:
        click.echo("\n--- Communities graph ---")
        click.echo(report.render_graph(result.graph.communities_graph()), nl=False)


@main.command()
@click.argument("path", type=click.Path())
@_detection_options
@click.pass_context
def edges(ctx: click.Context, path: str, multilevel: bool | None, coarse: bool) -> None:
    """Detect communities in an edge-list file at PATH."""
    _run(ctx, "edges", path, multilevel, coarse)


@main.command()
@click.argument("path", type=click.Path())
@click.option("--stop-word", default=None, help="Keyword to leave out (default from config).")
@_detection_options
@click.pass_context
def keywords(
    ctx: click.Context,
    path: str,
    stop_word: str | None,
    multilevel: bool | None,
    coarse: bool,
) -> None:
    """Detect communities of co-occurring keywords in the articles at PATH."""
    _run(ctx, "keywords", path, multilevel, coarse, stop_word=stop_word)


@main.command()
@_detection_options
@click.pass_context
def sample(ctx: click.Context, multilevel: bool | None, coarse: bool) -> None:
    """Detect communities in the built-in five-node sample graph."""
    _run(ctx, "sample", None, multilevel, coarse)


@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show the effective configuration."""
    settings = _load_settings(ctx)
    click.echo("=== Config ===")
    click.echo(yaml.dump(settings.to_dict(), default_flow_style=False))


if __name__ == "__main__":
    main()
