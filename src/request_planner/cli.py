"""CLI entry point for request-planner."""

import json
import logging
from pathlib import Path

import click

from request_planner.config import load_settings
from request_planner.engine import Planner
from request_planner.errors import PlannerError
from request_planner.parser.query import parse_queries
from request_planner.planner.readiness import get_dependencies, is_success
from request_planner.state import ResolvedState, load_state


def _load_state(state_path: Path | None) -> ResolvedState:
    return load_state(state_path) if state_path else ResolvedState()


@click.group()
@click.option("--log-level", default=None, help="Logging level (defaults to REQUEST_PLANNER_LOG_LEVEL).")
@click.pass_context
def main(ctx: click.Context, log_level: str | None):
    """Request Planner — turn declarative query items into HTTP request descriptors."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level


@main.command()
@click.argument("query_path", type=click.Path(exists=True, path_type=Path))
@click.option("--state", "state_path", type=click.Path(exists=True, path_type=Path), help="Resolved state file (YAML/JSON).")
@click.option("--mappings", "mappings_path", type=click.Path(exists=True, path_type=Path), help="Resource to URL template mappings file.")
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None, help="Write descriptors to this JSON file instead of stdout.")
@click.pass_context
def plan(ctx: click.Context, query_path: Path, state_path: Path | None, mappings_path: Path | None, output: Path | None):
    """Plan every query item in QUERY_PATH against the resolved state."""
    settings = load_settings(mappings_path)
    logging.basicConfig(level=(ctx.obj.get("log_level") or settings.log_level).upper())

    try:
        items = parse_queries(query_path)
        state = _load_state(state_path)
        planner = Planner(settings)
        planned = {}
        failed = False
        for item in items:
            result = planner.plan(item, state)
            if not result.ok:
                click.echo(f"{item.name}: {result.error.error_type}: {result.error.message}", err=True)
                failed = True
                continue
            planned[item.name] = [r.model_dump() for r in result.requests]
    except PlannerError as e:
        raise click.ClickException(f"{e.error_type}: {e.message}")

    text = json.dumps(planned, indent=2, ensure_ascii=False)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        click.echo(f"Planned {sum(len(r) for r in planned.values())} requests into {output}")
    else:
        click.echo(text)

    if failed:
        ctx.exit(1)


@main.command()
@click.argument("query_path", type=click.Path(exists=True, path_type=Path))
@click.option("--state", "state_path", type=click.Path(exists=True, path_type=Path), help="Resolved state file (YAML/JSON).")
def deps(query_path: Path, state_path: Path | None):
    """Show each query item's dependencies and whether they are ready."""
    try:
        items = parse_queries(query_path)
        state = _load_state(state_path)
    except PlannerError as e:
        raise click.ClickException(f"{e.error_type}: {e.message}")

    for item in items:
        names = get_dependencies(item)
        if not names:
            click.echo(f"{item.name}: no dependencies")
            continue
        marks = ", ".join(f"{name} ({'ok' if is_success(state, name) else 'pending'})" for name in names)
        click.echo(f"{item.name}: {marks}")
