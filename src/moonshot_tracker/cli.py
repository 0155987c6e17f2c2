from __future__ import annotations

import logging
import os

import requests
import typer

from moonshot_tracker.m1.heartbeats import project_totals, split_duration, total_active_seconds
from moonshot_tracker.m2.errors import HackatimeApiError
from moonshot_tracker.m2.hackatime_api import fetch_heartbeats, fetch_stats
from moonshot_tracker.m3.progress import (
    format_duration,
    goal_reached,
    progress_percent,
    projects_from_stats,
    prune_selection,
    selected_hours,
)
from moonshot_tracker.m4.config import (
    API_KEY_ENV,
    BASE_URL_ENV,
    GOAL_HOURS_ENV,
    TOKEN_ENV,
    goal_hours_from_env,
    load_config_from_env,
)

app = typer.Typer(add_completion=False, no_args_is_help=True)
config_app = typer.Typer(add_completion=False, no_args_is_help=True)
app.add_typer(config_app, name="config")


@app.callback()
def _root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),  # noqa: B008
) -> None:
    """moonshot-tracker."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_progress(hours: float, goal_hours: float) -> None:
    pct = progress_percent(hours, goal_hours)
    typer.echo(f"total: {format_duration(hours)}")
    if goal_reached(hours, goal_hours):
        typer.echo(f"goal reached ({goal_hours:g}h)")
    else:
        typer.echo(f"progress: {pct:.1f}% of {goal_hours:g}h")


@app.command("stats")
def stats(
    email: str = typer.Option(..., "--email", help="Email registered with Hackatime"),
    start_date: str = typer.Option(
        "",
        "--start-date",
        help="Only count time since this ISO timestamp (default: all time)",
    ),  # noqa: B008
    project: list[str] | None = typer.Option(  # noqa: B008
        None,
        "--project",
        help="Project to include in the total (repeatable; default: all projects)",
    ),
    goal_hours: float = typer.Option(
        0.0,
        "--goal-hours",
        help=f"Goal in hours (default: ${GOAL_HOURS_ENV} or 75)",
    ),  # noqa: B008
) -> None:
    """Fetch per-project stats for a user and show progress towards the goal."""
    project = project or []
    cfg = load_config_from_env()
    goal = goal_hours if goal_hours > 0 else goal_hours_from_env()

    try:
        projects = projects_from_stats(fetch_stats(cfg, email, start_date or None))
    except (HackatimeApiError, requests.RequestException) as e:
        typer.echo(f"error: {e}")
        raise typer.Exit(code=1) from e

    if not projects:
        typer.echo("no projects")

    selection = prune_selection(projects, project) if project else {p.name for p in projects}
    for name in project:
        if name not in selection:
            typer.echo(f"warning: unknown project {name!r}")

    for p in projects:
        mark = "*" if p.name in selection else " "
        typer.echo(f"{mark} {p.name}\t{format_duration(p.hours)}")

    _print_progress(selected_hours(projects, selection), goal)


@app.command("heartbeats")
def heartbeats(
    start_time: str = typer.Option(
        ..., "--start-time", help="Fetch heartbeats since this ISO timestamp"
    ),
    api_key: str = typer.Option(
        "",
        "--api-key",
        help="Personal Hackatime API key",
        envvar=API_KEY_ENV,
    ),  # noqa: B008
    goal_hours: float = typer.Option(
        0.0,
        "--goal-hours",
        help=f"Goal in hours (default: ${GOAL_HOURS_ENV} or 75)",
    ),  # noqa: B008
) -> None:
    """Estimate coding time from raw heartbeats."""
    if not api_key:
        typer.echo(f"missing {API_KEY_ENV} (or pass --api-key)")
        raise typer.Exit(code=2)

    cfg = load_config_from_env()
    goal = goal_hours if goal_hours > 0 else goal_hours_from_env()

    try:
        hbs = fetch_heartbeats(cfg, api_key, start_time)
    except (HackatimeApiError, requests.RequestException) as e:
        typer.echo(f"error: {e}")
        raise typer.Exit(code=1) from e

    typer.echo(f"heartbeats: {len(hbs)}")
    for p in project_totals(hbs):
        h, m = split_duration(p.total_seconds)
        typer.echo(f"  {p.name}\t{h}h {m}m")

    total_s = total_active_seconds(hbs)
    _print_progress(total_s / 3600, goal)


@config_app.command("show")
def config_show() -> None:
    """Show which settings are picked up from the environment."""
    cfg = load_config_from_env()
    typer.echo(f"{BASE_URL_ENV}: {cfg.base_url}")

    for name in (TOKEN_ENV, API_KEY_ENV):
        # Never print secrets.
        typer.echo(f"{name}: {'set' if os.environ.get(name) else 'missing'}")
    if not cfg.api_token:
        typer.echo(f"hint: set {TOKEN_ENV} to look up users by email")
    if not os.environ.get(API_KEY_ENV):
        typer.echo(f"hint: set {API_KEY_ENV} (or pass --api-key) for `heartbeats`")

    typer.echo(f"{GOAL_HOURS_ENV}: {goal_hours_from_env():g}")


def main() -> None:
    app()
