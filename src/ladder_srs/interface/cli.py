"""ladder-srs CLI: inspect the stage ladder, run reviews, list due items."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from pydantic import ValidationError

from ladder_srs.application.config import EngineConfig, resolve_config
from ladder_srs.application.review_processor import ReviewProcessor, quality_from_correctness
from ladder_srs.application.scheduler import get_due_items, get_summary
from ladder_srs.domain.constants import DEFAULT_EASE_FACTOR
from ladder_srs.domain.errors import SrsError
from ladder_srs.domain.models import ReviewEvent
from ladder_srs.domain.ports import Clock, FixedClock, SystemClock
from ladder_srs.domain.stages import all_stages, get_name, milestone_reached
from ladder_srs.domain.timestamps import parse_timestamp
from ladder_srs.infrastructure.state_file import item_to_dict, load_item_states, outcome_to_dict

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="ladder-srs: stage-ladder spaced-repetition scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage ladder-srs configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def humanize_error(e: Exception) -> str:
    """Turn an engine or file error into a one-line message for the terminal."""
    if isinstance(e, SrsError):
        return f"Error: {e}"
    if isinstance(e, ValidationError):
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        return f"Error: invalid configuration ({problems})"
    return f"Unexpected error ({type(e).__name__}): {e}"


def _fail(e: Exception) -> NoReturn:
    typer.secho(humanize_error(e), fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _config(overrides: dict | None = None) -> EngineConfig:
    try:
        return resolve_config(overrides)
    except ValidationError as e:
        _fail(e)


def _clock(now: str | None) -> Clock:
    if now is None:
        return SystemClock()
    return FixedClock(parse_timestamp(now))


def _echo_json(data: object) -> None:
    typer.echo(json.dumps(data, indent=2))


def _resolve_state_file(path: Path | None) -> Path:
    if path is not None:
        return path
    config = _config()
    if config.state_file is None:
        typer.secho(
            "Error: no state file given and 'state_file' is not configured.",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)
    return config.state_file


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for ladder-srs."""
    config = _config({"verbose": verbose})
    level = logging.DEBUG if config.verbose >= 1 else getattr(logging, config.log_level)
    logging.getLogger().setLevel(level)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def stages():
    """Print the stage ladder with each stage's wait interval."""
    for d in all_stages():
        interval = f"{d.interval.value} {d.interval.unit}" if d.interval.value else "-"
        typer.echo(f"{int(d.stage)}  {d.name:<15} {interval}")


@app.command()
def review(
    stage: Annotated[int, typer.Option("--stage", "-s", help="Current stage (0-9).")],
    ease: Annotated[
        float, typer.Option("--ease", "-e", help="Current ease factor.")
    ] = DEFAULT_EASE_FACTOR,
    reps: Annotated[int, typer.Option("--reps", "-r", help="Current repetition streak.")] = 0,
    correct: Annotated[
        bool | None,
        typer.Option("--correct/--incorrect", help="Answer result (maps to quality 5 or 1)."),
    ] = None,
    quality: Annotated[
        int | None, typer.Option("--quality", "-q", help="Explicit SM-2 quality (0-5).")
    ] = None,
    now: Annotated[
        str | None, typer.Option(help="Review time as ISO 8601 (default: current UTC time).")
    ] = None,
):
    """Run a single review and print the resulting state as JSON."""
    if (correct is None) == (quality is None):
        typer.secho(
            "Error: pass exactly one of --correct/--incorrect or --quality.",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    q = quality if quality is not None else quality_from_correctness(bool(correct))

    try:
        processor = ReviewProcessor(clock=_clock(now))
        outcome = processor.process(
            ReviewEvent(quality=q, current_stage=stage, ease_factor=ease, repetitions=reps)
        )
    except SrsError as e:
        _fail(e)

    milestone = milestone_reached(outcome.previous_stage, outcome.new_stage)
    _echo_json(
        {
            "outcome": outcome_to_dict(outcome),
            "milestone": get_name(milestone) if milestone is not None else None,
        }
    )


@app.command()
def due(
    path: Annotated[
        Path | None,
        typer.Argument(help="YAML/JSON file of item states. Defaults to 'state_file' in config."),
    ] = None,
    limit: Annotated[
        int | None, typer.Option(help="Maximum number of items (default from config).")
    ] = None,
    now: Annotated[
        str | None, typer.Option(help="Reference time as ISO 8601 (default: current UTC time).")
    ] = None,
):
    """List items due for review, longest-waiting first."""
    state_file = _resolve_state_file(path)
    config = _config({"due_queue_limit": limit})

    try:
        items = load_item_states(state_file)
        due_items = get_due_items(items, _clock(now).now(), limit=config.due_queue_limit)
    except SrsError as e:
        _fail(e)

    logger.info(f"{len(due_items)} of {len(items)} item(s) due")
    _echo_json([item_to_dict(item) for item in due_items])


@app.command()
def summary(
    path: Annotated[
        Path | None,
        typer.Argument(help="YAML/JSON file of item states. Defaults to 'state_file' in config."),
    ] = None,
):
    """Print the stage distribution of a set of items."""
    state_file = _resolve_state_file(path)

    try:
        result = get_summary(load_item_states(state_file))
    except SrsError as e:
        _fail(e)

    _echo_json(asdict(result))


@config_app.command("show")
def config_show():
    """Print the resolved configuration as JSON."""
    config = _config()
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))
