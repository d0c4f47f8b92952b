"""
Cairn CLI - check and run a world from the command line.

Usage:
    cairn validate [ROOT...]     Load definitions and report every broken one
    cairn look LOCATION_ID       Print what a location looks like at reset
    cairn simulate               Reset the world and run it for a few ticks
"""

import logging
import random
import sys
from datetime import datetime, timedelta, timezone

import click

from cairn import __version__, config
from cairn.engine import CairnError, ObjectFactory, WorldManager


def _configure_logging() -> None:
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)


def _load_factory(roots: tuple[str, ...]) -> ObjectFactory:
    factory = ObjectFactory()
    for root in roots or (config.WORLD_DATA_DIR,):
        try:
            factory.load_root(root)
        except FileNotFoundError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)
    return factory


@click.group()
@click.version_option(version=__version__, prog_name="cairn")
def main():
    """Cairn - a tick-driven text adventure engine."""
    _configure_logging()


@main.command()
@click.argument("roots", nargs=-1, type=click.Path(file_okay=False))
def validate(roots: tuple[str, ...]):
    """Load every definition under ROOTS and try to create each object.

    ROOTS default to the configured world data directory.
    Exits with status 1 if anything failed.
    """
    factory = _load_factory(roots)
    failures = factory.validate_objects()

    if failures:
        click.echo(f"{len(failures)} of {len(factory)} objects failed:")
        for object_id, error in sorted(failures.items()):
            click.echo(f"  {object_id}: {error}")
        sys.exit(1)

    click.echo(f"All {len(factory)} objects OK.")


@main.command()
@click.argument("location_id")
@click.option("--root", "roots", multiple=True, help="Definition root (repeatable)")
def look(location_id: str, roots: tuple[str, ...]):
    """Print the description of LOCATION_ID as it is at reset."""
    from cairn.engine.objects import Location

    factory = _load_factory(roots)
    try:
        location = factory.create_object_as(location_id, Location)
    except CairnError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    for line in location.examine():
        click.echo(line)


@main.command()
@click.option("--ticks", "-n", default=10, show_default=True, help="Number of ticks to run")
@click.option("--step", default=config.TICK_SECONDS, show_default=True, help="Seconds of world time per tick")
@click.option("--start", default=config.START_LOCATION, show_default=True, help="Start location ID")
@click.option("--seed", type=int, default=config.RANDOM_SEED, help="Random seed for combat rolls")
@click.option("--root", "roots", multiple=True, help="Definition root (repeatable)")
def simulate(ticks: int, step: float, start: str, seed: int | None, roots: tuple[str, ...]):
    """Reset the world and advance it on a virtual clock, printing narration.

    Examples:
        cairn simulate --ticks 20 --step 0.5
        cairn simulate --seed 7 --root ./my-world
    """
    factory = _load_factory(roots)
    manager = WorldManager(factory, start, rng=random.Random(seed))
    try:
        world = manager.reset_world()
    except CairnError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    manager.dispatcher.subscribe(
        lambda ev: click.echo(f"[{ev.get('location_id') or ev.get('player_id')}] {ev['text']}")
    )

    now = datetime.now(timezone.utc)
    for _ in range(ticks):
        manager.tick(now)
        now += timedelta(seconds=step)

    click.echo(f"Ran {world.tick_count} ticks.")


if __name__ == "__main__":
    main()
