"""Click CLI for decoding Age of Empires game-data files."""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional

import click

from chariotdata.config import list_scenarios
from chariotdata.dat.age import read_ages
from chariotdata.dat.graphic import read_graphics
from chariotdata.dat.random_map import read_random_maps
from chariotdata.errors import DecodeError
from chariotdata.profiles import (
    Profile,
    load_config,
    resolve_profile,
    save_config,
    validate_profile_name,
)


class Context:
    """Lazily resolves the game install from --game-dir / --profile / config."""

    def __init__(self, game_dir: Path | None = None, profile: str | None = None):
        self._explicit_game_dir = game_dir
        self._profile_name = profile
        self._profile: Profile | None = None

    @property
    def profile(self) -> Profile:
        if self._profile is None:
            self._profile = resolve_profile(self._explicit_game_dir, self._profile_name)
        return self._profile

    @property
    def dat(self) -> Path:
        return self.profile.dat


pass_ctx = click.make_pass_decorator(Context)


@click.group()
@click.option(
    "--game-dir", required=False, default=None,
    type=click.Path(exists=False, file_okay=False, path_type=Path),
    help="Game install directory (optional if profiles configured)",
)
@click.option(
    "--profile", "-p", default=None, type=str,
    help="Named profile to use (from chariotdata init)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log decode progress to stderr")
@click.version_option(package_name="chariotdata")
@click.pass_context
def cli(ctx, game_dir: Optional[Path], profile: Optional[str], verbose: bool):
    """chariotdata - decode legacy Age of Empires data files.

    Reads tech effects, graphics and random maps from empires.dat and the
    player-data block of scenario files, and prints them as JSON.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = Context(game_dir=game_dir, profile=profile)


@cli.command()
@click.argument("name")
@click.argument("game_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--dat", "dat_path", default=None,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="empires.dat outside the usual data/ folder")
@click.option("--scenario-dir", default=None,
              type=click.Path(exists=True, file_okay=False, path_type=Path),
              help="Scenario folder outside the usual scenario/ folder")
@click.option("--default", "make_default", is_flag=True, help="Make this the default profile")
def init(name: str, game_dir: Path, dat_path: Optional[Path],
         scenario_dir: Optional[Path], make_default: bool):
    """Save a profile NAME for the install at GAME_DIR."""
    if not validate_profile_name(name):
        raise click.UsageError(f"Invalid profile name '{name}'. Use letters, digits, hyphens, underscores.")

    profile = Profile(name=name, game_dir=game_dir, dat_path=dat_path, scenario_dir=scenario_dir)
    for problem in profile.missing():
        click.echo(f"Warning: {problem} does not exist", err=True)

    config = load_config()
    config.profiles[name] = profile
    if make_default or config.default_profile is None:
        config.default_profile = name

    saved_path = save_config(config)
    click.echo(f"Config saved to {saved_path}")


@cli.command("profiles")
def list_profiles():
    """List configured profiles."""
    config = load_config()
    if not config.profiles:
        click.echo("No profiles configured. Run 'chariotdata init' first.")
        return
    for name, p in config.profiles.items():
        default_marker = " (default)" if name == config.default_profile else ""
        click.echo(f"  {name}: {p.game_dir}{default_marker}")
        click.echo(f"    data:      {p.dat}")
        click.echo(f"    scenarios: {p.scenarios}")


def _emit(records, summary: bool, family: str, output_path: Optional[Path]):
    from chariotdata.export.json_export import export_json

    if summary:
        count = len(records) if isinstance(records, list) else 1
        click.echo(f"{family}: {count:,} record(s)")
        return

    text = export_json(records)
    if output_path is not None:
        output_path.write_text(text, encoding="utf-8")
        click.echo(f"Wrote {family} to {output_path}")
    else:
        click.echo(text)


def _decode(path: Path, family: str, decoder: Callable, offset: int, raw: bool):
    from chariotdata.loader import decode_section, open_data_file

    t0 = time.perf_counter()
    try:
        reader = open_data_file(path, inflate_payload=not raw)
        records = decode_section(family, decoder, reader, offset)
    except (DecodeError, OSError) as e:
        raise click.ClickException(f"{path.name}: {e}") from e
    logging.getLogger(__name__).debug("%s decoded in %.3fs", family, time.perf_counter() - t0)
    return records


def _dat_command(name: str, family: str, decoder: Callable, help_text: str):
    """Build a command that decodes one empires.dat section."""

    @cli.command(name, help=help_text)
    @click.option("--file", "file_path", default=None,
                  type=click.Path(exists=True, dir_okay=False, path_type=Path),
                  help="Data file to read (default: empires.dat from the game directory)")
    @click.option("--offset", required=True, type=int,
                  help="Byte offset of the section in the (inflated) data")
    @click.option("--raw", is_flag=True, help="File is already inflated")
    @click.option("--summary", is_flag=True, help="Print a record count instead of JSON")
    @click.option("--output", "-o", "output_path", default=None,
                  type=click.Path(dir_okay=False, path_type=Path),
                  help="Write JSON to a file instead of stdout")
    @pass_ctx
    def command(ctx: Context, file_path: Optional[Path], offset: int, raw: bool,
                summary: bool, output_path: Optional[Path]):
        path = file_path if file_path is not None else ctx.dat
        records = _decode(path, family, decoder, offset, raw)
        _emit(records, summary, family, output_path)

    return command


ages = _dat_command(
    "ages", "ages", read_ages,
    "Decode the age / tech-effect table.",
)
graphics = _dat_command(
    "graphics", "graphics", read_graphics,
    "Decode the graphic (sprite animation) table.",
)
random_maps = _dat_command(
    "random-maps", "random maps", read_random_maps,
    "Decode the random-map parameter table.",
)


@cli.command("scenario-players")
@click.argument("scenario", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--offset", required=True, type=int,
              help="Byte offset of the player-data block in the (inflated) data")
@click.option("--raw", is_flag=True, help="Data is not deflate-compressed")
@click.option("--strict", is_flag=True, help="Require the -1 section separators")
@click.option("--summary", is_flag=True, help="Print player names instead of JSON")
@click.option("--output", "-o", "output_path", default=None,
              type=click.Path(dir_okay=False, path_type=Path),
              help="Write JSON to a file instead of stdout")
def scenario_players(scenario: Path, offset: int, raw: bool, strict: bool,
                     summary: bool, output_path: Optional[Path]):
    """Decode the player-data block of a SCENARIO file."""
    from chariotdata.scn.player_data import read_player_data

    data = _decode(scenario, "scenario player data",
                   lambda r: read_player_data(r, strict=strict), offset, raw)
    if not summary:
        _emit(data, False, "scenario player data", output_path)
        return

    click.echo(f"Version: {data.version:.2f}")
    for i, (name, civ) in enumerate(zip(data.player_names, data.player_civs), start=1):
        if name:
            click.echo(f"  Player {i:>2}: {name} (civ {civ.civilization_id})")
    thumb = data.preview_thumbnail
    if thumb.included:
        click.echo(f"Thumbnail: {thumb.width}x{thumb.height}, {len(thumb.pixel_data):,} bytes")
    else:
        click.echo("Thumbnail: none")


@cli.command()
@pass_ctx
def scenarios(ctx: Context):
    """List scenario files of the selected install."""
    paths = list_scenarios(ctx.profile.scenarios)
    if not paths:
        click.echo("No scenario files found.")
        return
    for p in paths:
        click.echo(f"  {p.name:<32} {p.stat().st_size:>10,} bytes")
