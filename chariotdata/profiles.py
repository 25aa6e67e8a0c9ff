"""Named game installs kept in a small TOML file.

A profile records where an install lives. Most installs follow the stock
layout (``data/empires.dat`` and ``scenario/`` under the game directory);
expansions and repacks that move either one store an override instead.
"""
from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

import click

from chariotdata.config import derive_dat_path, derive_scenario_dir

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

_PROFILE_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")
_PATH_KEYS = ("game_dir", "dat_path", "scenario_dir")


@dataclass
class Profile:
    name: str
    game_dir: Path
    dat_path: Path | None = None
    scenario_dir: Path | None = None

    @property
    def dat(self) -> Path:
        return self.dat_path or derive_dat_path(self.game_dir)

    @property
    def scenarios(self) -> Path:
        return self.scenario_dir or derive_scenario_dir(self.game_dir)

    def missing(self) -> list[str]:
        """Describe every configured location that is not on disk."""
        problems = []
        if not self.game_dir.is_dir():
            problems.append(f"game directory {self.game_dir}")
        if not self.dat.is_file():
            problems.append(f"data file {self.dat}")
        return problems


@dataclass
class Config:
    default_profile: str | None = None
    profiles: dict[str, Profile] = field(default_factory=dict)


def get_config_path() -> Path:
    return Path(click.get_app_dir("chariotdata")) / "config.toml"


def _toml_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def load_config() -> Config:
    """Read the profile file, or an empty Config when there is none yet."""
    path = get_config_path()
    if not path.exists():
        return Config()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise click.UsageError(f"Config file {path} is not valid TOML: {e}") from e

    config = Config(default_profile=data.get("default_profile"))
    for name, table in data.get("profiles", {}).items():
        paths = {key: Path(table[key]) for key in _PATH_KEYS if key in table}
        if "game_dir" not in paths:
            raise click.UsageError(f"Profile '{name}' in {path} has no game_dir")
        config.profiles[name] = Profile(name=name, **paths)
    return config


def save_config(config: Config) -> Path:
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    if config.default_profile:
        lines.append(f"default_profile = {_toml_string(config.default_profile)}")
    lines.append("")

    for name, profile in config.profiles.items():
        lines.append(f"[profiles.{name}]")
        for key in _PATH_KEYS:
            value = getattr(profile, key)
            if value is not None:
                lines.append(f"{key} = {_toml_string(str(value))}")
        lines.append("")

    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def validate_profile_name(name: str) -> bool:
    return bool(_PROFILE_NAME_RE.match(name))


def resolve_profile(game_dir: Path | None, profile_name: str | None) -> Profile:
    """Pick the install to work on.

    An explicit --game-dir wins and is used with the stock layout. Otherwise
    the named profile, or the default one, is loaded from the config file.
    """
    if game_dir is not None:
        if not game_dir.is_dir():
            raise click.UsageError(f"Game directory not found: {game_dir}")
        return Profile(name="(command line)", game_dir=game_dir)

    config = load_config()
    name = profile_name or config.default_profile
    if name is None:
        raise click.UsageError(
            "No game install selected. Run 'chariotdata init <name> <game_dir>', "
            "pass --game-dir, or give the command a --file."
        )

    profile = config.profiles.get(name)
    if profile is None:
        available = ", ".join(config.profiles) or "(none)"
        raise click.UsageError(
            f"Profile '{name}' not found. Available profiles: {available}"
        )

    if not profile.game_dir.is_dir():
        raise click.UsageError(
            f"Game directory for profile '{name}' is gone: {profile.game_dir}"
        )
    return profile
