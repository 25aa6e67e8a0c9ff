"""Default paths and constants for Age of Empires game data."""
from pathlib import Path


def derive_dat_path(game_dir: Path) -> Path:
    """Derive the empires.dat path from the game install directory."""
    return game_dir / "data" / "empires.dat"


def derive_scenario_dir(game_dir: Path) -> Path:
    """Directory holding the shipped and user-made .scn files."""
    return game_dir / "scenario"


def list_scenarios(scn_dir: Path) -> list[Path]:
    """Return all .scn files in scn_dir, sorted by name."""
    if not scn_dir.is_dir():
        return []
    return sorted(p for p in scn_dir.iterdir() if p.suffix.lower() == ".scn")


# Strings in the data files use the Windows ANSI code page
STRING_ENCODING = "cp1252"

# empires.dat is a headerless deflate stream
DEFLATE_WBITS = -15
