"""Player-data block of a scenario (.scn) file.

The block has no internal offsets: each field starts where the previous one
ends, so fields are read strictly in file order. Most per-player tables have
16 slots regardless of how many players the scenario uses.

Three -1 separators sit between sections. They are read and kept on the
record; only strict decoding checks their value.
"""
from __future__ import annotations

import functools
import struct
from dataclasses import dataclass, field
from typing import Callable

from chariotdata.scn.constants import (
    AI_TYPE_COUNT,
    DISABLED_RESEARCH_SLOTS,
    INDIVIDUAL_VICTORY_SLOTS,
    MAX_PLAYERS,
    PLAYER_DATA_UNKNOWN_SKIP,
    PLAYER_NAME_LENGTH,
    SCENARIO_TEXT_COUNT,
    SEPARATOR_VALUE,
    THUMBNAIL_ABSENT_SKIP,
    THUMBNAIL_HEADER_SIZE,
    THUMBNAIL_UNKNOWN_SKIP_1,
    THUMBNAIL_UNKNOWN_SKIP_2,
)
from chariotdata.dat.ids import required_id
from chariotdata.dat.reader import StreamReader
from chariotdata.errors import DecodeError, SeparatorMismatchError

# state(u32) + type(u32) + civilization(i32) + unknown(u32)
_CIVILIZATION_FMT = struct.Struct("<IIiI")
# gold, wood, food, stone
_STARTING_RESOURCES_FMT = struct.Struct("<4I")
# conquest, unused, relics, unused, exploration, unused, all_required,
# mode, score, time
_VICTORY_FMT = struct.Struct("<10I")
# included(u32) + width(u32) + height(u32)
_THUMBNAIL_HEADER_FMT = struct.Struct("<III")
# three string lengths, read together ahead of the strings
_AI_SCRIPT_LENGTHS_FMT = struct.Struct("<III")


@dataclass(slots=True)
class PlayerCivilization:
    state: int          # enabled flag?
    type_id: int        # human / computer?
    civilization_id: int
    unknown: int = field(default=0, repr=False)


@dataclass(slots=True)
class PlayerStartingResources:
    gold: int
    wood: int
    food: int
    stone: int


@dataclass(slots=True)
class PreviewThumbnail:
    included: bool
    width: int
    height: int
    pixel_data: bytes = b""


@dataclass(slots=True)
class AiScriptConfig:
    ai_file_name: str
    city_file_name: str
    personality_file_name: str


@dataclass(slots=True)
class VictoryConditions:
    conquest_required: bool
    required_relic_count: int
    required_exploration_percent: int
    all_conditions_required: bool
    victory_mode: int
    score_required: int
    timed_game_time: int


@dataclass(slots=True)
class Diplomacy:
    stances: list[list[int]]
    individual_victory: list[list[int]]


@dataclass(slots=True)
class ScenarioText:
    original_file_name: str
    instructions: str
    hints: str
    victory: str
    loss: str
    history: str
    pre_game_cinematic_file_name: str
    victory_cinematic_file_name: str
    loss_cinematic_file_name: str
    background_file_name: str


@dataclass(slots=True)
class PlayerData:
    version: float
    player_names: list[str]
    player_civs: list[PlayerCivilization]
    conquest_victory: bool
    text: ScenarioText
    preview_thumbnail: PreviewThumbnail
    ai_names: list[str]
    city_names: list[str]
    personality_names: list[str]
    ai_script_configs: list[AiScriptConfig]
    ai_types: list[int]
    player_starting_resources: list[PlayerStartingResources]
    victory_conditions: VictoryConditions
    diplomacy: Diplomacy
    allied_victory: list[int]
    disabled_research_ids: list[list[int]]
    all_techs: bool
    starting_ages: list[int]
    separators: tuple[int, int, int] = field(default=(SEPARATOR_VALUE,) * 3, repr=False)


def read_civilization(reader: StreamReader) -> PlayerCivilization:
    state, type_id, civ, unknown = _CIVILIZATION_FMT.unpack(
        reader.read_bytes(_CIVILIZATION_FMT.size)
    )
    return PlayerCivilization(state, type_id, required_id(civ, "civilization_id"), unknown)


def read_preview_thumbnail(reader: StreamReader) -> PreviewThumbnail:
    """Read the thumbnail; its length depends on the leading included flag."""
    included, width, height = _THUMBNAIL_HEADER_FMT.unpack(
        reader.read_bytes(_THUMBNAIL_HEADER_FMT.size)
    )
    if not included:
        reader.skip(THUMBNAIL_ABSENT_SKIP)
        return PreviewThumbnail(included=False, width=width, height=height)

    reader.skip(THUMBNAIL_UNKNOWN_SKIP_1)
    offset = reader.position
    declared = reader.read_u32()
    if declared < THUMBNAIL_HEADER_SIZE:
        raise DecodeError(
            f"Thumbnail pixel length {declared} at offset {offset} "
            f"is smaller than its {THUMBNAIL_HEADER_SIZE}-byte header"
        )
    reader.skip(THUMBNAIL_UNKNOWN_SKIP_2)
    pixel_data = reader.read_bytes(declared - THUMBNAIL_HEADER_SIZE)
    return PreviewThumbnail(included=True, width=width, height=height, pixel_data=pixel_data)


def read_ai_script_config(reader: StreamReader) -> AiScriptConfig:
    ai_len, city_len, personality_len = _AI_SCRIPT_LENGTHS_FMT.unpack(
        reader.read_bytes(_AI_SCRIPT_LENGTHS_FMT.size)
    )
    return AiScriptConfig(
        ai_file_name=reader.read_fixed_string(ai_len),
        city_file_name=reader.read_fixed_string(city_len),
        personality_file_name=reader.read_fixed_string(personality_len),
    )


def read_player_starting_resources(reader: StreamReader) -> PlayerStartingResources:
    return PlayerStartingResources(
        *_STARTING_RESOURCES_FMT.unpack(reader.read_bytes(_STARTING_RESOURCES_FMT.size))
    )


def read_victory_conditions(reader: StreamReader) -> VictoryConditions:
    (conquest, _, relics, _, exploration, _, all_required,
     mode, score, time) = _VICTORY_FMT.unpack(reader.read_bytes(_VICTORY_FMT.size))
    return VictoryConditions(
        conquest_required=conquest != 0,
        required_relic_count=relics,
        required_exploration_percent=exploration,
        all_conditions_required=all_required != 0,
        victory_mode=mode,
        score_required=score,
        timed_game_time=time,
    )


@functools.lru_cache(maxsize=None)
def _read_u32_row(size: int) -> Callable[[StreamReader], list[int]]:
    row = struct.Struct(f"<{size}I")

    def read_row(reader: StreamReader) -> list[int]:
        return list(row.unpack(reader.read_bytes(row.size)))
    return read_row


def read_diplomacy(reader: StreamReader) -> Diplomacy:
    return Diplomacy(
        stances=reader.read_array(MAX_PLAYERS, _read_u32_row(MAX_PLAYERS)),
        individual_victory=reader.read_array(MAX_PLAYERS, _read_u32_row(INDIVIDUAL_VICTORY_SLOTS)),
    )


def _read_separator(reader: StreamReader, name: str, strict: bool) -> int:
    offset = reader.position
    value = reader.read_i32()
    if strict and value != SEPARATOR_VALUE:
        raise SeparatorMismatchError(name, SEPARATOR_VALUE, value, offset)
    return value


def read_player_data(reader: StreamReader, strict: bool = False) -> PlayerData:
    """Read the whole player-data block.

    With strict=True the three section separators must hold -1; otherwise
    they are accepted whatever they contain.
    """
    version = reader.read_f32()
    player_names = reader.read_array(
        MAX_PLAYERS, lambda r: r.read_fixed_string(PLAYER_NAME_LENGTH)
    )
    player_civs = reader.read_array(MAX_PLAYERS, read_civilization)
    conquest_victory = reader.read_u8() != 0
    reader.skip(PLAYER_DATA_UNKNOWN_SKIP)

    text = ScenarioText(*reader.read_array(SCENARIO_TEXT_COUNT, StreamReader.read_pascal_string))
    preview_thumbnail = read_preview_thumbnail(reader)

    ai_names = reader.read_array(MAX_PLAYERS, StreamReader.read_pascal_string)
    city_names = reader.read_array(MAX_PLAYERS, StreamReader.read_pascal_string)
    personality_names = reader.read_array(MAX_PLAYERS, StreamReader.read_pascal_string)
    ai_script_configs = reader.read_array(MAX_PLAYERS, read_ai_script_config)
    ai_types = list(reader.read_bytes(AI_TYPE_COUNT))

    starting_resources = reader.read_array(MAX_PLAYERS, read_player_starting_resources)
    first = _read_separator(reader, "starting_resources", strict)

    victory_conditions = read_victory_conditions(reader)
    diplomacy = read_diplomacy(reader)
    second = _read_separator(reader, "diplomacy", strict)

    allied_victory = _read_u32_row(MAX_PLAYERS)(reader)
    disabled_research_ids = reader.read_array(MAX_PLAYERS, _read_u32_row(DISABLED_RESEARCH_SLOTS))
    reader.read_u32()  # unused
    reader.read_u32()  # unused
    all_techs = reader.read_u32() != 0
    starting_ages = _read_u32_row(MAX_PLAYERS)(reader)
    third = _read_separator(reader, "starting_ages", strict)

    return PlayerData(
        version=version,
        player_names=player_names,
        player_civs=player_civs,
        conquest_victory=conquest_victory,
        text=text,
        preview_thumbnail=preview_thumbnail,
        ai_names=ai_names,
        city_names=city_names,
        personality_names=personality_names,
        ai_script_configs=ai_script_configs,
        ai_types=ai_types,
        player_starting_resources=starting_resources,
        victory_conditions=victory_conditions,
        diplomacy=diplomacy,
        allied_victory=allied_victory,
        disabled_research_ids=disabled_research_ids,
        all_techs=all_techs,
        starting_ages=starting_ages,
        separators=(first, second, third),
    )
