"""Random-map generation parameters from empires.dat.

The section is a table of N fixed-size headers followed by N map bodies.
The headers repeat what the bodies say (plus a script id) and are only
stepped over, after checking their two ids. Each body carries its base
zones, terrains and units as counted arrays; every count is paired with a
pointer left over from the writing tool, which is read and ignored.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Optional

from chariotdata.dat.constants import (
    BASE_ZONE_UNKNOWN_SKIP_1,
    BASE_ZONE_UNKNOWN_SKIP_2,
    RANDOM_MAP_HEADER_SIZE,
    RANDOM_MAP_UNKNOWN_STRIDE,
)
from chariotdata.dat.ids import optional_id, required_id
from chariotdata.dat.reader import StreamReader

# script(i32) + borders, usage and water shape (24) + non_base_terrain(i32)
# + coverage, unknown and four (count, pointer) pairs (40)
_MAP_HEADER_FMT = struct.Struct("<i24xi40x")
# border_sw/nw/ne/se + border_usage + water_shape + non_base_terrain
# + base_zone_coverage + unknown (9 x i32)
_MAP_BODY_FMT = struct.Struct("<9i")
# unknown(u32) + base_terrain(i32) + space_between_players(i32) + unknown(20)
# + start_area_radius(i32) + unknown(8)
_BASE_ZONE_FMT = struct.Struct(
    f"<Iii{BASE_ZONE_UNKNOWN_SKIP_1}xi{BASE_ZONE_UNKNOWN_SKIP_2}x"
)
# proportion, terrain, clump_count, spacing, placement_zone, unknown
_MAP_TERRAIN_FMT = struct.Struct("<6i")
# unit, host_terrain, unknown, then eight placement parameters
_MAP_UNIT_FMT = struct.Struct("<11i")
# count(u32) + pointer(u32)
_COUNTED_FMT = struct.Struct("<II")


@dataclass(slots=True)
class BaseZone:
    base_terrain_id: int
    space_between_players: int
    start_area_radius: int


@dataclass(slots=True)
class MapTerrain:
    proportion: int
    terrain_id: int
    clump_count: int
    spacing_to_other_terrains: int
    placement_zone: int


@dataclass(slots=True)
class MapUnit:
    unit_id: int
    host_terrain_id: Optional[int]
    objects_per_group: int
    fluctuation: int
    groups_per_player: int
    group_radius: int
    own_at_start: int
    set_place_for_all_players: int
    min_distance_to_players: int
    max_distance_to_players: int


@dataclass(slots=True)
class RandomMap:
    border_sw: int
    border_nw: int
    border_ne: int
    border_se: int
    border_usage: int
    water_shape: int
    non_base_terrain_id: int
    base_zone_coverage: int
    base_zones: list[BaseZone] = field(default_factory=list)
    terrains: list[MapTerrain] = field(default_factory=list)
    units: list[MapUnit] = field(default_factory=list)


def skip_random_map_header(reader: StreamReader) -> int:
    """Step over one map header. Returns the number of bytes consumed.

    Nothing from the header is kept, but its script and non-base terrain ids
    must still be present.
    """
    script, non_base_terrain = _MAP_HEADER_FMT.unpack(reader.read_bytes(RANDOM_MAP_HEADER_SIZE))
    required_id(script, "script_id")
    required_id(non_base_terrain, "non_base_terrain_id")
    return RANDOM_MAP_HEADER_SIZE


def read_base_zone(reader: StreamReader) -> BaseZone:
    _, base_terrain, spacing, radius = _BASE_ZONE_FMT.unpack(
        reader.read_bytes(_BASE_ZONE_FMT.size)
    )
    return BaseZone(
        base_terrain_id=required_id(base_terrain, "base_terrain_id"),
        space_between_players=spacing,
        start_area_radius=radius,
    )


def read_map_terrain(reader: StreamReader) -> MapTerrain:
    proportion, terrain, clumps, spacing, zone, _ = _MAP_TERRAIN_FMT.unpack(
        reader.read_bytes(_MAP_TERRAIN_FMT.size)
    )
    return MapTerrain(
        proportion=proportion,
        terrain_id=required_id(terrain, "terrain_id"),
        clump_count=clumps,
        spacing_to_other_terrains=spacing,
        placement_zone=zone,
    )


def read_map_unit(reader: StreamReader) -> MapUnit:
    unit, host_terrain, _, *placement = _MAP_UNIT_FMT.unpack(
        reader.read_bytes(_MAP_UNIT_FMT.size)
    )
    return MapUnit(
        required_id(unit, "unit_id"),
        optional_id(host_terrain),
        *placement,
    )


def _read_count(reader: StreamReader) -> int:
    count, _pointer = _COUNTED_FMT.unpack(reader.read_bytes(_COUNTED_FMT.size))
    return count


def read_random_map(reader: StreamReader) -> RandomMap:
    (border_sw, border_nw, border_ne, border_se, border_usage, water_shape,
     non_base_terrain, coverage, _) = _MAP_BODY_FMT.unpack(reader.read_bytes(_MAP_BODY_FMT.size))

    random_map = RandomMap(
        border_sw=border_sw,
        border_nw=border_nw,
        border_ne=border_ne,
        border_se=border_se,
        border_usage=border_usage,
        water_shape=water_shape,
        non_base_terrain_id=required_id(non_base_terrain, "non_base_terrain_id"),
        base_zone_coverage=coverage,
    )
    random_map.base_zones = reader.read_array(_read_count(reader), read_base_zone)
    random_map.terrains = reader.read_array(_read_count(reader), read_map_terrain)
    random_map.units = reader.read_array(_read_count(reader), read_map_unit)

    # Trailing table whose entries are not understood, only their size
    unknown_count = _read_count(reader)
    reader.skip(RANDOM_MAP_UNKNOWN_STRIDE * unknown_count)
    return random_map


def read_random_maps(reader: StreamReader) -> list[RandomMap]:
    random_map_count = reader.read_u32()
    reader.read_u32()  # unused pointer
    for _ in range(random_map_count):
        skip_random_map_header(reader)
    return [read_random_map(reader) for _ in range(random_map_count)]
