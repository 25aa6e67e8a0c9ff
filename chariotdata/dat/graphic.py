"""Graphic (sprite animation) table from empires.dat.

Layout:
  count(u16), then count x u32 presence markers, then one 77-byte body for
  each nonzero marker. A body is followed by its delta records and, when its
  attack-sound flag is set, three attack-sound records per facing angle.

The markers look like pointers from the tool that wrote the file; they are
far too large to be offsets and are only ever tested against zero.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Optional

from chariotdata.dat.constants import (
    ATTACK_SOUNDS_PER_ANGLE,
    DELTA_UNKNOWN_SKIP_1,
    DELTA_UNKNOWN_SKIP_2,
    GRAPHIC_NAME_LENGTH,
    GRAPHIC_SHORT_NAME_LENGTH,
    GRAPHIC_UNKNOWN_SKIP,
)
from chariotdata.dat.ids import optional_id, required_id
from chariotdata.dat.reader import StreamReader, decode_fixed_string

# name(21) + short_name(13) + slp(i32) + pad(2) + layer(u8) + player_color(i8)
# + second_player_color(i8) + replay(u8) + coords(4 x u16) + delta_count(u16)
# + sound_group(i16) + attack_sound_used(u8) + frame_count(u16)
# + angle_count(u16) + new_speed(f32) + frame_rate(f32) + replay_delay(f32)
# + sequence_type(u8) + id(i16) + mirror_mode(u8)
_GRAPHIC_FMT = struct.Struct(
    f"<{GRAPHIC_NAME_LENGTH}s{GRAPHIC_SHORT_NAME_LENGTH}si{GRAPHIC_UNKNOWN_SKIP}x"
    "BbbB4HHhBHHfffBhB"
)
# graphic_id(i16) + unknown(6) + offset_x(i16) + offset_y(i16) + display_angle(i16) + unknown(2)
_DELTA_FMT = struct.Struct(f"<h{DELTA_UNKNOWN_SKIP_1}xhhh{DELTA_UNKNOWN_SKIP_2}x")
# sound_delay(i16) + sound_group(i16)
_ATTACK_SOUND_FMT = struct.Struct("<hh")


@dataclass(slots=True)
class GraphicDelta:
    """Another graphic drawn together with its parent, at an offset."""
    graphic_id: int
    offset_x: int
    offset_y: int
    # Appears to be unused by the game
    display_angle: int = field(default=0, repr=False, compare=False)


@dataclass(slots=True)
class GraphicAttackSound:
    sound_delay: int
    sound_group_id: int


@dataclass(slots=True)
class Graphic:
    id: int
    name: str
    short_name: str
    slp_id: Optional[int]
    layer: int
    player_color_id: Optional[int]
    second_player_color_id: Optional[int]
    replay: bool                        # restart at the end of the animation
    coordinates: tuple[int, int, int, int]
    sound_group_id: Optional[int]       # played while on screen
    frame_count: int
    angle_count: int
    new_speed: float
    frame_rate: float
    replay_delay: float
    sequence_type: int
    mirror_mode: int
    deltas: list[GraphicDelta] = field(default_factory=list)
    attack_sounds: list[GraphicAttackSound] = field(default_factory=list)


def presence_mask(markers: list[int]) -> list[bool]:
    """Which graphic slots have a body in the stream."""
    return [marker != 0 for marker in markers]


def read_delta(reader: StreamReader) -> Optional[GraphicDelta]:
    """Read one 16-byte delta; None when it references no graphic."""
    raw_id, offset_x, offset_y, display_angle = _DELTA_FMT.unpack(
        reader.read_bytes(_DELTA_FMT.size)
    )
    graphic_id = optional_id(raw_id)
    if graphic_id is None:
        return None
    return GraphicDelta(graphic_id, offset_x, offset_y, display_angle)


def read_attack_sound(reader: StreamReader) -> Optional[GraphicAttackSound]:
    """Read one 4-byte attack sound; None when it has no sound group."""
    sound_delay, raw_group = _ATTACK_SOUND_FMT.unpack(reader.read_bytes(_ATTACK_SOUND_FMT.size))
    sound_group_id = optional_id(raw_group)
    if sound_group_id is None:
        return None
    return GraphicAttackSound(sound_delay, sound_group_id)


def read_graphic(reader: StreamReader) -> Graphic:
    """Read one graphic body plus its delta and attack-sound records."""
    (name, short_name, slp_id, layer, player_color, second_player_color, replay,
     x0, y0, x1, y1, delta_count, sound_group, attack_sound_used, frame_count,
     angle_count, new_speed, frame_rate, replay_delay, sequence_type, graphic_id,
     mirror_mode) = _GRAPHIC_FMT.unpack(reader.read_bytes(_GRAPHIC_FMT.size))

    graphic = Graphic(
        id=required_id(graphic_id, "graphic_id"),
        name=decode_fixed_string(name),
        short_name=decode_fixed_string(short_name),
        slp_id=optional_id(slp_id),
        layer=layer,
        player_color_id=optional_id(player_color),
        second_player_color_id=optional_id(second_player_color),
        replay=replay != 0,
        coordinates=(x0, y0, x1, y1),
        sound_group_id=optional_id(sound_group),
        frame_count=frame_count,
        angle_count=angle_count,
        new_speed=new_speed,
        frame_rate=frame_rate,
        replay_delay=replay_delay,
        sequence_type=sequence_type,
        mirror_mode=mirror_mode,
    )

    deltas = reader.read_array(delta_count, read_delta)
    graphic.deltas = [d for d in deltas if d is not None]

    if attack_sound_used:
        sounds = reader.read_array(ATTACK_SOUNDS_PER_ANGLE * angle_count, read_attack_sound)
        graphic.attack_sounds = [s for s in sounds if s is not None]

    return graphic


def read_graphics(reader: StreamReader) -> list[Graphic]:
    """Read the graphic table, skipping slots whose marker is zero."""
    graphic_count = reader.read_u16()
    markers = reader.read_array(graphic_count, StreamReader.read_u32)
    return [read_graphic(reader) for present in presence_mask(markers) if present]
