"""Age / tech-effect tables from empires.dat.

An age is a named group of effects. Every effect is stored as the same
11-byte header:

    type_id(i8) + param_a(i16) + param_b(i16) + param_c(i16) + param_d(f32)

and the meaning of the four params depends on type_id, sometimes further
narrowed by one of the params. The header is always consumed in full before
dispatch, so a shape we do not recognise still decodes (as Unknown) without
losing bytes or alignment.
"""
from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from typing import Callable, NamedTuple, Optional, Union

from chariotdata.dat.constants import AGE_NAME_LENGTH
from chariotdata.dat.enums import (
    ResourceType,
    UnitAttributeId,
    UnknownCode,
    lookup_enum,
)
from chariotdata.dat.ids import optional_id, required_id
from chariotdata.dat.reader import StreamReader

_EFFECT_HEADER = struct.Struct("<bhhhf")

_I32_MIN = -(2 ** 31)
_I32_MAX = 2 ** 31 - 1


# -- Effect values -----------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SetTo:
    amount: float


@dataclass(frozen=True, slots=True)
class Add:
    amount: float


@dataclass(frozen=True, slots=True)
class MultiplyBy:
    amount: float


EffectValue = Union[SetTo, Add, MultiplyBy]


# -- Effects -----------------------------------------------------------------

@dataclass(slots=True)
class UnitAttribute:
    """Types 0/4/5: change an attribute of a unit or a unit class."""
    target_unit_id: Optional[int]
    target_unit_class_id: Optional[int]
    attribute_id: Union[UnitAttributeId, UnknownCode]
    effect: EffectValue


@dataclass(slots=True)
class CivHeader:
    """Types 1/6: change a value in the civilization's resource header."""
    target_civ_header_id: int
    effect: EffectValue


@dataclass(slots=True)
class SetUnitEnabled:
    target_unit_id: Optional[int]
    enabled: bool


@dataclass(slots=True)
class UpgradeUnit:
    source_unit_id: int
    target_unit_id: int


@dataclass(slots=True)
class ResearchCost:
    research_id: int
    resource_type: Union[ResourceType, UnknownCode]
    effect: EffectValue


@dataclass(slots=True)
class DisableResearch:
    research_id: int


@dataclass(slots=True)
class GainResearch:
    research_id: int


@dataclass(slots=True)
class Unknown:
    """Any effect shape not covered by the dispatch rules, kept raw."""
    type_id: int
    param_a: int
    param_b: int
    param_c: int
    param_d: float


Effect = Union[
    UnitAttribute,
    CivHeader,
    SetUnitEnabled,
    UpgradeUnit,
    ResearchCost,
    DisableResearch,
    GainResearch,
    Unknown,
]


@dataclass(slots=True)
class EffectGroup:
    """An age: a named, ordered list of effects."""
    id: int
    name: str
    effects: list[Effect] = field(default_factory=list)


# -- Dispatch ----------------------------------------------------------------

class _EffectHeader(NamedTuple):
    type_id: int
    param_a: int
    param_b: int
    param_c: int
    param_d: float


def _float_to_i32(value: float) -> int:
    """Convert a float to i32: truncate toward zero, saturate, NaN -> 0."""
    if math.isnan(value):
        return 0
    if value >= _I32_MAX:
        return _I32_MAX
    if value <= _I32_MIN:
        return _I32_MIN
    return int(value)


def _unit_attribute(h: _EffectHeader) -> Effect:
    if h.type_id == 0:
        value: EffectValue = SetTo(h.param_d)
    elif h.type_id == 4:
        value = Add(h.param_d)
    else:
        value = MultiplyBy(h.param_d)
    return UnitAttribute(
        target_unit_id=optional_id(h.param_a),
        target_unit_class_id=optional_id(h.param_b),
        attribute_id=lookup_enum(UnitAttributeId, h.param_c),
        effect=value,
    )


def _civ_header(h: _EffectHeader) -> Effect:
    value = SetTo(h.param_d) if h.param_b == 0 else Add(h.param_d)
    return CivHeader(target_civ_header_id=h.param_a, effect=value)


def _civ_header_multiply(h: _EffectHeader) -> Effect:
    return CivHeader(target_civ_header_id=h.param_a, effect=MultiplyBy(h.param_d))


def _set_unit_enabled(h: _EffectHeader) -> Effect:
    return SetUnitEnabled(target_unit_id=optional_id(h.param_a), enabled=h.param_b == 1)


def _upgrade_unit(h: _EffectHeader) -> Effect:
    return UpgradeUnit(
        source_unit_id=required_id(h.param_a, "source_unit_id"),
        target_unit_id=required_id(h.param_b, "target_unit_id"),
    )


def _research_cost(h: _EffectHeader) -> Effect:
    value = SetTo(h.param_d) if h.param_c == 0 else Add(h.param_d)
    return ResearchCost(
        research_id=required_id(h.param_a, "research_id"),
        resource_type=lookup_enum(ResourceType, h.param_b),
        effect=value,
    )


def _disable_research(h: _EffectHeader) -> Effect:
    # The id lives in the float param, not in the i16 params
    return DisableResearch(research_id=required_id(_float_to_i32(h.param_d), "research_id"))


def _gain_research(h: _EffectHeader) -> Effect:
    return GainResearch(research_id=required_id(h.param_a, "research_id"))


# Evaluated top to bottom; the first matching predicate wins.
_EFFECT_RULES: list[tuple[Callable[[_EffectHeader], bool], Callable[[_EffectHeader], Effect]]] = [
    (lambda h: h.type_id in (0, 4, 5), _unit_attribute),
    (lambda h: h.type_id == 1 and h.param_b in (0, 1), _civ_header),
    (lambda h: h.type_id == 6, _civ_header_multiply),
    (lambda h: h.type_id == 2, _set_unit_enabled),
    (lambda h: h.type_id == 3, _upgrade_unit),
    (lambda h: h.type_id == 101 and h.param_c in (0, 1), _research_cost),
    (lambda h: h.type_id == 102, _disable_research),
    (lambda h: h.type_id == 103, _gain_research),
]


def dispatch_effect(header: _EffectHeader) -> Effect:
    """Build the effect variant for an already-read header."""
    for predicate, build in _EFFECT_RULES:
        if predicate(header):
            return build(header)
    return Unknown(*header)


# -- Readers -----------------------------------------------------------------

def read_effect(reader: StreamReader) -> Effect:
    header = _EffectHeader(*_EFFECT_HEADER.unpack(reader.read_bytes(_EFFECT_HEADER.size)))
    return dispatch_effect(header)


def read_age(reader: StreamReader) -> EffectGroup:
    name = reader.read_fixed_string(AGE_NAME_LENGTH)
    effect_count = reader.read_u16()
    effects = reader.read_array(effect_count, read_effect)
    return EffectGroup(id=0, name=name, effects=effects)


def read_ages(reader: StreamReader) -> list[EffectGroup]:
    """Read the age table. Ids are the position in the table, not stored values."""
    age_count = reader.read_u32()
    ages = reader.read_array(age_count, read_age)
    for index, age in enumerate(ages):
        age.id = index
    return ages
