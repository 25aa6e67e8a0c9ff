"""Lookup tables for integer-coded fields in empires.dat records."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TypeVar, Union

E = TypeVar("E", bound=IntEnum)


@dataclass(frozen=True, slots=True)
class UnknownCode:
    """A code with no entry in its lookup table, kept verbatim."""
    value: int


def lookup_enum(table: type[E], value: int) -> Union[E, UnknownCode]:
    """Return the enum member for `value`, or UnknownCode for unlisted codes."""
    try:
        return table(value)
    except ValueError:
        return UnknownCode(value)


class UnitAttributeId(IntEnum):
    """Unit attribute targeted by a tech effect (param_c of types 0/4/5)."""
    HIT_POINTS = 0
    LINE_OF_SIGHT = 1
    SIZE_RADIUS_1 = 3
    SIZE_RADIUS_2 = 4
    SPEED = 5
    ARMOR_STRENGTH = 8
    ATTACK_STRENGTH = 9
    RELOAD_TIME = 10
    ATTACK_ACCURACY = 11
    ATTACK_RANGE = 12
    WORK_RATE = 13
    RESOURCE_CARRY_CAPACITY = 14
    MISSILE_UNIT_ID = 16
    BUILDING_UPGRADE_LEVEL = 17
    MISSILE_ACCURACY_MODE = 19
    RESOURCE_COST = 100


class ResourceType(IntEnum):
    """Player resource / stockpile slot (param_b of type 101)."""
    FOOD = 0
    WOOD = 1
    STONE = 2
    GOLD = 3
    POPULATION_HEADROOM = 4
    CONVERSION_RANGE = 5
    CURRENT_AGE = 6
    RELICS_CAPTURED = 7
    TRADE_BONUS = 8
    TRADE_GOODS = 9
    TRADE_PRODUCTION = 10
    CURRENT_POPULATION = 11
    CORPSE_DECAY_TIME = 12
    REMARKABLE_DISCOVERY = 13
    RUINS_CAPTURED = 14
    MEAT_STORAGE = 15
    BERRY_STORAGE = 16
    FISH_STORAGE = 17
    TOTAL_UNITS_OWNED = 19
    UNITS_KILLED = 20
    RESEARCH_COUNT = 21
    MAP_EXPLORED_PERCENT = 22
    BONUS_POPULATION = 32
    FAITH = 34
    FAITH_RECHARGE_RATE = 35
    FARM_FOOD_AMOUNT = 36
    CIVILIAN_POPULATION = 37
    MILITARY_POPULATION = 40
    CONVERSIONS = 41
    STANDING_WONDERS = 42
    RAZINGS = 43
    KILL_RATIO = 44
    TRIBUTE_INEFFICIENCY = 46
    GOLD_MINING_PRODUCTIVITY = 47
