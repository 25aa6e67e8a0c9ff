"""Tests for the age / tech-effect decoder."""
import pytest

from chariotdata.dat.age import (
    Add,
    CivHeader,
    DisableResearch,
    EffectGroup,
    GainResearch,
    MultiplyBy,
    ResearchCost,
    SetTo,
    SetUnitEnabled,
    Unknown,
    UnitAttribute,
    UpgradeUnit,
    read_age,
    read_ages,
    read_effect,
)
from chariotdata.dat.enums import ResourceType, UnitAttributeId, UnknownCode
from chariotdata.dat.reader import StreamReader
from chariotdata.errors import MissingIdentifierError, TruncatedStreamError
from tests import builders


def decode(type_id, a=0, b=0, c=0, d=0.0):
    reader = StreamReader.from_bytes(builders.effect(type_id, a, b, c, d))
    result = read_effect(reader)
    assert reader.position == 11
    return result


class TestUnitAttribute:

    def test_set_hit_points(self):
        assert decode(0, a=5, b=-1, c=0, d=100.0) == UnitAttribute(
            target_unit_id=5,
            target_unit_class_id=None,
            attribute_id=UnitAttributeId.HIT_POINTS,
            effect=SetTo(100.0),
        )

    def test_operation_follows_type(self):
        assert decode(4, a=1, b=2, c=9, d=2.5).effect == Add(2.5)
        assert decode(5, a=1, b=2, c=9, d=0.5).effect == MultiplyBy(0.5)

    def test_class_target_without_unit(self):
        effect = decode(4, a=-1, b=6, c=12, d=1.0)
        assert effect.target_unit_id is None
        assert effect.target_unit_class_id == 6
        assert effect.attribute_id == UnitAttributeId.ATTACK_RANGE

    def test_unlisted_attribute_code_is_kept(self):
        assert decode(0, a=1, b=-1, c=2, d=1.0).attribute_id == UnknownCode(2)


class TestCivHeader:

    def test_set_and_add_by_param_b(self):
        assert decode(1, a=4, b=0, d=3.0) == CivHeader(4, SetTo(3.0))
        assert decode(1, a=4, b=1, d=3.0) == CivHeader(4, Add(3.0))

    def test_param_b_outside_guard_falls_back(self):
        assert decode(1, a=4, b=7, c=2, d=3.0) == Unknown(1, 4, 7, 2, 3.0)

    def test_type_6_always_multiplies(self):
        assert decode(6, a=4, b=9, d=1.5) == CivHeader(4, MultiplyBy(1.5))


class TestUnitEnabling:

    def test_enabled_only_when_param_b_is_one(self):
        assert decode(2, a=83, b=1) == SetUnitEnabled(83, True)
        assert decode(2, a=83, b=0) == SetUnitEnabled(83, False)
        assert decode(2, a=83, b=2) == SetUnitEnabled(83, False)

    def test_absent_target(self):
        assert decode(2, a=-1, b=1).target_unit_id is None

    def test_upgrade_unit(self):
        assert decode(3, a=73, b=74) == UpgradeUnit(73, 74)

    @pytest.mark.parametrize("a,b,field", [(-1, 74, "source_unit_id"), (73, -1, "target_unit_id")])
    def test_upgrade_unit_requires_both_ids(self, a, b, field):
        with pytest.raises(MissingIdentifierError) as exc:
            decode(3, a=a, b=b)
        assert exc.value.field_name == field


class TestResearch:

    def test_research_cost(self):
        assert decode(101, a=12, b=3, c=0, d=-50.0) == ResearchCost(
            12, ResourceType.GOLD, SetTo(-50.0)
        )
        assert decode(101, a=12, b=0, c=1, d=-50.0).effect == Add(-50.0)

    def test_research_cost_guard_falls_back(self):
        assert decode(101, a=12, b=3, c=2, d=1.0) == Unknown(101, 12, 3, 2, 1.0)

    def test_research_cost_unlisted_resource(self):
        assert decode(101, a=12, b=999, c=0).resource_type == UnknownCode(999)

    def test_disable_research_reads_float_param(self):
        # The i16 params are ignored entirely
        assert decode(102, a=1, b=2, c=3, d=42.0) == DisableResearch(42)

    def test_disable_research_truncates_toward_zero(self):
        assert decode(102, d=7.75) == DisableResearch(7)

    @pytest.mark.parametrize("param_d,research_id", [
        (float("nan"), 0),
        (1e10, 2**31 - 1),
        (float("inf"), 2**31 - 1),
        (-1e10, -(2**31)),
        (float("-inf"), -(2**31)),
        (-0.5, 0),
    ])
    def test_disable_research_conversion_limits(self, param_d, research_id):
        assert decode(102, d=param_d) == DisableResearch(research_id)

    def test_disable_research_absent_id(self):
        with pytest.raises(MissingIdentifierError):
            decode(102, d=-1.0)

    def test_gain_research(self):
        assert decode(103, a=55, b=-1, c=-1) == GainResearch(55)


class TestFallback:

    @pytest.mark.parametrize("type_id", [7, 100, 104, 127, -1, -128])
    def test_unrecognised_type(self, type_id):
        assert decode(type_id, a=1, b=2, c=3, d=4.0) == Unknown(type_id, 1, 2, 3, 4.0)


class TestAges:

    def test_ids_follow_table_position(self):
        data = builders.ages(
            builders.age("Stone Age", [builders.effect(2, 83, 1)]),
            builders.age("Tool Age", []),
            builders.age("Bronze Age", [builders.effect(103, 55), builders.effect(99)]),
        )
        reader = StreamReader.from_bytes(data)
        result = read_ages(reader)

        assert [a.id for a in result] == [0, 1, 2]
        assert [a.name for a in result] == ["Stone Age", "Tool Age", "Bronze Age"]
        assert result[2].effects == [GainResearch(55), Unknown(99, 0, 0, 0, 0.0)]
        assert reader.position == len(data)

    def test_single_age_layout(self):
        data = builders.age("Iron Age", [builders.effect(0, 1, -1, 0, 10.0)] * 3)
        reader = StreamReader.from_bytes(data)
        result = read_age(reader)
        assert len(result.effects) == 3
        assert reader.position == 31 + 2 + 3 * 11

    def test_empty_table(self):
        assert read_ages(StreamReader.from_bytes(builders.ages())) == []

    def test_decoding_is_repeatable(self):
        data = builders.ages(builders.age("Stone Age", [builders.effect(5, 1, 2, 9, 1.25)]))
        first = read_ages(StreamReader.from_bytes(data))
        second = read_ages(StreamReader.from_bytes(data))
        assert first == second
        assert first == [EffectGroup(0, "Stone Age", [UnitAttribute(
            1, 2, UnitAttributeId.ATTACK_STRENGTH, MultiplyBy(1.25))])]

    def test_truncated_effect_list(self):
        data = builders.ages(builders.age("Stone Age", [builders.effect(0)] * 2))
        with pytest.raises(TruncatedStreamError):
            read_ages(StreamReader.from_bytes(data[:-5]))

    def test_count_larger_than_table(self):
        data = builders.ages(builders.age("Stone Age", []))
        data = b"\x02" + data[1:]
        with pytest.raises(TruncatedStreamError):
            read_ages(StreamReader.from_bytes(data))
