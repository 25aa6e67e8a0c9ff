"""Tests for file loading, section decoding and JSON export."""
import json
import zlib

import pytest

from chariotdata.dat.age import SetTo, UnitAttribute, read_ages
from chariotdata.dat.enums import UnitAttributeId, UnknownCode
from chariotdata.dat.graphic import GraphicDelta
from chariotdata.errors import DecodeError, SectionDecodeError, TruncatedStreamError
from chariotdata.export.json_export import export_json, to_jsonable
from chariotdata.loader import decode_section, inflate, open_data_file
from chariotdata.scn.player_data import PreviewThumbnail
from tests import builders


def deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(wbits=-15)
    return compressor.compress(data) + compressor.flush()


AGES = builders.ages(builders.age("Stone Age", [builders.effect(0, 5, -1, 0, 100.0)]))


class TestLoader:

    def test_inflate(self):
        assert inflate(deflate(b"empires")) == b"empires"

    def test_corrupt_deflate(self):
        with pytest.raises(DecodeError):
            inflate(b"\xff\xff\xff\xff")

    def test_open_compressed_file(self, tmp_path):
        path = tmp_path / "empires.dat"
        path.write_bytes(deflate(b"VER 3.7\x00" + AGES))
        reader = open_data_file(path)
        ages = decode_section("ages", read_ages, reader, offset=8)
        assert ages[0].name == "Stone Age"
        assert reader.remaining == 0

    def test_open_raw_file(self, tmp_path):
        path = tmp_path / "empires.raw"
        path.write_bytes(AGES)
        reader = open_data_file(path, inflate_payload=False)
        assert len(decode_section("ages", read_ages, reader)) == 1

    def test_failure_names_the_section(self, tmp_path):
        path = tmp_path / "empires.raw"
        path.write_bytes(AGES[:-1])
        reader = open_data_file(path, inflate_payload=False)
        with pytest.raises(SectionDecodeError) as exc:
            decode_section("ages", read_ages, reader)
        assert exc.value.family == "ages"
        assert isinstance(exc.value.cause, TruncatedStreamError)
        assert "Failed to decode ages" in str(exc.value)

    def test_offset_outside_data(self, tmp_path):
        path = tmp_path / "empires.raw"
        path.write_bytes(AGES)
        reader = open_data_file(path, inflate_payload=False)
        with pytest.raises(SectionDecodeError):
            decode_section("ages", read_ages, reader, offset=len(AGES) + 1)


class TestJsonExport:

    def test_effect_variants_are_tagged(self):
        effect = UnitAttribute(5, None, UnitAttributeId.HIT_POINTS, SetTo(100.0))
        assert to_jsonable(effect) == {
            "kind": "UnitAttribute",
            "target_unit_id": 5,
            "target_unit_class_id": None,
            "attribute_id": "HIT_POINTS",
            "effect": {"kind": "SetTo", "amount": 100.0},
        }

    def test_unknown_codes(self):
        assert to_jsonable(UnknownCode(2)) == {"unknown": 2}

    def test_hidden_fields_are_left_out(self):
        assert "display_angle" not in to_jsonable(GraphicDelta(1, 2, 3, 4))

    def test_bytes_are_summarised(self):
        thumb = to_jsonable(PreviewThumbnail(True, 2, 2, b"\x00\x01" * 20))
        assert thumb["pixel_data"]["length"] == 40
        assert thumb["pixel_data"]["preview"] == "0001" * 8

    def test_export_is_valid_json(self):
        text = export_json([UnitAttribute(None, 3, UnknownCode(77), SetTo(1.5))])
        assert json.loads(text)[0]["attribute_id"] == {"unknown": 77}
