"""Export decoded record trees as JSON."""
from __future__ import annotations

import dataclasses
import json
from enum import Enum

from chariotdata.dat.enums import UnknownCode

# Leading bytes of a binary blob shown in exports
_BYTES_PREVIEW = 16


def to_jsonable(obj):
    """Convert a decoded record tree into plain JSON-compatible values.

    Dataclasses become dicts tagged with their class name under "kind", so
    effect variants stay distinguishable. Fields declared with compare=False
    are left out.
    """
    if isinstance(obj, UnknownCode):
        return {"unknown": obj.value}
    if isinstance(obj, Enum):
        return obj.name
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        entry = {"kind": type(obj).__name__}
        for f in dataclasses.fields(obj):
            if f.compare:
                entry[f.name] = to_jsonable(getattr(obj, f.name))
        return entry
    if isinstance(obj, (bytes, bytearray)):
        return {"length": len(obj), "preview": bytes(obj[:_BYTES_PREVIEW]).hex()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(item) for item in obj]
    return obj


def export_json(records) -> str:
    """Export records as JSON string."""
    return json.dumps(to_jsonable(records), indent=2)
