"""
Decoded XLink document model.

A document is a list of XLinkUserEntry objects, one per user data header.
Each entry can be exported to JSON and imported back without the binary.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .xlink_types import ValueKind

Scalar = Union[int, float, bool, str]


@dataclass(frozen=True)
class ParamValue:
    kind: ValueKind
    value: Scalar

    @classmethod
    def from_scalar(cls, value: Scalar) -> "ParamValue":
        # bool first, bool is an int subclass
        if isinstance(value, bool):
            return cls(ValueKind.Bool, value)
        if isinstance(value, int):
            return cls(ValueKind.UInt32, value)
        if isinstance(value, float):
            return cls(ValueKind.Float32, value)
        if isinstance(value, str):
            return cls(ValueKind.String, value)
        raise TypeError(f"Unsupported parameter value: {value!r}")

    def __str__(self) -> str:
        if self.kind == ValueKind.Bool:
            return "true" if self.value else "false"
        return str(self.value)


def _params_to_dict(params: Dict[str, ParamValue]) -> Dict[str, Scalar]:
    return {name: p.value for name, p in params.items()}


def _params_from_dict(data: Dict[str, Scalar]) -> Dict[str, ParamValue]:
    return {name: ParamValue.from_scalar(v) for name, v in data.items()}


@dataclass
class XLinkConditionEntry:
    """Condition of an asset that lives inside a container."""
    type: int = 0
    weight: float = 0.0
    name: Optional[str] = None
    value: Optional[Scalar] = None
    watch_property_id: int = 0
    id: int = 0
    property_type: int = 0
    compare_type: int = 0
    is_solved: bool = False
    is_global: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Type": self.type,
            "Weight": self.weight,
            "Name": self.name,
            "Value": self.value,
            "WatchPropertyID": self.watch_property_id,
            "ID": self.id,
            "PropertyType": self.property_type,
            "CompareType": self.compare_type,
            "IsSolved": self.is_solved,
            "IsGlobal": self.is_global,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "XLinkConditionEntry":
        return cls(
            type=data.get("Type", 0),
            weight=data.get("Weight", 0.0),
            name=data.get("Name"),
            value=data.get("Value"),
            watch_property_id=data.get("WatchPropertyID", 0),
            id=data.get("ID", 0),
            property_type=data.get("PropertyType", 0),
            compare_type=data.get("CompareType", 0),
            is_solved=data.get("IsSolved", False),
            is_global=data.get("IsGlobal", False),
        )


@dataclass
class XLinkAssetEntry:
    name: str = ""
    parent_index: int = -1
    parameters: Dict[str, ParamValue] = field(default_factory=dict)
    condition: Optional[XLinkConditionEntry] = None
    children: List["XLinkAssetEntry"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "Name": self.name,
            "ParentIndex": self.parent_index,
            "Parameters": _params_to_dict(self.parameters),
        }
        if self.condition is not None:
            out["Condition"] = self.condition.to_dict()
        out["Children"] = [child.to_dict() for child in self.children]
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "XLinkAssetEntry":
        cond = data.get("Condition")
        return cls(
            name=data.get("Name", ""),
            parent_index=data.get("ParentIndex", -1),
            parameters=_params_from_dict(data.get("Parameters", {})),
            condition=XLinkConditionEntry.from_dict(cond) if cond is not None else None,
            children=[cls.from_dict(c) for c in data.get("Children", [])],
        )

    def walk(self):
        """Yield this asset and all of its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class XLinkTriggerEntry:
    name: str = ""
    parameters: Dict[str, ParamValue] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"Name": self.name, "Parameters": _params_to_dict(self.parameters)}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "XLinkTriggerEntry":
        params = _params_from_dict(data.get("Parameters", {}))
        if "StartFrame" in data or "EndFrame" in data:
            return XLinkTriggerActionEntry(
                name=data.get("Name", ""),
                parameters=params,
                start_frame=float(data.get("StartFrame", 0.0)),
                end_frame=float(data.get("EndFrame", 0.0)),
            )
        return XLinkTriggerEntry(name=data.get("Name", ""), parameters=params)


@dataclass
class XLinkTriggerActionEntry(XLinkTriggerEntry):
    start_frame: float = 0.0
    end_frame: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["StartFrame"] = self.start_frame
        out["EndFrame"] = self.end_frame
        return out


@dataclass
class XLinkAction:
    triggers: List[XLinkTriggerEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"Triggers": [t.to_dict() for t in self.triggers]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "XLinkAction":
        return cls(triggers=[XLinkTriggerEntry.from_dict(t) for t in data.get("Triggers", [])])


@dataclass
class XLinkActionSlot:
    actions: Dict[str, XLinkAction] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"Actions": {name: a.to_dict() for name, a in self.actions.items()}}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "XLinkActionSlot":
        return cls(actions={name: XLinkAction.from_dict(a) for name, a in data.get("Actions", {}).items()})


@dataclass
class XLinkProperty:
    triggers: List[XLinkTriggerEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"Triggers": [t.to_dict() for t in self.triggers]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "XLinkProperty":
        return cls(triggers=[XLinkTriggerEntry.from_dict(t) for t in data.get("Triggers", [])])


@dataclass
class XLinkUserEntry:
    name: str = ""
    assets: List[XLinkAssetEntry] = field(default_factory=list)
    action_slots: Dict[str, XLinkActionSlot] = field(default_factory=dict)
    properties: Dict[str, XLinkProperty] = field(default_factory=dict)
    always_triggers: List[XLinkTriggerEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Name": self.name,
            "Assets": [a.to_dict() for a in self.assets],
            "ActionSlots": {name: s.to_dict() for name, s in self.action_slots.items()},
            "Properties": {name: p.to_dict() for name, p in self.properties.items()},
            "AlwaysTriggers": [t.to_dict() for t in self.always_triggers],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "XLinkUserEntry":
        return cls(
            name=data.get("Name", ""),
            assets=[XLinkAssetEntry.from_dict(a) for a in data.get("Assets", [])],
            action_slots={n: XLinkActionSlot.from_dict(s) for n, s in data.get("ActionSlots", {}).items()},
            properties={n: XLinkProperty.from_dict(p) for n, p in data.get("Properties", {}).items()},
            always_triggers=[XLinkTriggerEntry.from_dict(t) for t in data.get("AlwaysTriggers", [])],
        )

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def export_json(self, path: str, indent: int = 2):
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_json(indent))

    @classmethod
    def import_json(cls, path: str) -> "XLinkUserEntry":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
