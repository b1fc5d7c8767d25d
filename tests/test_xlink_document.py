#!/usr/bin/env python3
import json
import shutil
import sys
import unittest
from pathlib import Path

script_dir = Path(__file__).resolve().parent
project_root = script_dir.parent

sys.path.insert(0, str(project_root))
sys.path.insert(0, str(script_dir))

from file_handlers.xlink import ParamType, ParamValue, ValueKind, XLinkUserEntry, decode_xlink
from file_handlers.xlink.user_data import ContainerTable, UserDataHeader
from utils.hash_name_manager import HashNameManager
from xlink_builder import (
    AssetSpec, ContainerSpec, ParamSpec, TriggerSpec, direct_ref, minimal_builder,
)


def _sample_entry() -> XLinkUserEntry:
    b = minimal_builder()
    b.asset_params.extend([
        ParamSpec("Loop", ParamType.Bool, False),
        ParamSpec("Bone", ParamType.String, "Head"),
        ParamSpec("Count", ParamType.UInt32, 3),
    ])
    b.trigger_params.append(ParamSpec("Delay", ParamType.Float32, 0.0))
    user = b.users[0]
    user.assets = [
        AssetSpec("Switch"),
        AssetSpec("On", parent_index=0),
        AssetSpec("Off", parent_index=0),
    ]
    user.containers = [ContainerSpec(kind=0, start=1, end=2, watch_name="Power", watch_id=1, id=2)]
    user.num_asset = 2
    user.assets[1].condition_pos = b.add_switch_condition(1, local_enum_index=0)
    user.assets[2].param_pos = b.add_asset_params({0: direct_ref(b.add_direct_float(0.5))})
    user.action_triggers = [TriggerSpec(10, start_frame=2, end_frame=6)]
    user.actions = [("Attack", 0, 0)]
    user.action_slots = [("Upper", 0, 0)]
    user.properties = [("Power", 1, 0)]
    user.always_triggers = [TriggerSpec(11)]
    HashNameManager.instance().hash_list_path = str(script_dir / "missing_hashes.txt")
    return decode_xlink(b.build(), "ELinkBOTW").entries[0]


class TestXLinkDocument(unittest.TestCase):
    def setUp(self):
        self.entry = _sample_entry()
        self.out_dir = script_dir / "logs" / "xlink_document"
        self.out_dir.mkdir(parents=True, exist_ok=True)

    def tearDown(self):
        shutil.rmtree(self.out_dir, ignore_errors=True)

    def test_json_layout(self):
        data = json.loads(self.entry.to_json())
        self.assertEqual(set(data), {"Name", "Assets", "ActionSlots", "Properties", "AlwaysTriggers"})
        switch = data["Assets"][0]
        self.assertNotIn("Condition", switch)
        on, off = switch["Children"]
        self.assertEqual(on["Condition"]["Name"], "Power")
        self.assertEqual(on["Condition"]["Value"], 1)
        self.assertEqual(on["Condition"]["WatchPropertyID"], 1)
        self.assertIs(on["Condition"]["IsSolved"], False)
        self.assertEqual(off["Parameters"]["Volume"], 0.5)
        self.assertIs(off["Parameters"]["Loop"], False)

        trigger = data["ActionSlots"]["Upper"]["Actions"]["Attack"]["Triggers"][0]
        self.assertEqual(trigger["Name"], "10")
        self.assertEqual((trigger["StartFrame"], trigger["EndFrame"]), (2.0, 6.0))
        self.assertEqual(data["Properties"]["Power"], {"Triggers": []})
        self.assertNotIn("StartFrame", data["AlwaysTriggers"][0])

    def test_dict_round_trip(self):
        restored = XLinkUserEntry.from_dict(json.loads(self.entry.to_json()))
        self.assertEqual(restored, self.entry)

    def test_export_and_import(self):
        path = self.out_dir / "entry.json"
        self.entry.export_json(str(path), indent=4)
        self.assertTrue(path.read_text(encoding="utf-8").startswith("{\n    "))
        self.assertEqual(XLinkUserEntry.import_json(str(path)), self.entry)

    def test_param_value_from_scalar(self):
        self.assertEqual(ParamValue.from_scalar(True).kind, ValueKind.Bool)
        self.assertEqual(ParamValue.from_scalar(4).kind, ValueKind.UInt32)
        self.assertEqual(ParamValue.from_scalar(4.0).kind, ValueKind.Float32)
        self.assertEqual(ParamValue.from_scalar("a").kind, ValueKind.String)
        self.assertEqual(str(ParamValue(ValueKind.Bool, False)), "false")
        with self.assertRaises(TypeError):
            ParamValue.from_scalar(None)


class TestContainerLookup(unittest.TestCase):
    def test_first_overlapping_container_wins(self):
        usd = UserDataHeader(container_table=[
            ContainerTable(type=1, children_start_index=0, children_end_index=5),
            ContainerTable(type=0, children_start_index=3, children_end_index=4),
        ])
        self.assertEqual(usd.get_container(4).type, 1)
        self.assertEqual(usd.get_container(0).type, 1)
        self.assertIsNone(usd.get_container(6))

    def test_single_index_range(self):
        usd = UserDataHeader(container_table=[
            ContainerTable(type=2, children_start_index=2, children_end_index=2),
        ])
        self.assertIsNone(usd.get_container(1))
        self.assertEqual(usd.get_container(2).type, 2)


if __name__ == "__main__":
    unittest.main(verbosity=2)
