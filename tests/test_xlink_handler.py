#!/usr/bin/env python3
import json
import os
import shutil
import sys
import unittest
from pathlib import Path

script_dir = Path(__file__).resolve().parent
project_root = script_dir.parent

sys.path.insert(0, str(project_root))
sys.path.insert(0, str(script_dir))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from settings import DEFAULT_SETTINGS, load_settings, save_settings
from file_handlers.factory import get_handler_for_data
from file_handlers.xlink import XLinkError, XLinkHeaderVariant
from file_handlers.xlink.xlink_handler import XLinkHandler
from tools.xlink_export import main as export_main
from xlink_builder import AssetSpec, TriggerSpec, minimal_builder


class _App:
    def __init__(self, **overrides):
        self.settings = dict(DEFAULT_SETTINGS)
        self.settings["xlink_hash_list_path"] = str(script_dir / "missing_hashes.txt")
        self.settings.update(overrides)


class TestXLinkHandler(unittest.TestCase):
    def setUp(self):
        self.out_dir = script_dir / "logs" / "xlink_handler"
        self.out_dir.mkdir(parents=True, exist_ok=True)
        b = minimal_builder(variant=XLinkHeaderVariant.SLinkNormal)
        b.users[0].assets.append(AssetSpec("Child", parent_index=0))
        b.users[0].always_triggers = [TriggerSpec(3)]
        self.data = b.build()

    def tearDown(self):
        shutil.rmtree(self.out_dir, ignore_errors=True)

    def _handler(self, **settings):
        handler = XLinkHandler()
        handler.app = _App(xlink_header_variant="SLinkNormal", **settings)
        return handler

    def test_factory(self):
        self.assertIsInstance(get_handler_for_data(self.data), XLinkHandler)
        with self.assertRaises(ValueError):
            get_handler_for_data(b"RIFF0000")

    def test_read_uses_settings(self):
        handler = self._handler()
        modified = []
        handler.modified_changed.connect(modified.append)
        handler.read(self.data)
        self.assertEqual(handler.header_variant, XLinkHeaderVariant.SLinkNormal)
        self.assertFalse(handler.big_endian)
        entry = handler.xlink.entries[0]
        self.assertEqual(entry.assets[0].children[0].name, "Child")
        self.assertFalse(handler.supports_editing())
        self.assertEqual(handler.rebuild(), self.data)
        self.assertEqual(modified, [])

    def test_read_error_propagates(self):
        handler = self._handler()
        with self.assertRaises(XLinkError):
            handler.read(self.data[:60])
        self.assertIsNone(handler.xlink)

    def test_export_entries(self):
        handler = self._handler(export_indent=0)
        handler.read(self.data)
        written = handler.export_entries(str(self.out_dir))
        self.assertEqual(written, [str(self.out_dir / f"{0x1234}.json")])
        with open(written[0], "r", encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual(data["Assets"][0]["Name"], "Root")
        self.assertEqual(data["AlwaysTriggers"][0]["Name"], "3")

    def test_viewer(self):
        from PySide6.QtWidgets import QApplication
        app = QApplication.instance() or QApplication([])
        handler = self._handler()
        handler.read(self.data)
        viewer = handler.create_viewer()
        self.assertIsNotNone(viewer)
        self.assertEqual(viewer.tree.topLevelItemCount(), 1)
        user_item = viewer.tree.topLevelItem(0)
        self.assertEqual(user_item.text(0), str(0x1234))
        labels = [user_item.child(i).text(0) for i in range(user_item.childCount())]
        self.assertEqual(labels, ["Assets", "Action Slots", "Properties", "Always Triggers"])
        self.assertEqual(user_item.child(0).child(0).text(0), "Root")
        viewer.deleteLater()
        app.processEvents()


class TestXLinkExportTool(unittest.TestCase):
    def setUp(self):
        self.work_dir = script_dir / "logs" / "xlink_export"
        self.work_dir.mkdir(parents=True, exist_ok=True)
        self.input_path = self.work_dir / "sample.belnk"
        self.input_path.write_bytes(minimal_builder().build())

    def tearDown(self):
        shutil.rmtree(self.work_dir, ignore_errors=True)

    def test_export(self):
        out = self.work_dir / "out"
        code = export_main([
            str(self.input_path), "--variant", "ELinkBOTW", "--out", str(out),
            "--hashes", str(script_dir / "missing_hashes.txt"),
        ])
        self.assertEqual(code, 0)
        self.assertTrue((out / f"{0x1234}.json").is_file())

    def test_not_xlink(self):
        bad = self.work_dir / "bad.bin"
        bad.write_bytes(b"\x00" * 16)
        self.assertEqual(export_main([str(bad), "--out", str(self.work_dir / "out")]), 1)

    def test_decode_failure(self):
        truncated = self.work_dir / "truncated.belnk"
        truncated.write_bytes(self.input_path.read_bytes()[:48])
        self.assertEqual(export_main([str(truncated), "--out", str(self.work_dir / "out")]), 1)

    def test_garbled_name(self):
        b = minimal_builder()
        b.raw_name("Garbled", b"\xff\xfeX")
        b.users[0].assets[0].name = "Garbled"
        garbled = self.work_dir / "garbled.belnk"
        garbled.write_bytes(b.build())
        self.assertEqual(export_main([str(garbled), "--out", str(self.work_dir / "out")]), 1)

    def test_missing_file(self):
        self.assertEqual(export_main([str(self.work_dir / "missing.belnk")]), 1)


class TestSettings(unittest.TestCase):
    def setUp(self):
        self.path = script_dir / "logs" / "xlink_settings.json"
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def tearDown(self):
        if self.path.exists():
            self.path.unlink()

    def test_missing_keys_get_defaults(self):
        self.path.write_text(json.dumps({"xlink_big_endian": True}), encoding="utf-8")
        settings = load_settings(str(self.path))
        self.assertTrue(settings["xlink_big_endian"])
        self.assertEqual(settings["xlink_header_variant"], DEFAULT_SETTINGS["xlink_header_variant"])

    def test_save_and_load(self):
        settings = dict(DEFAULT_SETTINGS, xlink_header_variant="SLinkBOTW")
        save_settings(settings, str(self.path))
        self.assertEqual(load_settings(str(self.path)), settings)

    def test_corrupt_file_falls_back(self):
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("settings", level="WARNING"):
            settings = load_settings(str(self.path))
        self.assertEqual(settings, DEFAULT_SETTINGS)


if __name__ == "__main__":
    unittest.main(verbosity=2)
