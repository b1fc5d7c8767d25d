#!/usr/bin/env python3
import sys
import threading
import unittest
from pathlib import Path
from unittest import mock

script_dir = Path(__file__).resolve().parent
project_root = script_dir.parent

sys.path.insert(0, str(project_root))

from utils.hash_name_manager import HashNameManager
from utils.hash_util import compute_crc32


class TestHashNameManager(unittest.TestCase):
    def setUp(self):
        self.logs_dir = project_root / "tests" / "logs"
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def test_crc32(self):
        self.assertEqual(compute_crc32(""), 0)
        self.assertEqual(compute_crc32("hello"), 0x3610A686)

    def test_decimal_fallback(self):
        manager = HashNameManager(str(self.logs_dir / "no_such_list.txt"))
        self.assertIsNone(manager.find(1234))
        self.assertEqual(manager.lookup(1234), "1234")
        self.assertTrue(manager.loaded)

    def test_lookup_from_list(self):
        path = self.logs_dir / "hash_list.txt"
        path.write_text("Player\r\n\nNpc_Horse\n", encoding="utf-8")
        manager = HashNameManager(str(path))
        self.assertEqual(manager.lookup(compute_crc32("Player")), "Player")
        self.assertEqual(manager.lookup(compute_crc32("Npc_Horse")), "Npc_Horse")

    def test_changing_path_reloads(self):
        first = self.logs_dir / "hash_list_a.txt"
        second = self.logs_dir / "hash_list_b.txt"
        first.write_text("Alpha\n", encoding="utf-8")
        second.write_text("Beta\n", encoding="utf-8")
        manager = HashNameManager(str(first))
        self.assertEqual(manager.lookup(compute_crc32("Alpha")), "Alpha")
        manager.hash_list_path = str(second)
        self.assertFalse(manager.loaded)
        self.assertIsNone(manager.find(compute_crc32("Alpha")))
        self.assertEqual(manager.lookup(compute_crc32("Beta")), "Beta")

    def test_concurrent_first_use_loads_once(self):
        manager = HashNameManager("unused.txt")
        barrier = threading.Barrier(16)
        results = []

        def worker():
            barrier.wait()
            results.append(manager.lookup(7))

        with mock.patch.object(HashNameManager, "_build", return_value={7: "Seven"}) as build:
            threads = [threading.Thread(target=worker) for _ in range(16)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()
        self.assertEqual(build.call_count, 1)
        self.assertEqual(results, ["Seven"] * 16)

    def test_singleton(self):
        seen = []
        threads = [threading.Thread(target=lambda: seen.append(HashNameManager.instance())) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertTrue(all(m is seen[0] for m in seen))


if __name__ == "__main__":
    unittest.main(verbosity=2)
