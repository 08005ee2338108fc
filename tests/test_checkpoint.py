import json
import tempfile
import unittest
from pathlib import Path

from mgn_deployer.checkpoint import CheckpointStore
from mgn_deployer.errors import CheckpointCorruptError, PersistFailedError


class CheckpointStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.store = CheckpointStore(self.root / "output", "CoreOutput-{environment}.json")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_path_is_environment_scoped(self) -> None:
        self.assertEqual(self.store.path_for("10143").name, "CoreOutput-10143.json")
        self.assertNotEqual(self.store.path_for("10143"), self.store.path_for("8408"))

    def test_load_creates_empty_file_on_first_run(self) -> None:
        record = self.store.load("31337")
        self.assertEqual(record, {})
        path = self.store.path_for("31337")
        self.assertTrue(path.exists())
        self.assertEqual(json.loads(path.read_text(encoding="utf-8")), {})

    def test_save_replaces_whole_document(self) -> None:
        self.store.save("31337", {"MGN": "0x01", "voter": "0x02"})
        self.store.save("31337", {"router": "0x03"})
        self.assertEqual(self.store.load("31337"), {"router": "0x03"})

    def test_save_leaves_no_temp_files(self) -> None:
        self.store.save("31337", {"MGN": "0x01"})
        self.store.save("31337", {"MGN": "0x01", "voter": "0x02"})
        files = sorted(p.name for p in (self.root / "output").iterdir())
        self.assertEqual(files, ["CoreOutput-31337.json"])

    def test_has_requires_non_empty_identifier(self) -> None:
        record = {"MGN": "0x01", "voter": ""}
        self.assertTrue(self.store.has(record, "MGN"))
        self.assertFalse(self.store.has(record, "voter"))
        self.assertFalse(self.store.has(record, "minter"))

    def test_load_drops_invalid_entries(self) -> None:
        path = self.store.path_for("31337")
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"MGN": "0x01", "voter": "", "minter": 5}), encoding="utf-8")
        self.assertEqual(self.store.load("31337"), {"MGN": "0x01"})

    def test_corrupt_file_is_fatal_and_untouched(self) -> None:
        path = self.store.path_for("31337")
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(CheckpointCorruptError):
            self.store.load("31337")
        self.assertEqual(path.read_text(encoding="utf-8"), "{not json")

    def test_non_object_document_is_rejected(self) -> None:
        path = self.store.path_for("31337")
        path.parent.mkdir(parents=True)
        path.write_text("[1, 2]", encoding="utf-8")
        with self.assertRaises(CheckpointCorruptError):
            self.store.load("31337")

    def test_save_failure_raises_persist_failed(self) -> None:
        blocker = self.root / "blocked"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        store = CheckpointStore(blocker, "CoreOutput-{environment}.json")
        with self.assertRaises(PersistFailedError):
            store.save("31337", {"MGN": "0x01"})

    def test_load_tolerates_unwritable_location(self) -> None:
        blocker = self.root / "blocked"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        store = CheckpointStore(blocker, "CoreOutput-{environment}.json")
        self.assertEqual(store.load("31337"), {})

    def test_discard_removes_named_entries(self) -> None:
        self.store.save("31337", {"MGN": "0x01", "router": "0x02"})
        removed = self.store.discard("31337", ["router", "missing"])
        self.assertEqual(removed, ["router"])
        self.assertEqual(self.store.load("31337"), {"MGN": "0x01"})


if __name__ == "__main__":
    unittest.main()
