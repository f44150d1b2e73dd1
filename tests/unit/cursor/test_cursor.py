"""Tests for one-level directory cursors over real and scripted backends."""

from __future__ import annotations

import errno
import os
import tempfile
import unittest
from pathlib import Path

from pathwalk import (
    CursorExhaustedError,
    DirectoryCursor,
    DirectoryEnumerator,
    DirectoryUnavailableError,
    PathSpec,
    RawEntry,
    RawListing,
    ScandirEnumerator,
    UnavailableReason,
    collect_entries,
)
from pathwalk.cursor import search_target
from pathwalk.enumerator import name_matches


class ScriptedListing(RawListing):
    def __init__(self, rows: list[RawEntry | OSError], backend: ScriptedEnumerator) -> None:
        self._rows = iter(rows)
        self._backend = backend
        self.closed = False

    def __next__(self) -> RawEntry:
        row = next(self._rows)
        if isinstance(row, OSError):
            raise row
        return row

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._backend.closed += 1


class ScriptedEnumerator(DirectoryEnumerator):
    """Returns canned rows per directory, ignoring the name pattern."""

    def __init__(self, rows: dict[str, list[RawEntry | OSError] | OSError]) -> None:
        self.rows = rows
        self.opened: list[tuple[str, str]] = []
        self.closed = 0

    def open(self, directory: str, name_pattern: str) -> RawListing:
        value = self.rows.get(directory)
        if value is None:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", directory)
        if isinstance(value, OSError):
            raise value
        self.opened.append((directory, name_pattern))
        return ScriptedListing(list(value), self)


class DirectoryCursorBackendTests(unittest.TestCase):
    def test_skips_dot_and_dotdot_folders_in_sequence(self) -> None:
        backend = ScriptedEnumerator(
            {
                "root/": [
                    RawEntry(".", is_folder=True),
                    RawEntry("..", is_folder=True),
                    RawEntry("a.txt", is_folder=False, size_bytes=3),
                    RawEntry("..", is_folder=True),
                    RawEntry("sub", is_folder=True),
                ]
            }
        )

        with DirectoryCursor(PathSpec("root/*"), backend) as cursor:
            rows = [(spec.raw, attributes.is_folder) for spec, attributes in cursor]

        self.assertEqual(rows, [("root/a.txt", False), ("root/sub", True)])
        self.assertEqual(backend.closed, 1)

    def test_dot_named_files_are_not_special(self) -> None:
        backend = ScriptedEnumerator({"root/": [RawEntry("..", is_folder=False)]})
        cursor = DirectoryCursor(PathSpec("root/*"), backend)
        self.assertTrue(cursor.exists())
        self.assertEqual(cursor.spec.file, "..")
        cursor.close()

    def test_only_special_entries_yields_empty_cursor(self) -> None:
        backend = ScriptedEnumerator({"root/": [RawEntry(".", True), RawEntry("..", True)]})
        cursor = DirectoryCursor.open(PathSpec("root/*"), backend)
        self.assertFalse(cursor)
        self.assertTrue(cursor.exhausted)
        self.assertEqual(backend.closed, 1)

    def test_advance_is_idempotent_after_exhaustion(self) -> None:
        backend = ScriptedEnumerator({"root/": [RawEntry("only.txt", False, 10)]})
        cursor = DirectoryCursor(PathSpec("root/*"), backend)
        spec, attributes = cursor.current()
        self.assertEqual(spec.raw, "root/only.txt")
        self.assertEqual(attributes.size_bytes, 10)

        self.assertFalse(cursor.advance())
        self.assertFalse(cursor.advance())
        self.assertFalse(cursor.advance())
        self.assertEqual(backend.closed, 1)
        with self.assertRaises(CursorExhaustedError):
            cursor.current()
        self.assertEqual(list(cursor), [])

    def test_folder_size_is_reported_as_zero(self) -> None:
        backend = ScriptedEnumerator({"root/": [RawEntry("sub", True, size_bytes=4096, modified_ns=7)]})
        cursor = DirectoryCursor(PathSpec("root/*"), backend)
        self.assertEqual(cursor.attributes.size_bytes, 0)
        self.assertEqual(cursor.attributes.modified_ns, 7)
        cursor.close()

    def test_abandoning_iteration_releases_handle(self) -> None:
        backend = ScriptedEnumerator({"root/": [RawEntry(f"f{i}", False) for i in range(5)]})
        with DirectoryCursor(PathSpec("root/*"), backend) as cursor:
            for _spec, _attributes in cursor:
                break
        self.assertEqual(backend.closed, 1)

    def test_read_failure_after_first_entry_hands_out_that_entry(self) -> None:
        backend = ScriptedEnumerator(
            {"root/": [RawEntry("a.txt", False), OSError(errno.EIO, "Input/output error"), RawEntry("b.txt", False)]}
        )
        seen: list[str] = []
        with self.assertRaises(DirectoryUnavailableError) as ctx:
            with DirectoryCursor(PathSpec("root/*"), backend) as cursor:
                for spec, _attributes in cursor:
                    seen.append(spec.file)

        self.assertEqual(seen, ["a.txt"])
        self.assertIs(ctx.exception.reason, UnavailableReason.OTHER)
        self.assertEqual(ctx.exception.path, "root/")
        self.assertEqual(backend.closed, 1)

    def test_unrepresentable_names_are_skipped(self) -> None:
        backend = ScriptedEnumerator(
            {
                "root/": [
                    RawEntry("bad|name", False),
                    RawEntry("what?.txt", False),
                    RawEntry("x\\y", False),
                    RawEntry("good", False),
                ]
            }
        )
        with self.assertLogs("pathwalk.cursor", level="WARNING"):
            with DirectoryCursor(PathSpec("root/*"), backend) as cursor:
                names = [spec.file for spec, _attributes in cursor]
        self.assertEqual(names, ["good"])

    def test_entries_keep_pattern_volume_and_directory(self) -> None:
        scanned = PathSpec("a:\\dir\\").native()
        backend = ScriptedEnumerator({scanned: [RawEntry("file.ext", False)]})
        with DirectoryCursor(PathSpec("a:\\dir\\*.ext"), backend) as cursor:
            spec = cursor.spec
        self.assertEqual(spec.split_full(), ("a:", "\\dir\\", "file", "ext"))

    def test_open_failure_is_classified(self) -> None:
        backend = ScriptedEnumerator(
            {
                "share/": OSError(errno.ENETUNREACH, "Network is unreachable"),
                "locked/": PermissionError(errno.EACCES, "Permission denied"),
            }
        )
        with self.assertRaises(DirectoryUnavailableError) as ctx:
            DirectoryCursor(PathSpec("share/*"), backend)
        self.assertTrue(ctx.exception.network_unreachable)

        with self.assertRaises(DirectoryUnavailableError) as ctx:
            DirectoryCursor(PathSpec("locked/*"), backend)
        self.assertIs(ctx.exception.reason, UnavailableReason.PERMISSION_DENIED)
        self.assertFalse(ctx.exception.network_unreachable)

        with self.assertRaises(DirectoryUnavailableError) as ctx:
            DirectoryCursor(PathSpec("missing/*"), backend)
        self.assertIs(ctx.exception.reason, UnavailableReason.NOT_FOUND)
        self.assertEqual(backend.closed, 0)


class SearchTargetTests(unittest.TestCase):
    def test_relative_pattern_scans_current_directory(self) -> None:
        self.assertEqual(search_target(PathSpec("*.py")), (".", "*.py"))

    def test_folder_shaped_pattern_scans_its_contents(self) -> None:
        self.assertEqual(search_target(PathSpec("src/")), ("src/", "*"))

    def test_dos_all_pattern_matches_names_without_dot(self) -> None:
        self.assertTrue(name_matches("Makefile", "*.*"))
        self.assertTrue(name_matches("README.MD", "*.md"))
        self.assertFalse(name_matches("README.MD", "*.md", case_sensitive=True))

    def test_brackets_match_literally(self) -> None:
        self.assertTrue(name_matches("report[1].txt", "report[1].txt"))
        self.assertTrue(name_matches("Report[1].TXT", "report[?].txt"))
        self.assertFalse(name_matches("report1.txt", "report[1].txt"))
        self.assertTrue(name_matches("a]b", "a]*", case_sensitive=True))


class DirectoryCursorFilesystemTests(unittest.TestCase):
    def test_lists_matching_children_of_real_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.txt").write_text("abc", encoding="utf-8")
            (root / "B.TXT").write_text("x", encoding="utf-8")
            (root / "c.py").write_text("", encoding="utf-8")
            (root / "sub").mkdir()

            with DirectoryCursor(PathSpec.from_parts("", tmp, "*.txt")) as cursor:
                found = {spec.file: attributes for spec, attributes in cursor}

            self.assertEqual(set(found), {"a.txt", "B.TXT"})
            self.assertEqual(found["a.txt"].size_bytes, 3)
            self.assertFalse(found["a.txt"].is_folder)
            self.assertIsNotNone(found["a.txt"].modified_ns)

            with DirectoryCursor(PathSpec.from_parts("", tmp, "*"), ScandirEnumerator()) as cursor:
                entries = {spec.raw: attributes.is_folder for spec, attributes in cursor}
            self.assertEqual(entries[os.path.join(tmp, "sub")], True)
            self.assertEqual(len(entries), 4)

    def test_case_sensitive_backend_filters_by_case(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "lower.txt").write_text("", encoding="utf-8")
            (Path(tmp) / "UPPER.TXT").write_text("", encoding="utf-8")

            pattern = PathSpec.from_parts("", tmp, "*.txt")
            with DirectoryCursor(pattern, ScandirEnumerator(case_sensitive=True)) as cursor:
                names = [spec.file for spec, _attributes in cursor]
            self.assertEqual(names, ["lower.txt"])

    def test_bracketed_name_finds_itself(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "report[1].txt").write_text("r", encoding="utf-8")
            (Path(tmp) / "report1.txt").write_text("r", encoding="utf-8")

            entries = collect_entries(PathSpec.from_parts("", tmp, "report[1].txt"))
            self.assertEqual([entry.spec.file for entry in entries], ["report[1].txt"])

    def test_missing_directory_raises_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            pattern = PathSpec.from_parts("", os.path.join(tmp, "nope"), "*")
            with self.assertRaises(DirectoryUnavailableError) as ctx:
                DirectoryCursor(pattern)
            self.assertIs(ctx.exception.reason, UnavailableReason.NOT_FOUND)
            self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_no_match_yields_empty_cursor(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "a.txt").write_text("", encoding="utf-8")
            cursor = DirectoryCursor(PathSpec.from_parts("", tmp, "*.rs"))
            self.assertFalse(cursor.exists())
            self.assertFalse(cursor.advance())


if __name__ == "__main__":
    unittest.main()
