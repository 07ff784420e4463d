import os
import random
import tempfile
import unittest
from unittest.mock import patch

from tax_invoice.errors import ResourceError
from tax_invoice.storage import RenderWorkspace, TempFileNamer, discard_file


class TempFileNamerTests(unittest.TestCase):
    def test_token_is_millis_and_random_suffix(self) -> None:
        namer = TempFileNamer(clock=lambda: 1700000000.123, rng=random.Random(7))
        expected_suffix = random.Random(7).randint(0, 10**9)

        self.assertEqual(namer(), f"1700000000123-{expected_suffix}")

    def test_tokens_do_not_collide_within_the_same_millisecond(self) -> None:
        namer = TempFileNamer(clock=lambda: 1.0)

        tokens = {namer() for _ in range(200)}
        self.assertEqual(len(tokens), 200)


class RenderWorkspaceTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.upload_dir = os.path.join(self._tmp.name, "uploads")
        self.output_dir = os.path.join(self._tmp.name, "output")

    def test_files_are_named_by_token_and_removed_on_success(self) -> None:
        with RenderWorkspace(self.upload_dir, self.output_dir, "123-456") as workspace:
            logo_path = workspace.save_logo(b"png", ".png")
            with open(workspace.output_path, "wb") as handle:
                handle.write(b"%PDF")

            self.assertEqual(logo_path, os.path.join(self.upload_dir, "123-456.png"))
            self.assertEqual(workspace.output_path, os.path.join(self.output_dir, "Invoice_123-456.pdf"))
            self.assertTrue(os.path.exists(logo_path))

        self.assertEqual(os.listdir(self.upload_dir), [])
        self.assertEqual(os.listdir(self.output_dir), [])

    def test_files_are_removed_when_render_fails(self) -> None:
        with self.assertRaises(RuntimeError):
            with RenderWorkspace(self.upload_dir, self.output_dir, "boom") as workspace:
                workspace.save_logo(b"png", ".png")
                with open(workspace.output_path, "wb") as handle:
                    handle.write(b"partial")
                raise RuntimeError("surface failed")

        self.assertEqual(os.listdir(self.upload_dir), [])
        self.assertEqual(os.listdir(self.output_dir), [])

    def test_cleanup_failures_are_logged_not_raised(self) -> None:
        with self.assertLogs("tax_invoice.storage", level="WARNING") as logs:
            with patch("tax_invoice.storage.os.remove", side_effect=PermissionError("denied")):
                with RenderWorkspace(self.upload_dir, self.output_dir, "locked") as workspace:
                    workspace.save_logo(b"png", ".png")

        self.assertIn("Error cleaning up file", logs.output[0])

    def test_discard_file_ignores_missing_files(self) -> None:
        discard_file(os.path.join(self._tmp.name, "missing.pdf"))

    def test_discard_file_wraps_os_errors(self) -> None:
        with patch("tax_invoice.storage.os.remove", side_effect=IsADirectoryError("dir")):
            with self.assertRaises(ResourceError):
                discard_file(self._tmp.name)


if __name__ == "__main__":
    unittest.main()
