import tempfile
import unittest
from pathlib import Path

from server.static_files import guess_content_type, resolve_static_file


class ServerStaticFilesTests(unittest.TestCase):
    def test_resolve_static_file_returns_asset_inside_ui_root(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            ui_root = Path(temp_dir)
            app_js = ui_root / "app.js"
            app_js.write_text("console.log('ok');", encoding="utf-8")

            self.assertEqual(app_js.resolve(), resolve_static_file(ui_root, "/app.js"))

    def test_resolve_static_file_rejects_path_traversal(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            ui_root = root / "web_ui"
            ui_root.mkdir(parents=True, exist_ok=True)
            (root / "settings.json").write_text("{}", encoding="utf-8")

            self.assertIsNone(resolve_static_file(ui_root, "/../settings.json"))

    def test_resolve_static_file_rejects_hidden_entries(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            ui_root = Path(temp_dir)
            (ui_root / ".env").write_text("x", encoding="utf-8")

            self.assertIsNone(resolve_static_file(ui_root, "/.env"))

    def test_resolve_static_file_rejects_root_or_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            ui_root = Path(temp_dir)
            self.assertIsNone(resolve_static_file(ui_root, "/"))
            self.assertIsNone(resolve_static_file(ui_root, "/missing.css"))

    def test_guess_content_type_covers_bundled_assets(self) -> None:
        self.assertEqual("text/css; charset=utf-8", guess_content_type(Path("styles.css")))
        self.assertEqual(
            "text/javascript; charset=utf-8",
            guess_content_type(Path("app.js")),
        )
        self.assertEqual("audio/wav", guess_content_type(Path("chime.WAV")))

    def test_guess_content_type_falls_back_for_unknown_extensions(self) -> None:
        self.assertEqual(
            "application/octet-stream",
            guess_content_type(Path("blob.unknownbinaryextension")),
        )


if __name__ == "__main__":
    unittest.main()
