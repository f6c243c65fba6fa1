import tempfile
import unittest
from pathlib import Path

from app_config_schema import UIServerSettings
from server.config import ServerConfigurationError, UIServerConfig


class UIServerConfigTests(unittest.TestCase):
    def test_from_settings_uses_bundled_ui(self) -> None:
        settings = UIServerSettings(enabled=True, host="127.0.0.1", port=8765)

        config = UIServerConfig.from_settings(settings)

        self.assertEqual(("web_ui", "index.html"), Path(config.index_file).parts[-2:])
        self.assertTrue(Path(config.index_file).is_file())
        self.assertEqual("/ws", config.websocket_path)
        self.assertEqual(Path(config.index_file).resolve().parent, config.ui_root)

    def test_from_settings_prefers_explicit_index_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            custom = Path(temp_dir) / "index.html"
            custom.write_text("<html></html>", encoding="utf-8")

            settings = UIServerSettings(
                enabled=True,
                host="127.0.0.1",
                port=8765,
                index_file=str(custom),
            )

            config = UIServerConfig.from_settings(settings)
            self.assertEqual(str(custom), config.index_file)

    def test_rejects_missing_index_file_when_enabled(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            settings = UIServerSettings(
                enabled=True,
                index_file=str(Path(temp_dir) / "missing.html"),
            )

            with self.assertRaises(ServerConfigurationError):
                UIServerConfig.from_settings(settings)

    def test_disabled_server_skips_index_validation(self) -> None:
        config = UIServerConfig(enabled=False, index_file="/nonexistent/index.html")
        self.assertFalse(config.enabled)

    def test_rejects_out_of_range_port(self) -> None:
        with self.assertRaises(ServerConfigurationError):
            UIServerConfig(enabled=False, port=0)
        with self.assertRaises(ServerConfigurationError):
            UIServerConfig(enabled=False, port=70000)

    def test_rejects_blank_host(self) -> None:
        with self.assertRaises(ServerConfigurationError):
            UIServerConfig(enabled=False, host="  ")


if __name__ == "__main__":
    unittest.main()
