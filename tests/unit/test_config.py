import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "geometry"))
sys.path.insert(0, str(ROOT / "packages" / "raster"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from stagefit_core.config import AppConfig, load_config, save_config
from stagefit_geometry import FrameSize


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "missing.json"
            cfg = load_config(path)
            self.assertIsInstance(cfg, AppConfig)
            self.assertEqual((cfg.stage.width, cfg.stage.height), (480, 360))
            self.assertEqual(cfg.imports.output_content_type, "image/png")
            self.assertEqual(cfg.logging.level, "INFO")

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            cfg = load_config(path)
            cfg.stage.width = 640
            cfg.stage.height = 480
            cfg.imports.output_content_type = "image/jpeg"
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.stage_context().native_size, FrameSize(640, 480))
            self.assertEqual(reloaded.imports.output_content_type, "image/jpeg")

    def test_migrate_v1_shape(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"stage_native_size": [1280, 720]}), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.config_version, 2)
            self.assertEqual((cfg.stage.width, cfg.stage.height), (1280, 720))

    def test_invalid_values_are_normalized(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "config_version": 2,
                "stage": {"width": -5, "height": "tall"},
                "imports": {"output_content_type": "image/svg+xml"},
                "logging": {"keep_files": 0, "level": "chatty"},
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual((cfg.stage.width, cfg.stage.height), (480, 360))
            self.assertEqual(cfg.imports.output_content_type, "image/png")
            self.assertEqual(cfg.logging.keep_files, 2)
            self.assertEqual(cfg.logging.level, "INFO")

    def test_unreadable_file_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())


if __name__ == "__main__":
    unittest.main()
