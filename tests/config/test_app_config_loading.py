import os
import sys
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

from app_config import (
    AppConfigurationError,
    load_app_config,
    load_user_config,
    resolve_config_path,
)


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class AppConfigLoadingTests(unittest.TestCase):
    def test_load_app_config_resolves_relative_paths(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            config_path = root / "config.toml"
            _write_text(
                config_path,
                textwrap.dedent(
                    """
                    [storage]
                    data_dir = "state"

                    [ui_server]
                    index_file = "web/index.html"
                    """
                ).strip(),
            )

            app_config = load_app_config(str(config_path), environ={})

            self.assertEqual(str(config_path), app_config.source_file)
            self.assertEqual(str((root / "state").resolve()), app_config.storage.data_dir)
            self.assertEqual(
                str((root / "web/index.html").resolve()),
                app_config.ui_server.index_file,
            )

    def test_load_app_config_reads_sections(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            _write_text(
                config_path,
                textwrap.dedent(
                    """
                    [timer]
                    work_minutes = 50
                    break_minutes = 10

                    [notifications]
                    sound_enabled = false
                    output_device = 2

                    [widget]
                    initial_x = 0
                    initial_y = 0

                    [logging]
                    level = "debug"
                    """
                ).strip(),
            )

            app_config = load_app_config(str(config_path), environ={})

        self.assertEqual(50, app_config.timer.work_minutes)
        self.assertEqual(10, app_config.timer.break_minutes)
        self.assertFalse(app_config.notifications.sound_enabled)
        self.assertEqual(2, app_config.notifications.output_device)
        self.assertEqual((0, 0), (app_config.widget.initial_x, app_config.widget.initial_y))
        self.assertEqual("DEBUG", app_config.logging.level)

    def test_missing_default_file_uses_built_in_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            cwd = Path(temp_dir)
            with patch("app_config.Path.cwd", return_value=cwd):
                app_config = load_app_config(environ={})

        self.assertEqual("", app_config.source_file)
        self.assertEqual(25, app_config.timer.work_minutes)
        self.assertEqual(5, app_config.timer.break_minutes)
        self.assertTrue(app_config.ui_server.enabled)

    def test_missing_explicit_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            missing = Path(temp_dir) / "nope.toml"
            with self.assertRaises(AppConfigurationError):
                load_app_config(str(missing), environ={})
            with self.assertRaises(AppConfigurationError):
                load_app_config(environ={"APP_CONFIG_FILE": str(missing)})

    def test_env_config_path_is_used(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "custom.toml"
            _write_text(config_path, "[timer]\nwork_minutes = 30\n")

            app_config = load_app_config(environ={"APP_CONFIG_FILE": str(config_path)})

        self.assertEqual(30, app_config.timer.work_minutes)

    def test_out_of_range_minutes_are_rejected(self) -> None:
        cases = {
            "work zero": "[timer]\nwork_minutes = 0\n",
            "work too long": "[timer]\nwork_minutes = 61\n",
            "break too long": "[timer]\nbreak_minutes = 31\n",
            "bool minutes": "[timer]\nwork_minutes = true\n",
            "negative tick": "[timer]\ntick_interval_seconds = -1\n",
        }
        for label, content in cases.items():
            with self.subTest(label=label), tempfile.TemporaryDirectory() as temp_dir:
                config_path = Path(temp_dir) / "config.toml"
                _write_text(config_path, content)
                with self.assertRaises(AppConfigurationError):
                    load_app_config(str(config_path), environ={})

    def test_invalid_values_are_rejected(self) -> None:
        cases = {
            "nested preferences file": '[storage]\npreferences_file = "a/b.json"\n',
            "zero widget": "[widget]\nwidget_width = 0\n",
            "unknown level": '[logging]\nlevel = "LOUD"\n',
            "section not table": 'timer = "fast"\n',
            "bad toml": "[timer\n",
        }
        for label, content in cases.items():
            with self.subTest(label=label), tempfile.TemporaryDirectory() as temp_dir:
                config_path = Path(temp_dir) / "config.toml"
                _write_text(config_path, content)
                with self.assertRaises(AppConfigurationError):
                    load_app_config(str(config_path), environ={})

    def test_load_app_config_rejects_user_id(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            _write_text(config_path, 'user_id = "student-1"\n')

            with self.assertRaises(AppConfigurationError) as context:
                load_app_config(str(config_path), environ={})

            self.assertIn("root.user_id", str(context.exception))

    def test_load_user_config_reads_environment(self) -> None:
        self.assertEqual(
            "student-1",
            load_user_config(environ={"STUDY_TRACKER_USER_ID": "  student-1 "}).user_id,
        )
        self.assertIsNone(load_user_config(environ={"STUDY_TRACKER_USER_ID": "  "}).user_id)
        self.assertIsNone(load_user_config(environ={}).user_id)

    def test_resolve_config_path_uses_bundle_fallback(self) -> None:
        with tempfile.TemporaryDirectory() as cwd_dir, tempfile.TemporaryDirectory() as bundle_dir:
            cwd = Path(cwd_dir)
            bundled_config = Path(bundle_dir) / "config.toml"
            _write_text(bundled_config, "[timer]\nwork_minutes = 45\n")

            with patch.dict(os.environ, {}, clear=True):
                with patch("app_config.Path.cwd", return_value=cwd):
                    with patch.object(sys, "_MEIPASS", bundle_dir, create=True):
                        resolved = resolve_config_path()

            self.assertEqual(bundled_config, resolved)


if __name__ == "__main__":
    unittest.main()
