from __future__ import annotations

import json
import os
import unittest
from datetime import timedelta
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

import yaml

from retryer.config import ConfigError, RetrySettings, dump_example_settings, load_settings

CLEAN_ENV = {"RETRYER_MAX_RETRIES": "", "RETRYER_DELAY_SECONDS": ""}


class SettingsLoaderTests(unittest.TestCase):
    def test_load_settings_defaults(self) -> None:
        with patch.dict(os.environ, CLEAN_ENV, clear=False):
            settings = load_settings()

        self.assertEqual(settings.max_retries, 1)
        self.assertIsNone(settings.delay_seconds)
        self.assertIsNone(settings.delay)

    def test_yaml_section_is_read(self) -> None:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "retry.yaml"
            path.write_text("retry:\n  max_retries: 4\n  delay_seconds: 0.5\n", encoding="utf-8")

            with patch.dict(os.environ, CLEAN_ENV, clear=False):
                settings = load_settings(path)

        self.assertEqual(settings.max_retries, 4)
        self.assertEqual(settings.delay, timedelta(milliseconds=500))

    def test_toml_without_section_is_read(self) -> None:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "retry.toml"
            path.write_text("max_retries = 2\n", encoding="utf-8")

            with patch.dict(os.environ, CLEAN_ENV, clear=False):
                settings = load_settings(path)

        self.assertEqual(settings.max_retries, 2)

    def test_env_overrides_file_and_overrides_win(self) -> None:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "retry.json"
            path.write_text(json.dumps({"retry": {"max_retries": 2}}), encoding="utf-8")

            env = {"RETRYER_MAX_RETRIES": "7", "RETRYER_DELAY_SECONDS": "1.5"}
            with patch.dict(os.environ, env, clear=False):
                from_env = load_settings(path)
                overridden = load_settings(path, overrides={"retry.max_retries": 9})

        self.assertEqual(from_env.max_retries, 7)
        self.assertEqual(from_env.delay_seconds, 1.5)
        self.assertEqual(overridden.max_retries, 9)
        self.assertEqual(overridden.delay_seconds, 1.5)

    def test_invalid_values_raise_config_error(self) -> None:
        with patch.dict(os.environ, CLEAN_ENV, clear=False):
            with self.assertRaises(ConfigError):
                load_settings(overrides={"max_retries": -1})
            with self.assertRaises(ConfigError):
                load_settings(overrides={"retries": 3})

    def test_mixed_section_and_bare_override_keys(self) -> None:
        with patch.dict(os.environ, CLEAN_ENV, clear=False):
            settings = load_settings(overrides={"retry.max_retries": 3, "delay_seconds": 2.0})

        self.assertEqual(settings.max_retries, 3)
        self.assertEqual(settings.delay_seconds, 2.0)

    def test_file_section_merges_over_top_level_fields(self) -> None:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "retry.yaml"
            path.write_text(
                "delay_seconds: 0.25\nmax_retries: 1\nretry:\n  max_retries: 5\n",
                encoding="utf-8",
            )

            with patch.dict(os.environ, CLEAN_ENV, clear=False):
                settings = load_settings(path)

        self.assertEqual(settings.max_retries, 5)
        self.assertEqual(settings.delay_seconds, 0.25)

    def test_non_finite_delay_rejected(self) -> None:
        with patch.dict(os.environ, CLEAN_ENV, clear=False):
            for value in (float("inf"), float("nan")):
                with self.assertRaises(ConfigError):
                    load_settings(overrides={"delay_seconds": value})

    def test_bad_env_value_names_the_variable(self) -> None:
        env = {"RETRYER_MAX_RETRIES": "lots", "RETRYER_DELAY_SECONDS": ""}
        with patch.dict(os.environ, env, clear=False):
            with self.assertRaises(ConfigError) as caught:
                load_settings()

        message = str(caught.exception)
        self.assertIn("RETRYER_MAX_RETRIES", message)
        self.assertNotIn("<defaults>", message)

    def test_bad_override_names_overrides(self) -> None:
        with patch.dict(os.environ, CLEAN_ENV, clear=False):
            with self.assertRaises(ConfigError) as caught:
                load_settings(overrides={"max_retries": -2})

        self.assertIn("overrides", str(caught.exception))

    def test_missing_and_unsupported_files(self) -> None:
        with TemporaryDirectory() as tmpdir:
            with self.assertRaises(ConfigError):
                load_settings(Path(tmpdir) / "absent.yaml")

            ini = Path(tmpdir) / "retry.ini"
            ini.write_text("[retry]\n", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_settings(ini)

    def test_non_mapping_payload_rejected(self) -> None:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "retry.yaml"
            path.write_text("- 1\n- 2\n", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_settings(path)

    def test_dump_example_settings_yaml(self) -> None:
        with TemporaryDirectory() as tmpdir:
            dest = Path(tmpdir) / "example.yaml"
            dump_example_settings(dest)
            data = yaml.safe_load(dest.read_text(encoding="utf-8"))

        self.assertEqual(data["retry"], RetrySettings().model_dump())

    def test_dump_example_settings_rejects_toml(self) -> None:
        with TemporaryDirectory() as tmpdir:
            with self.assertRaises(ConfigError):
                dump_example_settings(Path(tmpdir) / "settings.toml")


if __name__ == "__main__":
    unittest.main()
