"""Tests for configuration models and management."""

import json
import tempfile
import unittest
from pathlib import Path

from repo_manager.models.config import AppConfig, UserPreferences
from repo_manager.services.config_manager import ConfigManager
from repo_manager.utils.path_manager import PathManager


class TestUserPreferences(unittest.TestCase):
    """Test cases for UserPreferences model."""

    def test_default_preferences(self):
        """Test default preference values."""
        prefs = UserPreferences()

        self.assertEqual(prefs.repository_source, "rest")
        self.assertEqual(prefs.gh_executable, "gh")
        self.assertEqual(prefs.git_executable, "git")
        self.assertEqual(prefs.default_clone_dir, "")
        self.assertEqual(prefs.command_timeout, 120)
        self.assertEqual(prefs.status_timeout, 20)
        self.assertEqual(prefs.fetch_timeout, 60)
        self.assertEqual(prefs.pull_timeout, 120)
        self.assertEqual(prefs.request_timeout, 30)
        self.assertEqual(prefs.log_level, "INFO")

    def test_preferences_serialization(self):
        """Test preferences serialization and deserialization."""
        prefs = UserPreferences(
            repository_source="cli",
            gh_executable="/opt/gh",
            default_clone_dir="~/src",
            fetch_timeout=5,
        )

        data = prefs.to_dict()
        self.assertEqual(data["repository_source"], "cli")
        self.assertEqual(data["gh_executable"], "/opt/gh")
        self.assertEqual(data["fetch_timeout"], 5)

        self.assertEqual(UserPreferences.from_dict(data), prefs)

    def test_partial_dict_uses_defaults(self):
        prefs = UserPreferences.from_dict({"pull_timeout": 10})

        self.assertEqual(prefs.pull_timeout, 10)
        self.assertEqual(prefs.repository_source, "rest")
        self.assertEqual(prefs.status_timeout, 20)

    def test_wrong_type_rejected(self):
        with self.assertRaises(ValueError):
            UserPreferences.from_dict({"log_level": None})

    def test_clone_dir_default(self):
        self.assertEqual(
            UserPreferences().get_clone_dir(), PathManager.get_default_clone_dir()
        )

    def test_clone_dir_expands_user(self):
        prefs = UserPreferences(default_clone_dir="~/work")

        self.assertEqual(prefs.get_clone_dir(), Path.home() / "work")


class TestAppConfig(unittest.TestCase):
    """Test cases for AppConfig model."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.config_file = Path(self.temp_dir.name) / "app_config.json"

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_token_not_serialized(self):
        config = AppConfig(github_token="secret")

        data = config.to_dict()

        self.assertNotIn("github_token", data)
        self.assertNotIn("secret", json.dumps(data))
        self.assertNotIn("secret", repr(config))

    def test_load_missing_file_returns_defaults(self):
        config = AppConfig.load(self.config_file)

        self.assertEqual(config, AppConfig())

    def test_load_from_file(self):
        self.config_file.write_text(
            json.dumps(
                {"version": "1.0.0", "preferences": {"repository_source": "cli"}}
            ),
            encoding="utf-8",
        )

        config = AppConfig.load(self.config_file)

        self.assertEqual(config.preferences.repository_source, "cli")

    def test_load_invalid_json_returns_defaults(self):
        self.config_file.write_text("{not json", encoding="utf-8")

        with self.assertLogs("repo_manager.models.config", level="ERROR"):
            config = AppConfig.load(self.config_file)

        self.assertEqual(config, AppConfig())

    def test_load_non_object_returns_defaults(self):
        self.config_file.write_text("[1, 2]", encoding="utf-8")

        config = AppConfig.load(self.config_file)

        self.assertEqual(config.preferences, UserPreferences())

    def test_load_null_preferences_returns_defaults(self):
        self.config_file.write_text('{"preferences": null}', encoding="utf-8")

        with self.assertLogs("repo_manager.models.config", level="ERROR"):
            config = AppConfig.load(self.config_file)

        self.assertEqual(config.preferences, UserPreferences())

    def test_load_wrongly_typed_values_returns_defaults(self):
        for preferences in (
            {"log_level": None},
            {"repository_source": 3},
            {"fetch_timeout": "soon"},
            {"pull_timeout": True},
        ):
            with self.subTest(preferences=preferences):
                self.config_file.write_text(
                    json.dumps({"preferences": preferences}), encoding="utf-8"
                )

                config = AppConfig.load(self.config_file)

                self.assertEqual(config.preferences, UserPreferences())

    def test_apply_environment(self):
        config = AppConfig()

        config.apply_environment(
            {
                "GITHUB_TOKEN": " tok \n",
                "REPO_MANAGER_SOURCE": "CLI",
                "REPO_MANAGER_LOG_LEVEL": "debug",
            }
        )

        self.assertEqual(config.github_token, "tok")
        self.assertEqual(config.preferences.repository_source, "cli")
        self.assertEqual(config.preferences.log_level, "DEBUG")

    def test_empty_environment_keeps_file_values(self):
        config = AppConfig(preferences=UserPreferences(repository_source="cli"))

        config.apply_environment({"REPO_MANAGER_SOURCE": "  "})

        self.assertEqual(config.preferences.repository_source, "cli")
        self.assertEqual(config.github_token, "")


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.config_file = Path(self.temp_dir.name) / "app_config.json"

    def tearDown(self):
        self.temp_dir.cleanup()

    def write_preferences(self, **preferences):
        self.config_file.write_text(
            json.dumps({"preferences": preferences}), encoding="utf-8"
        )

    def test_config_loaded_lazily_with_environment(self):
        self.write_preferences(fetch_timeout=7)
        manager = ConfigManager(self.config_file, environ={"GITHUB_TOKEN": "abc"})

        config = manager.config

        self.assertEqual(config.preferences.fetch_timeout, 7)
        self.assertEqual(config.github_token, "abc")
        self.assertIs(manager.config, config)

    def test_bad_values_do_not_break_loading(self):
        self.write_preferences(log_level=None, repository_source="cli")
        manager = ConfigManager(self.config_file, environ={})

        config = manager.config

        self.assertEqual(config.preferences.log_level, "INFO")
        self.assertEqual(config.preferences.repository_source, "rest")
        self.assertEqual(manager.validate_config(config), [])

    def test_default_config_is_valid(self):
        self.assertEqual(ConfigManager.validate_config(AppConfig()), [])

    def test_validation_issues(self):
        config = AppConfig(
            preferences=UserPreferences(
                repository_source="graphql",
                git_executable="",
                status_timeout=-1,
                pull_timeout="soon",
                log_level="LOUD",
            )
        )

        issues = ConfigManager.validate_config(config)

        self.assertEqual(len(issues), 5)
        self.assertTrue(any("repository_source" in issue for issue in issues))
        self.assertTrue(any("status_timeout" in issue for issue in issues))
        self.assertTrue(any("pull_timeout" in issue for issue in issues))
        self.assertTrue(any("git_executable" in issue for issue in issues))
        self.assertTrue(any("log_level" in issue for issue in issues))

    def test_cli_source_requires_gh_executable(self):
        config = AppConfig(
            preferences=UserPreferences(repository_source="cli", gh_executable="")
        )

        self.assertEqual(len(ConfigManager.validate_config(config)), 1)

    def test_invalid_config_logged_on_load(self):
        self.write_preferences(repository_source="svn")
        manager = ConfigManager(self.config_file, environ={})

        with self.assertLogs("repo_manager.services.config_manager", level="WARNING"):
            manager.load_config()


if __name__ == "__main__":
    unittest.main()
