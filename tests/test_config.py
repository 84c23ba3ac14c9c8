"""Unit tests for configuration management."""

import os
from dataclasses import FrozenInstanceError

import pytest

from docs_publisher.config import (
    DEFAULT_COMMIT_MESSAGE,
    PublisherConfig,
    parse_root_files,
)
from docs_publisher.exceptions import ConfigurationError
from docs_publisher.models import GitIdentity

ENV_PREFIXES = ("GIT_", "DOCS_", "LOG_")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable the config reads."""
    for key in os.environ.copy():
        if key.startswith(ENV_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestPublisherConfigDefaults:
    """Tests for PublisherConfig default values."""

    def test_default_values(self):
        config = PublisherConfig(identity=GitIdentity("a@example.com", "a"))

        assert config.root_files == ()
        assert config.ssh_key_path is None
        assert config.repo_path == "."
        assert config.source_extension == ".adoc"
        assert config.output_extension == ".html"
        assert config.image_extension == ".png"
        assert config.remote_name == "origin"
        assert config.commit_message == DEFAULT_COMMIT_MESSAGE
        assert config.log_level == "INFO"

    def test_config_is_immutable(self, make_config):
        config = make_config()

        with pytest.raises(FrozenInstanceError):
            config.remote_name = "upstream"

    def test_create_copies_root_files(self, make_config):
        root_files = ["a.adoc"]
        config = make_config(root_files=root_files)
        root_files.append("b.adoc")

        assert config.root_files == ("a.adoc",)


class TestParseRootFiles:
    """Tests for splitting DOCS_ROOT_FILES."""

    @pytest.mark.parametrize("value,expected", [
        (None, ()),
        ("", ()),
        ("index.adoc", ("index.adoc",)),
        ("index.adoc, guide.adoc,,", ("index.adoc", "guide.adoc")),
    ])
    def test_parse(self, value, expected):
        assert parse_root_files(value) == expected


class TestPublisherConfigFromEnv:
    """Tests for loading configuration from environment variables."""

    def test_from_env_with_defaults(self, clean_env):
        config = PublisherConfig.from_env()

        assert config.identity == GitIdentity(email=None, username=None)
        assert config.ssh_key_path is None
        assert config.root_files == ()
        assert config.remote_name == "origin"
        assert config.log_level == "INFO"

    def test_from_env_with_custom_values(self, clean_env, ssh_key):
        clean_env.setenv("GIT_USER_EMAIL", "doc-bot@example.com")
        clean_env.setenv("GIT_USER_NAME", "doc-bot")
        clean_env.setenv("GIT_PRIVATE_SSH_KEY_PATH", ssh_key)
        clean_env.setenv("DOCS_ROOT_FILES", "index.adoc,guide.adoc")
        clean_env.setenv("DOCS_REPO_PATH", "/srv/docs")
        clean_env.setenv("DOCS_OUTPUT_EXTENSION", ".htm")
        clean_env.setenv("DOCS_REMOTE", "upstream")
        clean_env.setenv("LOG_LEVEL", "debug")

        config = PublisherConfig.from_env()

        assert config.identity.email == "doc-bot@example.com"
        assert config.identity.username == "doc-bot"
        assert config.ssh_key_path == ssh_key
        assert config.root_files == ("index.adoc", "guide.adoc")
        assert config.repo_path == "/srv/docs"
        assert config.output_extension == ".htm"
        assert config.remote_name == "upstream"
        assert config.log_level == "DEBUG"
        config.validate()

    def test_overrides_win_over_environment(self, clean_env):
        clean_env.setenv("GIT_USER_EMAIL", "env@example.com")
        clean_env.setenv("DOCS_ROOT_FILES", "env.adoc")

        config = PublisherConfig.from_env(
            email="cli@example.com",
            username=None,
            root_files=("cli.adoc",),
        )

        assert config.identity.email == "cli@example.com"
        assert config.identity.username is None
        assert config.root_files == ("cli.adoc",)

    def test_empty_root_file_override_falls_back_to_env(self, clean_env):
        clean_env.setenv("DOCS_ROOT_FILES", "env.adoc")

        config = PublisherConfig.from_env(root_files=())

        assert config.root_files == ("env.adoc",)

    def test_from_env_file(self, clean_env, tmp_path, ssh_key):
        # load_dotenv writes to os.environ; register the keys so they are restored
        for key in ("GIT_USER_EMAIL", "GIT_USER_NAME", "GIT_PRIVATE_SSH_KEY_PATH"):
            clean_env.setenv(key, "placeholder")
            clean_env.delenv(key)

        env_file = tmp_path / ".env"
        env_file.write_text(
            "GIT_USER_EMAIL=file@example.com\n"
            "GIT_USER_NAME=file-bot\n"
            f"GIT_PRIVATE_SSH_KEY_PATH={ssh_key}\n"
        )

        config = PublisherConfig.from_env(env_file=str(env_file))

        assert config.identity == GitIdentity("file@example.com", "file-bot")
        assert config.ssh_key_path == ssh_key


class TestPublisherConfigValidation:
    """Tests for validate()."""

    def test_valid_config(self, make_config):
        make_config().validate()

    def test_identity_is_checked_before_key(self, make_config):
        config = make_config(email=None, ssh_key_path=None)

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        assert "email" in str(exc_info.value)

    def test_missing_key(self, make_config):
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(ssh_key_path="").validate()

        assert "GIT_PRIVATE_SSH_KEY_PATH" in str(exc_info.value)

    def test_key_must_be_a_file(self, make_config, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(ssh_key_path=str(tmp_path)).validate()

        assert "SSH key file not found" in str(exc_info.value)

    @pytest.mark.parametrize("field_name", [
        "source_extension", "output_extension", "image_extension",
    ])
    def test_extensions_need_a_dot(self, make_config, field_name):
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(**{field_name: "html"}).validate()

        assert field_name in str(exc_info.value)

    def test_empty_remote(self, make_config):
        with pytest.raises(ConfigurationError):
            make_config(remote_name="").validate()

    def test_invalid_log_level(self, make_config):
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(log_level="VERBOSE").validate()

        assert "Invalid log_level" in str(exc_info.value)
