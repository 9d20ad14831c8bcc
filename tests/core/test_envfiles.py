"""Tests for .env loading."""

import os

from ssm_document.core.envfiles import ENV_SELECTOR, env_file_name, load_dotenv, parse_env_file


class TestEnvFileName:
    def test_default(self, monkeypatch):
        monkeypatch.delenv(ENV_SELECTOR, raising=False)
        assert env_file_name() == ".env"

    def test_explicit_env(self):
        assert env_file_name("prod") == ".env.prod"

    def test_selector_variable(self, monkeypatch):
        monkeypatch.setenv(ENV_SELECTOR, "staging")
        assert env_file_name() == ".env.staging"


class TestParseEnvFile:
    def test_parses_common_forms(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text(
            "# comment\n"
            "\n"
            "PLAIN=value\n"
            "export EXPORTED=yes\n"
            'DOUBLE="quoted # not a comment"\n'
            "SINGLE='single'\n"
            "INLINE=value # trailing comment\n"
            "not a variable line\n"
        )
        assert parse_env_file(path) == {
            "PLAIN": "value",
            "EXPORTED": "yes",
            "DOUBLE": "quoted # not a comment",
            "SINGLE": "single",
            "INLINE": "value",
        }

    def test_spacing_and_invalid_keys(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text("SPACED = value\n1BAD=x\nBAD KEY=x\nEMPTY=\nURL=http://host/?a=b\n")
        assert parse_env_file(path) == {"SPACED": "value", "EMPTY": "", "URL": "http://host/?a=b"}


class TestLoadDotenv:
    def test_missing_file_is_fine(self, tmp_path):
        assert load_dotenv(tmp_path, env="") is None

    def test_does_not_override_existing(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SSM_TEST_EXISTING", "real")
        monkeypatch.delenv("SSM_TEST_NEW", raising=False)
        (tmp_path / ".env").write_text("SSM_TEST_EXISTING=file\nSSM_TEST_NEW=file\n")

        loaded = load_dotenv(tmp_path, env="")

        assert loaded == tmp_path / ".env"
        assert os.environ["SSM_TEST_EXISTING"] == "real"
        assert os.environ["SSM_TEST_NEW"] == "file"
        monkeypatch.delenv("SSM_TEST_NEW")

    def test_selected_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SSM_TEST_SELECTED", raising=False)
        (tmp_path / ".env").write_text("SSM_TEST_SELECTED=base\n")
        (tmp_path / ".env.prod").write_text("SSM_TEST_SELECTED=prod\n")

        load_dotenv(tmp_path, env="prod")

        assert os.environ["SSM_TEST_SELECTED"] == "prod"
        monkeypatch.delenv("SSM_TEST_SELECTED")
