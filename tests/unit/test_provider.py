"""
Unit tests for provider wiring: configuration, credential loading, the
type registry and the local YAML config file.
"""

import os
import sys

import pytest
import yaml
from google.auth.exceptions import DefaultCredentialsError

from gmailfilter import config
from gmailfilter.exceptions import ConfigurationError, ProviderNotConfiguredError, UnknownTypeError
from gmailfilter.framework import ProviderServer
from gmailfilter.gmail import is_not_found_error
from gmailfilter.provider import FilterResource, LabelDataSource, ProviderConfig, new

# Add parent directory to path to import conftest
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from conftest import http_error


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Point gmailfilter at an isolated config file (not created yet)."""
    path = tmp_path / "config.yaml"
    monkeypatch.setenv("GMAILFILTER_CONFIG_FILE", str(path))
    return path


def failing_loader():
    raise ConfigurationError("Application Default Credentials not available: none found")


class TestProviderConfigure:

    def test_configure_failure_is_reported(self):
        server = ProviderServer(new("test", config_loader=failing_loader))

        diags = server.configure_provider()

        [error] = diags.errors()
        assert error.summary == "Failed to configure provider"
        assert "Application Default Credentials" in error.detail
        assert not server.configured

    def test_unconfigured_server_refuses_remote_operations(self):
        server = ProviderServer(new("test", config_loader=failing_loader))
        server.configure_provider()

        with pytest.raises(ProviderNotConfiguredError):
            server.read_resource("gmailfilter_label", {"id": "L1", "name": "x"})
        with pytest.raises(ProviderNotConfiguredError):
            server.read_data_source("gmailfilter_label", {"name": "x"})

    def test_upgrade_does_not_need_configuration(self):
        server = ProviderServer(new("test", config_loader=failing_loader))
        legacy = {"id": "f1", "action": [{"forward": "a@example.com"}], "criteria": [{"to": "me"}]}

        result = server.upgrade_resource_state("gmailfilter_filter", legacy, 0)

        assert not result.diagnostics.has_error()
        assert result.state["action"]["forward"] == "a@example.com"

    def test_wrong_provider_data_type(self):
        diags = FilterResource().configure("not a ProviderConfig")
        assert diags.errors()[0].summary == "Unexpected Resource Configure Type"

        diags = LabelDataSource().configure(42)
        assert diags.errors()[0].summary == "Unexpected Data Source Configure Type"

    def test_configure_with_no_data_is_a_noop(self):
        resource = FilterResource()

        assert not resource.configure(None)
        assert resource.config is None


class TestRegistry:

    def test_types_are_registered_by_name(self, server):
        assert server.type_name == "gmailfilter"
        assert server.version == "test"
        assert server.resource_types == ["gmailfilter_filter", "gmailfilter_label"]
        assert server.data_source_types == ["gmailfilter_filter", "gmailfilter_label"]

    def test_unknown_type_raises(self, server):
        with pytest.raises(UnknownTypeError):
            server.resource_schema("gmailfilter_rule")
        with pytest.raises(UnknownTypeError):
            server.plan_resource_change("gmailfilter_rule", None, {})
        with pytest.raises(UnknownTypeError):
            server.read_data_source("gmailfilter_rule", {})

    def test_provider_schema_document(self, server):
        doc = server.get_provider_schema()

        filter_schema = doc["resource_schemas"]["gmailfilter_filter"]
        assert filter_schema["version"] == 1
        assert filter_schema["attributes"]["id"]["computed"] is True
        assert filter_schema["attributes"]["id"]["plan_modifiers"] == ["UseStateForUnknown"]
        assert filter_schema["blocks"]["action"]["plan_modifiers"] == ["RequiresReplace"]
        assert filter_schema["blocks"]["criteria"]["attributes"]["size"]["type"] == "int64"

        label_schema = doc["resource_schemas"]["gmailfilter_label"]
        assert label_schema["version"] == 0
        assert label_schema["attributes"]["name"]["required"] is True

        assert doc["data_source_schemas"]["gmailfilter_label"]["attributes"]["id"]["computed"] is True


class TestLoadAndValidate:

    def test_missing_credentials_raise_configuration_error(self, config_file, monkeypatch):
        def no_credentials(scopes=None):
            raise DefaultCredentialsError("Could not automatically determine credentials.")
        monkeypatch.setattr("google.auth.default", no_credentials)

        with pytest.raises(ConfigurationError, match="Application Default Credentials"):
            ProviderConfig.load_and_validate()

    def test_builds_service_from_config(self, config_file, monkeypatch):
        config_file.write_text(yaml.safe_dump({"gmail": {"user_id": "someone@example.com", "scopes": ["settings"]}}))
        requested = {}

        def fake_default(scopes=None):
            requested["scopes"] = scopes
            return object(), "my-project"
        monkeypatch.setattr("google.auth.default", fake_default)
        monkeypatch.setattr("gmailfilter.provider.client.get_gmail_service", lambda creds: "service")

        provider_config = ProviderConfig.load_and_validate()

        assert provider_config.gmail_service == "service"
        assert provider_config.user_id == "someone@example.com"
        assert "my-project" in provider_config.source
        assert requested["scopes"] == ["https://www.googleapis.com/auth/gmail.settings.basic"]

    def test_service_build_failure(self, config_file, monkeypatch):
        monkeypatch.setattr("google.auth.default", lambda scopes=None: (object(), None))

        def broken(creds):
            raise ValueError("discovery document unavailable")
        monkeypatch.setattr("gmailfilter.provider.client.get_gmail_service", broken)

        with pytest.raises(ConfigurationError, match="Failed to build Gmail service"):
            ProviderConfig.load_and_validate()


class TestNotFound:

    def test_only_404_counts_as_not_found(self):
        assert is_not_found_error(http_error(404, "Not Found"))
        assert not is_not_found_error(http_error(500, "Backend Error"))
        assert not is_not_found_error(ValueError("404"))


class TestConfigFile:

    def test_defaults_when_file_missing(self, config_file):
        assert config.load_config() == config.DEFAULT_CONFIG
        assert config.get_config_value("gmail.user_id") == "me"

    def test_partial_file_is_merged_with_defaults(self, config_file):
        config_file.write_text("gmail:\n  user_id: other@example.com\n")

        loaded = config.load_config()

        assert loaded["gmail"]["user_id"] == "other@example.com"
        assert loaded["gmail"]["scopes"] == config.DEFAULT_CONFIG["gmail"]["scopes"]

    def test_set_value_round_trips(self, config_file):
        config.set_config_value("gmail.scopes", ["labels"])

        assert config.get_config_value("gmail.scopes") == ["labels"]
        assert yaml.safe_load(config_file.read_text())["gmail"]["user_id"] == "me"

    def test_invalid_yaml_falls_back_to_defaults(self, config_file):
        config_file.write_text("gmail: [unclosed\n")

        assert config.load_config() == config.DEFAULT_CONFIG

    def test_non_mapping_file_falls_back_to_defaults(self, config_file):
        config_file.write_text("- just\n- a list\n")

        assert config.load_config() == config.DEFAULT_CONFIG
        assert config.get_config_value("gmail.user_id") == "me"

    def test_config_dir_env_var(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GMAILFILTER_CONFIG_FILE", raising=False)
        monkeypatch.setenv("GMAILFILTER_CONFIG_DIR", str(tmp_path))

        assert config.get_config_file_path() == tmp_path / "config.yaml"

    def test_missing_key_returns_default(self, config_file):
        assert config.get_config_value("gmail.nothing", "fallback") == "fallback"
