"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest

from assembly_utils.config import AppConfig, load_config, validate_services


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in [
        "ASU_ENVIRONMENT",
        "ROBOT_ENVIRONMENT",
        "ASU_WORKFLOW_URL",
        "ASU_FEDORA_URL",
        "ASU_SOLR_URL",
        "ASU_DOR_SERVICES_URL",
        "ASU_CONFIG_DIR",
    ]:
        monkeypatch.delenv(var, raising=False)


class TestAppConfig:
    """Tests for AppConfig dataclass."""

    def test_default_config(self):
        """Test default configuration values."""
        config = AppConfig()

        assert config.environment == "development"
        assert config.services.repository == "dor"
        assert config.paths.dor_workspace == Path("/dor/workspace")
        assert config.paths.assembly_workspace == Path("/dor/assembly")
        assert config.stacks.user == "lyberadmin"
        assert config.stacks.root == Path("/stacks")
        assert config.logging.level == "INFO"

    def test_environment_from_env(self, monkeypatch):
        monkeypatch.setenv("ROBOT_ENVIRONMENT", "test")
        assert AppConfig().environment == "test"

    def test_asu_environment_wins(self, monkeypatch):
        monkeypatch.setenv("ROBOT_ENVIRONMENT", "test")
        monkeypatch.setenv("ASU_ENVIRONMENT", "production")
        assert AppConfig().environment == "production"

    def test_service_url_from_env(self, monkeypatch):
        monkeypatch.setenv("ASU_SOLR_URL", "https://solr.example.edu/solr")
        assert AppConfig().services.solr_url == "https://solr.example.edu/solr"

    @pytest.mark.parametrize(
        ("environment", "host"),
        [("development", "stacks-dev"), ("test", "stacks-test"), ("production", "stacks"), ("staging", None)],
    )
    def test_stacks_host_by_environment(self, environment, host):
        config = AppConfig()
        config.environment = environment
        assert config.stacks_host == host

    def test_explicit_stacks_host(self):
        config = AppConfig()
        config.stacks.host = "stacks-local"
        assert config.stacks_host == "stacks-local"

    def test_is_production(self):
        config = AppConfig()
        assert not config.is_production
        config.environment = "production"
        assert config.is_production

    def test_from_yaml_missing_file(self, tmp_path):
        """Test loading from non-existent file returns defaults."""
        config = AppConfig.from_yaml(tmp_path / "nonexistent.yaml")

        assert config.environment == "development"

    def test_from_yaml_valid_file(self, tmp_path):
        """Test loading from valid YAML file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
environment: test

services:
  workflow_url: https://workflow.example.edu/workflow
  cert_file: /etc/certs/client.crt

paths:
  assembly_workspace: /custom/assembly

stacks:
  host: stacks-custom
""")
        config = AppConfig.from_yaml(config_file)

        assert config.environment == "test"
        assert config.services.workflow_url == "https://workflow.example.edu/workflow"
        assert config.services.cert_file == Path("/etc/certs/client.crt")
        assert config.paths.assembly_workspace == Path("/custom/assembly")
        assert config.paths.dor_workspace == Path("/dor/workspace")
        assert config.stacks_host == "stacks-custom"

    def test_unknown_keys_ignored(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("paths:\n  bogus: 1\nunknown_section:\n  a: b\n")
        config = AppConfig.from_yaml(config_file)
        assert not hasattr(config.paths, "bogus")

    def test_merge_environment_config(self, tmp_path):
        """Test merging environment-specific overrides."""
        base_config = tmp_path / "config.yaml"
        base_config.write_text("""
services:
  workflow_url: https://workflow-dev.example.edu/workflow
  solr_url: https://solr-dev.example.edu/solr
""")
        env_config = tmp_path / "production.yaml"
        env_config.write_text("""
services:
  workflow_url: https://workflow.example.edu/workflow
""")

        merged = AppConfig.from_yaml(base_config).merge_environment_config(env_config)

        assert merged.services.workflow_url == "https://workflow.example.edu/workflow"
        assert merged.services.solr_url == "https://solr-dev.example.edu/solr"

    def test_to_dict(self):
        """Test converting config to dictionary."""
        data = AppConfig()._to_dict()

        assert data["environment"] == "development"
        assert data["paths"]["dor_workspace"] == "/dor/workspace"
        assert "workflow_url" in data["services"]


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_config_default(self, tmp_path):
        """Test loading config with defaults when file missing."""
        config = load_config(global_config_path=tmp_path / "missing.yaml", config_dir=tmp_path)

        assert config.environment == "development"

    def test_environment_argument(self, tmp_path):
        config = load_config(global_config_path=tmp_path / "missing.yaml", environment="test", config_dir=tmp_path)
        assert config.environment == "test"
        assert config.stacks_host == "stacks-test"

    def test_load_config_with_environment_overrides(self, tmp_path):
        """Test environments/<env>.yaml is merged over the global config."""
        global_config = tmp_path / "config.yaml"
        global_config.write_text("environment: production\nservices:\n  solr_url: https://solr-dev/solr\n")
        env_dir = tmp_path / "environments"
        env_dir.mkdir()
        (env_dir / "production.yaml").write_text("services:\n  solr_url: https://solr-prod/solr\n")

        config = load_config(global_config_path=global_config)

        assert config.environment == "production"
        assert config.services.solr_url == "https://solr-prod/solr"

    def test_environment_config_not_found(self, tmp_path):
        global_config = tmp_path / "config.yaml"
        global_config.write_text("services:\n  solr_url: https://solr-dev/solr\n")

        config = load_config(global_config_path=global_config, environment="test")

        assert config.services.solr_url == "https://solr-dev/solr"

    def test_config_dir_search(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ASU_CONFIG_DIR", str(tmp_path))
        (tmp_path / "config.yaml").write_text("environment: test\n")

        assert load_config().environment == "test"


class TestValidateServices:
    def test_missing_endpoints(self):
        errors = validate_services(AppConfig())
        assert len(errors) == 3
        assert any("workflow_url" in e for e in errors)

    def test_valid(self, app_config):
        assert validate_services(app_config) == []

    def test_only_required_endpoints_checked(self):
        config = AppConfig()
        config.services.solr_url = "https://solr.example.edu/solr"

        assert validate_services(config, ["solr_url"]) == []
        assert validate_services(config, []) == []
        errors = validate_services(config, ["workflow_url"])
        assert errors == ["workflow_url not configured (set ASU_WORKFLOW_URL or in config file)"]
