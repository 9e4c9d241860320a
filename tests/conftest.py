"""Shared pytest fixtures for assembly-utils tests."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests
from typer.testing import CliRunner

from assembly_utils.config import AppConfig
from assembly_utils.services import RepositoryService, SearchService, Services, WorkflowService

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def progress_log():
    """Progress log with two finished records and one unfinished."""
    return DATA_DIR / "test_log.yaml"


@pytest.fixture
def workspaces(tmp_path):
    """Temporary DOR and assembly workspaces."""
    dor = tmp_path / "dor" / "workspace"
    assembly = tmp_path / "dor" / "assembly"
    dor.mkdir(parents=True)
    assembly.mkdir(parents=True)
    return dor, assembly


@pytest.fixture
def app_config(workspaces):
    """Development config pointing at temporary workspaces."""
    dor, assembly = workspaces
    config = AppConfig()
    config.environment = "development"
    config.paths.dor_workspace = dor
    config.paths.assembly_workspace = assembly
    config.services.workflow_url = "https://workflow.example.edu/workflow"
    config.services.fedora_url = "https://fedora.example.edu/fedora"
    config.services.solr_url = "https://solr.example.edu/solr"
    return config


@pytest.fixture
def sample_config(tmp_path, workspaces):
    """Create a sample config file."""
    dor, assembly = workspaces
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    config_file = config_dir / "config.yaml"
    config_file.write_text(
        f"""
environment: development

services:
  workflow_url: "https://workflow.example.edu/workflow"
  fedora_url: "https://fedora.example.edu/fedora"
  solr_url: "https://solr.example.edu/solr"

paths:
  dor_workspace: "{dor}"
  assembly_workspace: "{assembly}"

logging:
  level: WARNING
"""
    )
    return config_file


@pytest.fixture
def mock_services():
    """Services with every client mocked."""
    return Services(
        workflow=MagicMock(spec=WorkflowService),
        repository=MagicMock(spec=RepositoryService),
        search=MagicMock(spec=SearchService),
        repository_name="dor",
        stacks_host="stacks-dev",
    )


@pytest.fixture
def make_response():
    """Factory for fake requests.Response objects."""

    def _make(status_code: int = 200, content: bytes = b"", json_data=None, reason: str = "OK"):
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        response.ok = status_code < 400
        response.reason = reason
        response.content = content
        response.text = content.decode("utf-8")
        response.json.return_value = json_data
        return response

    return _make


@pytest.fixture
def mock_session():
    """A requests session whose request() is a mock."""
    return MagicMock(spec=requests.Session)
