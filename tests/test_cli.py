"""Tests for CLI commands."""

from unittest.mock import patch

import pytest

from assembly_utils import __version__
from assembly_utils.cli import app
from assembly_utils.results import BatchReport, ItemResult


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("ASU_WORKFLOW_URL", "ASU_FEDORA_URL", "ASU_SOLR_URL", "ASU_ENVIRONMENT", "ROBOT_ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def patched_services(mock_services):
    with patch("assembly_utils.cli.Services.from_config", return_value=mock_services):
        yield mock_services


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_version(self, cli_runner):
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help(self, cli_runner):
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "cleanup" in result.stdout
        assert "staging-path" in result.stdout

    def test_robots_help(self, cli_runner):
        result = cli_runner.invoke(app, ["robots", "--help"])
        assert result.exit_code == 0
        assert "status" in result.stdout


class TestStagingPath:
    def test_bare(self, cli_runner):
        result = cli_runner.invoke(app, ["staging-path", "aa000aa0001"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "aa/000/aa/0001"

    def test_with_base(self, cli_runner):
        result = cli_runner.invoke(app, ["staging-path", "druid:aa000aa0001", "-b", "/tmp"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "/tmp/aa/000/aa/0001"

    def test_invalid(self, cli_runner):
        result = cli_runner.invoke(app, ["staging-path", "junk"])
        assert result.exit_code == 1


class TestDruidsFromLog:
    def test_completed(self, cli_runner, progress_log):
        result = cli_runner.invoke(app, ["druids-from-log", str(progress_log)])
        assert result.exit_code == 0
        assert result.stdout.split() == ["druid:bc006dj2846", "druid:bg598tg6338"]

    def test_failed(self, cli_runner, progress_log):
        result = cli_runner.invoke(app, ["druids-from-log", str(progress_log), "--failed"])
        assert result.exit_code == 0
        assert result.stdout.split() == ["druid:bh634sp8073"]


class TestServiceCommands:
    def test_missing_endpoints(self, cli_runner, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("environment: development\n")

        result = cli_runner.invoke(app, ["lookup", "revs-01", "-c", str(config_file)])

        assert result.exit_code == 1
        assert "workflow_url not configured" in result.stdout

    def test_lookup(self, cli_runner, sample_config, patched_services):
        patched_services.search.query_by_source_id.return_value = ["druid:aa000aa0001"]

        result = cli_runner.invoke(app, ["lookup", "revs-01", "-c", str(sample_config)])

        assert result.exit_code == 0
        assert "druid:aa000aa0001" in result.stdout

    def test_step_status(self, cli_runner, sample_config, patched_services):
        patched_services.workflow.get_workflow_status.return_value = "completed"

        result = cli_runner.invoke(
            app, ["step-status", "druid:aa000aa0001", "assemblyWF", "jp2-create", "-c", str(sample_config)]
        )

        assert result.exit_code == 0
        assert "completed" in result.stdout

    def test_workflow_status_from_log(self, cli_runner, sample_config, patched_services, progress_log, tmp_path):
        patched_services.workflow.get_workflow_status.return_value = "waiting"
        output = tmp_path / "report.csv"

        result = cli_runner.invoke(
            app, ["workflow-status", "--log", str(progress_log), "-o", str(output), "-c", str(sample_config)]
        )

        assert result.exit_code == 0
        assert len(output.read_text().splitlines()) == 3

    def test_reset_workflows_requires_steps(self, cli_runner, sample_config):
        result = cli_runner.invoke(app, ["reset-workflows", "druid:aa000aa0001", "-c", str(sample_config)])
        assert result.exit_code == 1
        assert "no steps" in result.stdout

    def test_reset_workflows_bad_step(self, cli_runner, sample_config):
        result = cli_runner.invoke(
            app, ["reset-workflows", "druid:aa000aa0001", "-s", "jp2-create", "-c", str(sample_config)]
        )
        assert result.exit_code == 1

    def test_reset_workflows(self, cli_runner, sample_config, patched_services):
        result = cli_runner.invoke(
            app,
            ["reset-workflows", "druid:aa000aa0001", "-s", "assemblyWF:jp2-create", "-c", str(sample_config)],
        )

        assert result.exit_code == 0
        assert "1 succeeded" in result.stdout
        patched_services.workflow.update_workflow_status.assert_called_once_with(
            "dor", "druid:aa000aa0001", "assemblyWF", "jp2-create", "waiting"
        )

    def test_batch_failure_exit_code(self, cli_runner, sample_config, patched_services):
        report = BatchReport(operation="republish", results=[ItemResult(druid="druid:aa000aa0001").fail("boom")])

        with patch("assembly_utils.cli.republish_metadata", return_value=report):
            result = cli_runner.invoke(app, ["republish", "druid:aa000aa0001", "-c", str(sample_config)])

        assert result.exit_code == 1
        assert "boom" in result.stdout

    def test_no_druids(self, cli_runner, sample_config, patched_services):
        result = cli_runner.invoke(app, ["republish", "-c", str(sample_config)])
        assert result.exit_code == 1
        assert "no druids" in result.stdout

    def test_unregister_failure(self, cli_runner, sample_config, patched_services):
        with patch("assembly_utils.cli.unregister", side_effect=[True, False]):
            result = cli_runner.invoke(
                app, ["unregister", "druid:aa000aa0001", "druid:aa000aa0002", "-c", str(sample_config)]
            )

        assert result.exit_code == 1
        assert "1 succeeded" in result.stdout

    def test_replace_datastream(self, cli_runner, sample_config, patched_services, tmp_path):
        content = tmp_path / "rights.xml"
        content.write_text("<rightsMetadata/>")
        patched_services.repository.datastream_content.return_value = "<old/>"

        result = cli_runner.invoke(
            app,
            ["replace-datastream", "rightsMetadata", str(content), "druid:aa000aa0001", "-c", str(sample_config)],
        )

        assert result.exit_code == 0
        patched_services.repository.save_datastream.assert_called_once_with(
            "druid:aa000aa0001", "rightsMetadata", "<rightsMetadata/>"
        )


class TestCleanupCommand:
    @pytest.fixture
    def staged(self, workspaces):
        _dor, assembly = workspaces
        content = assembly / "aa" / "000" / "aa" / "0001" / "aa000aa0001"
        content.mkdir(parents=True)
        return content

    def test_no_steps(self, cli_runner, sample_config, patched_services):
        result = cli_runner.invoke(app, ["cleanup", "druid:aa000aa0001", "-c", str(sample_config)])

        assert result.exit_code == 1
        assert "Cleanup aborted" in result.stdout
        patched_services.repository.delete.assert_not_called()

    def test_declined(self, cli_runner, sample_config, patched_services, staged):
        result = cli_runner.invoke(
            app, ["cleanup", "druid:aa000aa0001", "-s", "stage", "-c", str(sample_config)], input="n\n"
        )

        assert result.exit_code == 1
        assert staged.exists()

    def test_confirmed(self, cli_runner, sample_config, patched_services, staged):
        result = cli_runner.invoke(
            app, ["cleanup", "druid:aa000aa0001", "-s", "stage", "-c", str(sample_config)], input="y\nyes\n"
        )

        assert result.exit_code == 0
        assert not staged.exists()

    def test_dry_run(self, cli_runner, sample_config, patched_services, staged):
        result = cli_runner.invoke(
            app,
            ["cleanup", "druid:aa000aa0001", "-s", "stage", "--dry-run", "-c", str(sample_config)],
            input="y\ny\n",
        )

        assert result.exit_code == 0
        assert staged.exists()
        assert "deleting folder" in result.stdout


class TestRobotsCommands:
    def test_status(self, cli_runner):
        with patch("assembly_utils.cli.robot_status", return_value={"accessionWF": True, "assemblyWF": False}):
            result = cli_runner.invoke(app, ["robots", "status"])

        assert result.exit_code == 0
        assert "Accession robots are running" in result.stdout
        assert "Assembly robots are NOT running" in result.stdout

    def test_start(self, cli_runner, sample_config):
        result = cli_runner.invoke(app, ["robots", "start", "-c", str(sample_config)])

        assert result.exit_code == 0
        assert "ROBOT_ENVIRONMENT=development" in result.stdout
        assert "./bin/run_robot start" in result.stdout


class TestCleanupWithoutServices:
    """Local cleanup steps work without service endpoints configured."""

    @pytest.fixture
    def local_config(self, tmp_path, workspaces):
        dor, assembly = workspaces
        config_file = tmp_path / "local.yaml"
        config_file.write_text(
            f"""
environment: development
paths:
  dor_workspace: "{dor}"
  assembly_workspace: "{assembly}"
logging:
  level: WARNING
"""
        )
        return config_file

    def test_stage_without_endpoints(self, cli_runner, local_config, workspaces):
        _dor, assembly = workspaces
        content = assembly / "aa" / "000" / "aa" / "0001" / "aa000aa0001"
        content.mkdir(parents=True)

        result = cli_runner.invoke(
            app, ["cleanup", "druid:aa000aa0001", "-s", "stage", "-c", str(local_config)], input="y\ny\n"
        )

        assert result.exit_code == 0
        assert not content.exists()

    def test_dor_needs_endpoints(self, cli_runner, local_config):
        result = cli_runner.invoke(app, ["cleanup", "druid:aa000aa0001", "-s", "dor", "-c", str(local_config)])

        assert result.exit_code == 1
        assert "fedora_url not configured" in result.stdout
        assert "solr_url" not in result.stdout

    def test_dor_dry_run_without_endpoints(self, cli_runner, local_config):
        result = cli_runner.invoke(
            app,
            ["cleanup", "druid:aa000aa0001", "-s", "dor", "--dry-run", "-c", str(local_config)],
            input="y\ny\n",
        )

        assert result.exit_code == 0
        assert "deleting druid:aa000aa0001" in result.stdout
