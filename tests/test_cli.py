from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from tpbackup.cli import cli, parse_resources
from tpbackup.constants import RESOURCES
from tpbackup.core.config import OutputMode
from tpbackup.core.errors import ResourceBackupError
from tpbackup.core.models import BackupStats
from tpbackup.orchestration.orchestrator import BackupOutput

BASE_ARGS = ["backup", "--host", "acme.tpondemand.com", "-u", "admin", "-p", "s3cret"]
CLEAN_ENV = {"TPB_HOST": None, "TPB_USER": None, "TPB_PASSWORD": None, "TPB_LOG_LEVEL": None}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def run_backup_mock():
    output = BackupOutput(stats=BackupStats(resources_total=2, resources_done=2), mode=OutputMode.FILES, out_dir=Path("out"))
    with patch("tpbackup.orchestration.orchestrator.run_backup", new=AsyncMock(return_value=output)) as mock:
        yield mock


def test_resources_command(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["resources"], env=CLEAN_ENV)

    assert result.exit_code == 0
    assert result.output.splitlines() == list(RESOURCES)
    assert len(RESOURCES) == 67
    assert "Context" not in RESOURCES


def test_parse_resources() -> None:
    assert parse_resources(None) == RESOURCES
    assert parse_resources(" Bugs, Users ,,Tasks ") == ("Bugs", "Users", "Tasks")


def test_backup_files_mode(runner: CliRunner, run_backup_mock: AsyncMock) -> None:
    result = runner.invoke(cli, [*BASE_ARGS, "-r", "Bugs,Users", "--no-progress"], env=CLEAN_ENV)

    assert result.exit_code == 0, result.output
    (config,), _ = run_backup_mock.call_args
    assert config.mode is OutputMode.FILES
    assert config.resources == ("Bugs", "Users")
    assert config.out_dir == Path("./out")
    assert config.effective_concurrency == 5
    assert not config.progress
    assert config.client.endpoint == "https://acme.tpondemand.com/api/v1/"


def test_backup_reads_credentials_from_env(runner: CliRunner, run_backup_mock: AsyncMock) -> None:
    env = {"TPB_HOST": "env.tpondemand.com", "TPB_USER": "envuser", "TPB_PASSWORD": "envpass"}

    result = runner.invoke(cli, ["backup", "--stdout"], env=env)

    assert result.exit_code == 0, result.output
    (config,), _ = run_backup_mock.call_args
    assert config.client.host == "env.tpondemand.com"
    assert config.client.user == "envuser"
    assert config.mode is OutputMode.STDOUT
    assert config.effective_concurrency == 1
    assert config.resources == RESOURCES


def test_backup_archive_mode(runner: CliRunner, run_backup_mock: AsyncMock) -> None:
    result = runner.invoke(cli, [*BASE_ARGS, "--compress", "-o", "b.tar.gz", "--concurrency", "3"], env=CLEAN_ENV)

    assert result.exit_code == 0, result.output
    (config,), _ = run_backup_mock.call_args
    assert config.mode is OutputMode.ARCHIVE
    assert config.archive_path == Path("b.tar.gz")
    assert config.effective_concurrency == 3


@pytest.mark.parametrize(
    "extra",
    [
        ["--stdout", "--compress"],
        ["--stdout", "--out-dir", "x"],
        ["--compress", "--out-dir", "x"],
        ["--out", "b.tar.gz"],
        ["--concurrency", "0"],
    ],
)
def test_backup_rejects_conflicting_options(runner: CliRunner, run_backup_mock: AsyncMock, extra: list[str]) -> None:
    result = runner.invoke(cli, [*BASE_ARGS, *extra], env=CLEAN_ENV)

    assert result.exit_code == 2
    run_backup_mock.assert_not_called()


def test_backup_rejects_bad_host(runner: CliRunner, run_backup_mock: AsyncMock) -> None:
    result = runner.invoke(cli, ["backup", "--host", "bad host", "-u", "u", "-p", "p"], env=CLEAN_ENV)

    assert result.exit_code == 2
    assert "bad host" in result.output
    run_backup_mock.assert_not_called()


def test_backup_reports_failed_resource(runner: CliRunner) -> None:
    err = ResourceBackupError(["Bugs"], detail="ConnectError: connection reset")
    with patch("tpbackup.orchestration.orchestrator.run_backup", new=AsyncMock(side_effect=err)):
        result = runner.invoke(cli, BASE_ARGS, env=CLEAN_ENV)

    assert result.exit_code == 1
    assert "Bugs" in result.output


def test_backup_reports_output_error(runner: CliRunner) -> None:
    err = PermissionError(13, "Permission denied", "out")
    with patch("tpbackup.orchestration.orchestrator.run_backup", new=AsyncMock(side_effect=err)):
        result = runner.invoke(cli, BASE_ARGS, env=CLEAN_ENV)

    assert result.exit_code == 1
    assert "PermissionError" in result.output
    assert "Permission denied" in result.output


def test_backup_requires_host(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["backup", "-u", "u", "-p", "p"], env=CLEAN_ENV)

    assert result.exit_code == 2
    assert "--host" in result.output
