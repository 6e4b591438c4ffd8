"""CLI tests via click's CliRunner. The installer factory is patched out."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from subinstall.cli import main
from subinstall.errors import RemoteInstallError
from subinstall.models import InstallOutcome, InstallResult, PackageInstallRequest

VERSION_ID = "04t000000000001AAA"
REQUEST_ID = "0Hf000000000001AAA"


def _result(status: str, outcome: InstallOutcome) -> InstallResult:
    return InstallResult(
        request=PackageInstallRequest(
            Id=REQUEST_ID, Status=status, SubscriberPackageVersionKey=VERSION_ID,
        ),
        outcome=outcome,
    )


@pytest.fixture()
def fake_installer() -> MagicMock:
    installer = MagicMock()
    installer.install = AsyncMock(return_value=_result("SUCCESS", InstallOutcome.SUCCESS))
    installer.report = AsyncMock(return_value=_result("IN_PROGRESS", InstallOutcome.TIMED_OUT))
    return installer


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SUBINSTALL_INSTANCE_URL", "SUBINSTALL_ACCESS_TOKEN",
                 "SUBINSTALL_API_VERSION", "SUBINSTALL_TARGET"):
        monkeypatch.delenv(name, raising=False)


class TestHelp:
    def test_group_help(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "install" in result.output
        assert "report" in result.output

    def test_install_help(self) -> None:
        result = CliRunner().invoke(main, ["install", "--help"])
        assert result.exit_code == 0
        assert "--publishwait" in result.output
        assert "--noprompt" in result.output


class TestInstallCommand:
    def test_success(self, fake_installer: MagicMock, tmp_home: Path) -> None:
        with patch("subinstall.cli.install.build_installer", return_value=fake_installer) as factory:
            result = CliRunner().invoke(main, [
                "install", "--id", VERSION_ID, "--wait", "5", "--noprompt",
                "--securitytype", "AllUsers", "--target", "my-org", "--home", str(tmp_home),
            ])

        assert result.exit_code == 0, result.output
        assert f"Successfully installed package [{VERSION_ID}]" in result.output
        factory.assert_called_once()
        assert factory.call_args.kwargs["no_prompt"] is True
        options = fake_installer.install.call_args[0][0]
        assert options.version_id == VERSION_ID
        assert options.wait == 5
        assert options.security_type.value == "AllUsers"

    def test_json_output(self, fake_installer: MagicMock, tmp_home: Path) -> None:
        with patch("subinstall.cli.install.build_installer", return_value=fake_installer):
            result = CliRunner().invoke(main, [
                "install", "--id", VERSION_ID, "--json", "--home", str(tmp_home),
            ])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["status"] == "SUCCESS"
        assert payload["outcome"] == "success"
        assert payload["request"]["Id"] == REQUEST_ID

    def test_remote_error_exits_nonzero(self, fake_installer: MagicMock, tmp_home: Path) -> None:
        fake_installer.install = AsyncMock(
            side_effect=RemoteInstallError("Installation errors: \n1) bad field", ["bad field"]),
        )
        with patch("subinstall.cli.install.build_installer", return_value=fake_installer):
            result = CliRunner().invoke(main, [
                "install", "--id", VERSION_ID, "--home", str(tmp_home),
            ])

        assert result.exit_code == 1
        assert "ERROR: Installation errors:" in result.output

    def test_bad_choice_rejected(self, tmp_home: Path) -> None:
        result = CliRunner().invoke(main, [
            "install", "--id", VERSION_ID, "--upgradetype", "Purge", "--home", str(tmp_home),
        ])
        assert result.exit_code == 2

    def test_conflicting_flags_before_any_call(self, tmp_home: Path) -> None:
        with patch("subinstall.client.requests.request") as mock_request:
            result = CliRunner().invoke(main, [
                "install", "--id", VERSION_ID, "--package", "my-pkg", "--home", str(tmp_home),
            ])

        assert result.exit_code == 1
        assert "Include either a --id (-i) value or a --package value." in result.output
        mock_request.assert_not_called()


class TestReportCommand:
    def test_pending(self, fake_installer: MagicMock, tmp_home: Path) -> None:
        with patch("subinstall.cli.install.build_installer", return_value=fake_installer):
            result = CliRunner().invoke(main, [
                "report", "--id", REQUEST_ID, "--target", "my-org", "--home", str(tmp_home),
            ])

        assert result.exit_code == 0, result.output
        assert "currently IN_PROGRESS" in result.output
        fake_installer.report.assert_awaited_once_with(REQUEST_ID, wait=None)

    def test_id_required(self) -> None:
        result = CliRunner().invoke(main, ["report"])
        assert result.exit_code == 2


class TestConfigShow:
    def test_masks_token(self, tmp_home: Path) -> None:
        (tmp_home / "config.yaml").write_text(
            "instance_url: https://example.my.salesforce.com\naccess_token: supersecrettoken\n",
        )
        result = CliRunner().invoke(main, ["config", "show", "--home", str(tmp_home)])

        assert result.exit_code == 0, result.output
        assert "https://example.my.salesforce.com" in result.output
        assert "supersecrettoken" not in result.output
        assert "supe" in result.output
