import subprocess
from unittest.mock import call

import pytest

from dockdash.backend import GatewayError, RuntimeGateway
from dockdash.model import ActionResult, OpKind

LISTING = "\n".join([
    '{"ID":"abc123def4567890","Image":"nginx:latest","Names":"web","State":"running","Ports":"0.0.0.0:80->80/tcp"}',
    '{"ID":"def456abc1237890","Image":"postgres:16","Names":"db","State":"exited","Ports":""}',
])


def completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def mock_run(mocker):
    return mocker.patch("dockdash.backend.subprocess.run", return_value=completed())


class TestListContainers:
    def test_runs_listing_command(self, mock_run):
        mock_run.return_value = completed(stdout=LISTING)

        records = RuntimeGateway().list_containers()

        mock_run.assert_called_once_with(
            ["docker", "ps", "-a", "--format", "json"],
            check=False, capture_output=True, text=True, errors="replace",
        )
        assert [r.name for r in records] == ["web", "db"]
        assert records[0].state == "running"

    def test_custom_binary(self, mock_run):
        RuntimeGateway("podman").list_containers()
        assert mock_run.call_args[0][0][0] == "podman"

    def test_nonzero_exit_is_fatal(self, mock_run):
        mock_run.return_value = completed(returncode=1, stderr="Cannot connect to the Docker daemon")

        with pytest.raises(GatewayError, match="Cannot connect"):
            RuntimeGateway().list_containers()

    def test_spawn_failure_is_fatal(self, mock_run):
        mock_run.side_effect = FileNotFoundError("No such file or directory: 'docker'")

        with pytest.raises(GatewayError, match="could not run docker"):
            RuntimeGateway().list_containers()

    def test_empty_listing(self, mock_run):
        mock_run.return_value = completed(stdout="")
        assert RuntimeGateway().list_containers() == []

    def test_undecodable_output_is_replaced_not_raised(self, mock_run):
        # A lossy name still lists; the other records are unaffected
        mock_run.return_value = completed(stdout=LISTING.replace('"web"', '"w�b"'))

        records = RuntimeGateway().list_containers()

        assert mock_run.call_args.kwargs["errors"] == "replace"
        assert [r.name for r in records] == ["w�b", "db"]


class TestActions:
    def test_start_success(self, mock_run):
        result = RuntimeGateway().start_container("abc123def4567890")

        mock_run.assert_called_once_with(
            ["docker", "start", "abc123def4567890"],
            check=False, capture_output=True, text=True, errors="replace",
        )
        assert result == ActionResult(True, "Container abc123def456 started successfully")

    def test_start_failure_carries_runtime_error(self, mock_run):
        mock_run.return_value = completed(returncode=1, stderr="Error: no such container\n")

        result = RuntimeGateway().start_container("abc123def4567890")

        assert not result.ok
        assert result.message == "Failed to start container abc123def456: Error: no such container"

    def test_failure_without_output_reports_exit_status(self, mock_run):
        mock_run.return_value = completed(returncode=125)
        result = RuntimeGateway().stop_container("abc123def4567890")
        assert result.message == "Failed to stop container abc123def456: exit status 125"

    def test_stop_success(self, mock_run):
        result = RuntimeGateway().stop_container("abc123def4567890")
        assert result == ActionResult(True, "Container abc123def456 stopped successfully")

    def test_spawn_failure_becomes_failed_result(self, mock_run):
        mock_run.side_effect = PermissionError("denied")

        result = RuntimeGateway().start_container("abc123def4567890")

        assert not result.ok
        assert result.message.startswith("Failed to start container abc123def456")

    def test_remove_stops_first(self, mock_run):
        result = RuntimeGateway().remove_container("abc123def4567890")

        commands = [c[0][0] for c in mock_run.call_args_list]
        assert commands == [
            ["docker", "stop", "abc123def4567890"],
            ["docker", "rm", "abc123def4567890"],
        ]
        assert result == ActionResult(True, "Container abc123def456 deleted successfully")

    def test_remove_ignores_stop_failure(self, mock_run):
        mock_run.side_effect = [
            completed(returncode=1, stderr="container is not running"),
            completed(),
        ]
        result = RuntimeGateway().remove_container("abc123def4567890")
        assert result.ok

    def test_remove_failure_surfaced(self, mock_run):
        mock_run.side_effect = [completed(), completed(returncode=1, stderr="conflict")]
        result = RuntimeGateway().remove_container("abc123def4567890")
        assert result == ActionResult(False, "Failed to delete container abc123def456: conflict")

    @pytest.mark.parametrize("kind, verb", [
        (OpKind.START, "start"),
        (OpKind.STOP, "stop"),
    ])
    def test_run_action_dispatch(self, mock_run, kind, verb):
        RuntimeGateway().run_action(kind, "abc")
        assert mock_run.call_args == call(["docker", verb, "abc"], check=False, capture_output=True, text=True, errors="replace")

    def test_run_action_rejects_refresh(self, mock_run):
        with pytest.raises(ValueError):
            RuntimeGateway().run_action(OpKind.REFRESH, "abc")
