"""Tests for console command strategies."""

from unittest.mock import MagicMock

import pytest

from docker_tenant.core.errors import EngineError, NotFound, UnexpectedStatus
from docker_tenant.core.schemas import EngineResponse
from docker_tenant.engine.commands import AttachCommand, ExecCommand


class TestExecCommand:
    """Tests for ExecCommand."""

    def test_success(self, transport):
        """Test exec create then detached start."""
        transport.post.side_effect = [
            EngineResponse(status=201, body={"Id": "e1"}),
            EngineResponse(status=200, body=None),
        ]

        ExecCommand(transport).run("abc", ["say", "hi"])

        create_call, start_call = transport.post.call_args_list
        assert create_call.args == ("containers/abc/exec",)
        assert create_call.kwargs["payload"] == {
            "Cmd": ["say", "hi"],
            "WorkingDir": "/server",
            "Tty": True,
            "AttachStdout": True,
        }
        assert start_call.args == ("exec/e1/start",)
        assert start_call.kwargs["payload"] == {"Detach": True, "Tty": True}

    def test_string_is_split_on_whitespace(self, transport):
        """Test a command string is split on whitespace with quotes kept as typed."""
        transport.post.side_effect = [
            EngineResponse(status=201, body={"Id": "e1"}),
            EngineResponse(status=200, body=None),
        ]

        ExecCommand(transport).run("abc", 'say "hello world"')

        payload = transport.post.call_args_list[0].kwargs["payload"]
        assert payload["Cmd"] == ['say', '"hello', 'world"']

    def test_apostrophe_in_command(self, transport):
        """Test unbalanced quotes in console text reach the Engine unchanged."""
        transport.post.side_effect = [
            EngineResponse(status=201, body={"Id": "e1"}),
            EngineResponse(status=200, body=None),
        ]

        ExecCommand(transport).run("abc", "say don't stop")

        payload = transport.post.call_args_list[0].kwargs["payload"]
        assert payload["Cmd"] == ["say", "don't", "stop"]

    def test_create_failure(self, transport):
        """Test a failed exec create stops before exec start."""
        transport.post.return_value = EngineResponse(status=404, body={"message": "gone"})

        with pytest.raises(NotFound) as exc_info:
            ExecCommand(transport).run("abc", "stop")

        assert transport.post.call_count == 1
        assert exc_info.value.message == "Failed to execute command on container abc"

    def test_create_without_id(self, transport):
        """Test a 201 exec create with no Id raises an EngineError."""
        transport.post.return_value = EngineResponse(status=201, body=None)

        with pytest.raises(UnexpectedStatus) as exc_info:
            ExecCommand(transport).run("abc", "stop")

        assert transport.post.call_count == 1
        assert exc_info.value.status == 201
        assert "abc" in exc_info.value.message

    def test_start_failure(self, transport):
        """Test exec start must answer 200."""
        transport.post.side_effect = [
            EngineResponse(status=201, body={"Id": "e1"}),
            EngineResponse(status=201, body=None),
        ]

        with pytest.raises(EngineError) as exc_info:
            ExecCommand(transport).run("abc", "stop")

        assert exc_info.value.status == 201
        assert "abc" in exc_info.value.message

    def test_name(self, transport):
        """Test the strategy name."""
        assert ExecCommand(transport).name == "exec"


class TestAttachCommand:
    """Tests for AttachCommand."""

    def test_sends_line(self, transport):
        """Test the command is sent with a newline and the socket closed."""
        socket = MagicMock()
        transport.open_socket.return_value = socket

        assert AttachCommand(transport).run("abc", "say hi") is True

        transport.open_socket.assert_called_once_with("containers/abc/attach/ws", {"stream": True})
        socket.send.assert_called_once_with("say hi\n")
        socket.close.assert_called_once_with()

    def test_sequence_is_joined(self, transport):
        """Test an argv list is typed as one line."""
        socket = MagicMock()
        transport.open_socket.return_value = socket

        AttachCommand(transport).run("abc", ["whitelist", "add", "steve"])

        socket.send.assert_called_once_with("whitelist add steve\n")

    def test_send_error_still_closes(self, transport):
        """Test the socket is closed when sending fails."""
        socket = MagicMock()
        socket.send.side_effect = ConnectionResetError("reset")
        transport.open_socket.return_value = socket

        with pytest.raises(ConnectionResetError):
            AttachCommand(transport).run("abc", "say hi")

        socket.close.assert_called_once_with()

    def test_name(self, transport):
        """Test the strategy name."""
        assert AttachCommand(transport).name == "attach"
