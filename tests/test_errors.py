"""Tests for the Engine error hierarchy."""

import json

import pytest

from docker_tenant.core.errors import (
    Conflict,
    EngineError,
    EngineUnavailable,
    NotFound,
    UnexpectedStatus,
)
from docker_tenant.core.schemas import EngineResponse


class TestEngineError:
    """Tests for EngineError."""

    def test_context(self):
        """Test status and response are kept together."""
        error = EngineError("Failed to start container abc", 304, {"message": "already started"})

        assert error.context == {"status": 304, "response": {"message": "already started"}}
        assert "Failed to start container abc" in str(error)
        assert "status=304" in str(error)

    def test_to_json(self):
        """Test the JSON rendering contains message and context."""
        error = EngineError("Failed to list images", 500, "boom")
        data = json.loads(error.to_json())

        assert data == {"message": "Failed to list images", "status": 500, "response": "boom"}

    @pytest.mark.parametrize(
        ("status", "error_cls"),
        [
            (404, NotFound),
            (409, Conflict),
            (500, EngineUnavailable),
            (503, EngineUnavailable),
            (304, UnexpectedStatus),
            (400, UnexpectedStatus),
            (200, UnexpectedStatus),
        ],
    )
    def test_from_response(self, status, error_cls):
        """Test the subclass follows the received status."""
        response = EngineResponse(status=status, body={"message": "nope"})
        error = EngineError.from_response("Failed to kill container abc", response)

        assert type(error) is error_cls
        assert isinstance(error, EngineError)
        assert error.status == status
        assert error.response == {"message": "nope"}
        assert error.message == "Failed to kill container abc"
