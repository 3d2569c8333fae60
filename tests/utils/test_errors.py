"""Testes de utils.errors (taxonomia e corpo de erro)."""

from __future__ import annotations

import pytest

from utils.errors import (
    ApiError,
    ConfigurationError,
    ExposerError,
    GroupInitError,
    HandlerError,
    InvalidValidationSchema,
    PayloadTooLarge,
    RemoteApiError,
    ResponseValidationFailed,
    UnknownApiError,
    ValidationFailed,
)


class TestStatusMapping:
    @pytest.mark.parametrize(
        ("error_cls", "status", "label"),
        [
            (ValidationFailed, 400, "Bad Request"),
            (PayloadTooLarge, 413, "Payload Too Large"),
            (ResponseValidationFailed, 512, "Bad Response"),
            (HandlerError, 599, "Handler Error"),
        ],
    )
    def test_default_status(self, error_cls: type[ApiError], status: int, label: str) -> None:
        error = error_cls("boom")
        assert error.status_code == status
        assert error.error == label
        assert error.to_dict() == {"statusCode": status, "error": label, "message": "boom"}

    def test_details_in_body(self) -> None:
        details = [{"field": "a", "message": "required", "type": "missing"}]
        assert ValidationFailed("bad", details=details).to_dict()["details"] == details

    def test_remote_error_keeps_server_status(self) -> None:
        error = RemoteApiError("teapot", status_code=418, error="I'm a teapot")
        assert error.status_code == 418
        assert error.error == "I'm a teapot"


class TestRegistrationErrors:
    def test_invalid_schema_message(self) -> None:
        error = InvalidValidationSchema("add", "calc", "bad fragment")
        assert str(error) == "Invalid exposed API add (from group calc): bad fragment"
        assert isinstance(error, ConfigurationError)

    def test_group_init_message(self) -> None:
        error = GroupInitError("db", RuntimeError("down"))
        assert str(error) == "Group db failed to initialize: down"
        assert isinstance(error, ExposerError)

    def test_unknown_api_is_lookup_error(self) -> None:
        assert issubclass(UnknownApiError, LookupError)
