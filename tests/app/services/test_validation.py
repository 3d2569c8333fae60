"""Testes de app.services.validation (schemas pydantic de parâmetros e respostas)."""

from __future__ import annotations

from typing import Annotated
from unittest.mock import patch

import pytest
from pydantic import BaseModel, Field

from app.services.validation import (
    FULL_SAMPLE,
    NO_SAMPLE,
    SchemaDefinitionError,
    build_response_adapter,
    build_schema,
    parse_params,
    should_sample,
    validate_params,
    validate_response,
)
from utils.errors import ResponseValidationFailed, ValidationFailed


class Point(BaseModel):
    x: int
    y: int


class TestBuildSchema:
    """Montagem do modelo pydantic por parâmetro."""

    def test_one_field_per_name(self) -> None:
        schema = build_schema([int, str], ["a", "b"], label="fn")
        assert parse_params({"a": "1", "b": "x"}, schema, "fn", 2) == {"a": 1, "b": "x"}

    def test_missing_fragment_accepts_anything(self) -> None:
        schema = build_schema([int], ["a", "b"])
        assert parse_params({"a": 1, "b": [1, 2]}, schema, "fn", 2) == {"a": 1, "b": [1, 2]}
        assert parse_params({"a": 1}, schema, "fn", 2) == {"a": 1, "b": None}

    def test_bare_fragment_is_required(self) -> None:
        schema = build_schema([float], ["a"])
        with pytest.raises(ValidationFailed) as exc_info:
            parse_params({}, schema, "fn", 1)
        assert exc_info.value.details[0]["type"] == "missing"

    def test_tuple_fragment_has_default(self) -> None:
        schema = build_schema([int, (int, 10)], ["a", "b"])
        assert parse_params({"a": 1}, schema, "fn", 2) == {"a": 1, "b": 10}

    def test_annotated_constraints(self) -> None:
        schema = build_schema([Annotated[int, Field(gt=0)]], ["count"])
        with pytest.raises(ValidationFailed):
            parse_params({"count": 0}, schema, "fn", 1)

    def test_model_fragment(self) -> None:
        schema = build_schema([Point], ["point"])
        values = parse_params({"point": {"x": "1", "y": 2}}, schema, "fn", 1)
        assert values["point"] == Point(x=1, y=2)

    def test_more_fragments_than_names(self) -> None:
        with pytest.raises(SchemaDefinitionError, match="2 schemas for 1 parameter"):
            build_schema([int, int], ["a"])

    def test_fragments_must_be_sequence(self) -> None:
        with pytest.raises(SchemaDefinitionError, match="must be an array"):
            build_schema(int, ["a"])  # type: ignore[arg-type]

    def test_string_is_not_a_sequence_of_fragments(self) -> None:
        with pytest.raises(SchemaDefinitionError):
            build_schema("int", ["a"])

    def test_response_adapter_rejects_invalid_schema(self) -> None:
        with pytest.raises(SchemaDefinitionError, match="response_schema"):
            build_response_adapter(object())


class TestParamsValidation:
    """Validação de parâmetros: 400 com o id da API na mensagem."""

    def test_valid_payload_returns_none(self) -> None:
        schema = build_schema([int, int], ["a", "b"], label="add")
        assert validate_params({"a": 1, "b": 2}, schema, "add", 2) is None

    def test_invalid_type_mentions_api_and_reason(self) -> None:
        schema = build_schema([int, int], ["a", "b"], label="add")
        error = validate_params({"a": "foo", "b": 2}, schema, "add", 2)
        assert isinstance(error, ValidationFailed)
        assert error.status_code == 400
        assert "Incorrect parameters for API add" in error.message
        assert "valid integer" in error.message
        assert error.details[0]["field"] == "a"

    def test_missing_required_parameter(self) -> None:
        schema = build_schema([int, int], ["a", "b"])
        error = validate_params({"a": 1}, schema, "add", 2)
        assert error is not None
        assert error.details[0]["type"] == "missing"

    def test_count_guard_runs_before_schema(self) -> None:
        """Mais valores que parâmetros falha com mensagem dedicada."""
        schema = build_schema([int], ["a"])
        error = validate_params({"a": 1, "1": 2}, schema, "one", 1)
        assert error is not None
        assert error.message == (
            "Incorrect parameters for API one: expected at most 1 parameter(s), received 2"
        )

    def test_unknown_key_is_rejected(self) -> None:
        schema = build_schema([int, int], ["a", "b"])
        error = validate_params({"a": 1, "c": 2}, schema, "add", 2)
        assert error is not None
        assert error.details[0]["type"] == "extra_forbidden"


class TestResponseValidation:
    """Validação de resposta: 512 com o id da API na mensagem."""

    def test_conforming_result(self) -> None:
        adapter = build_response_adapter(int)
        assert validate_response(3, adapter, "add") is None

    def test_non_conforming_result(self) -> None:
        adapter = build_response_adapter(list[int])
        error = validate_response(["x"], adapter, "listing")
        assert isinstance(error, ResponseValidationFailed)
        assert error.status_code == 512
        assert error.error == "Bad Response"
        assert error.message.startswith("Incorrect response for API listing:")

    def test_root_error_uses_result_label(self) -> None:
        adapter = build_response_adapter(int)
        error = validate_response("abc", adapter, "add")
        assert error is not None
        assert error.details[0]["field"] == "addResult"


class TestShouldSample:
    def test_full_sample_always(self) -> None:
        assert all(should_sample(FULL_SAMPLE) for _ in range(20))

    def test_no_sample_never(self) -> None:
        assert not any(should_sample(NO_SAMPLE) for _ in range(20))

    def test_partial_sample_uses_random(self) -> None:
        with patch("app.services.validation.random.uniform", return_value=10.0):
            assert should_sample(50) is True
        with patch("app.services.validation.random.uniform", return_value=90.0):
            assert should_sample(50) is False
