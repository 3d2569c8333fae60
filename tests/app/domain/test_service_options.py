"""Testes de app.domain.options e app.domain.api."""

from __future__ import annotations

import logging

import pytest

from app.domain.api import NO_APIS, Api, ExposedApi, Group, NoApis, api
from app.domain.options import ServiceOptions, validate_groups
from utils.errors import ConfigurationError


def _noop(_options):
    return NO_APIS


class TestServiceOptionsValidate:
    def test_valid_options(self) -> None:
        options = ServiceOptions(name="svc", version="1.0.0", groups=[Group("calc", _noop)])
        assert options.validate() == []

    def test_name_and_version_required(self) -> None:
        errors = ServiceOptions().validate()
        assert '"name" is required' in errors
        assert '"version" is required' in errors

    def test_base_path_must_start_with_slash(self) -> None:
        errors = ServiceOptions(name="svc", version="1", base_path="api").validate()
        assert any("base_path" in error for error in errors)

    def test_assert_valid_raises_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError, match='"name" is required'):
            ServiceOptions(version="1").assert_valid()

    def test_default_logger_named_after_service(self) -> None:
        assert ServiceOptions(name="svc").get_logger().name == "exposer.svc"

    def test_injected_logger_is_used(self) -> None:
        custom = logging.getLogger("custom")
        assert ServiceOptions(name="svc", logger=custom).get_logger() is custom


class TestResolvedGroups:
    def test_groups_and_opts_unchanged(self) -> None:
        group = Group("calc", _noop)
        options = ServiceOptions(
            name="svc", version="1", groups=[group], group_opts={"calc": {"x": 1}}
        )
        assert options.resolved_groups() == ((group,), {"calc": {"x": 1}})

    def test_init_shortcut_takes_precedence(self) -> None:
        options = ServiceOptions(
            name="svc",
            version="1",
            groups=[Group("calc", _noop)],
            init=_noop,
            init_opts={"x": 1},
        )
        groups, opts = options.resolved_groups()
        assert [group.name for group in groups] == ["svc"]
        assert opts == {"svc": {"x": 1}}


class TestValidateGroups:
    def test_groups_must_be_a_sequence(self) -> None:
        assert validate_groups({"calc": _noop}) == ['"groups" must be an array']

    def test_hyphen_allowed_in_name(self) -> None:
        assert validate_groups([Group("user-admin", _noop)]) == []

    @pytest.mark.parametrize("name", ["", "1calc", "with space", "a/b", None])
    def test_invalid_names(self, name: object) -> None:
        errors = validate_groups([Group(name, _noop)])  # type: ignore[arg-type]
        assert errors == [f'"groups[0].name" must be an identifier, got {name!r}']


class TestApiMetadata:
    def test_decorator_builds_api(self) -> None:
        @api(validate=[int], response_schema=int, validate_response=True, notes="n")
        def double(x):
            """Dobra x."""
            return x * 2

        assert isinstance(double, Api)
        assert double(2) == 4
        assert double.description == "Dobra x."
        assert double.notes == "n"
        assert double.metadata_errors() == []

    def test_explicit_description_wins(self) -> None:
        @api(description="explicit")
        def fn():
            """From docstring."""

        assert fn.description == "explicit"

    def test_no_apis_is_singleton_and_falsy(self) -> None:
        assert NoApis() is NO_APIS
        assert not NO_APIS

    def test_exposed_api_round_trip_dict(self) -> None:
        data = {
            "group": "calc",
            "id": "add",
            "params": ["a", "b"],
            "path": "/api/calc/add",
            "hasBufferInput": False,
            "hasStreamInput": False,
        }
        exposed = ExposedApi.from_dict(data)
        assert exposed.to_dict() == data
        assert exposed.method == "POST"
