"""Testes de app.services.handler (execução de uma API por requisição)."""

from __future__ import annotations

import logging
import threading
from unittest.mock import MagicMock, patch

import pytest
from starlette.exceptions import HTTPException

from app.domain.api import Api, Group
from app.domain.options import ServiceOptions
from app.services.checksum import CHECKSUM_HEADER
from app.services.descriptors import build_descriptor, extract_apis
from app.services.handler import RequestHandler, build_routes
from utils.errors import HandlerError, ResponseValidationFailed, ValidationFailed

CHECKSUM = "deadbeef"


def _handler(value, api_id: str = "fn", logger: logging.Logger | None = None) -> RequestHandler:
    descriptor = build_descriptor("grp", api_id, value)
    return RequestHandler(descriptor, CHECKSUM, logger or MagicMock(spec=logging.Logger))


class TestSuccess:
    @pytest.mark.asyncio
    async def test_async_function_json_result(self) -> None:
        async def add(a, b):
            return a + b

        result = await _handler(add)({"a": 1, "b": 2})
        assert result.body == 3
        assert result.kind == "json"
        assert result.headers[CHECKSUM_HEADER] == CHECKSUM

    @pytest.mark.asyncio
    async def test_sync_function_runs_in_threadpool(self) -> None:
        def whoami():
            return threading.current_thread() is threading.main_thread()

        result = await _handler(whoami)(None)
        assert result.body is False

    @pytest.mark.asyncio
    async def test_awaitable_result_is_awaited(self) -> None:
        async def later():
            return "done"

        result = await _handler(lambda: later())(None)
        assert result.body == "done"

    @pytest.mark.asyncio
    async def test_none_result_is_empty(self) -> None:
        result = await _handler(lambda: None)(None)
        assert result.kind == "empty"
        assert result.headers[CHECKSUM_HEADER] == CHECKSUM

    @pytest.mark.asyncio
    async def test_bytes_result_is_raw(self) -> None:
        result = await _handler(lambda: bytearray(b"raw"))(None)
        assert result.kind == "bytes"
        assert result.body == b"raw"

    @pytest.mark.asyncio
    async def test_generator_result_is_stream(self) -> None:
        def chunks():
            yield b"a"
            yield b"b"

        result = await _handler(lambda: chunks())(None)
        assert result.kind == "stream"
        assert list(result.body) == [b"a", b"b"]

    @pytest.mark.asyncio
    async def test_missing_parameters_are_passed_as_none(self) -> None:
        def fn(a=1, b=2):
            return [a, b]

        result = await _handler(fn)(None)
        assert result.body == [None, None]

    @pytest.mark.asyncio
    async def test_overflow_values_forwarded_positionally(self) -> None:
        def collect(first, *rest):
            return [first, *rest]

        handler = _handler(Api(fn=collect, params=["first"]))
        result = await handler({"first": 1, "1": 2, "2": 3})
        assert result.body == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_validated_values_are_passed(self) -> None:
        async def add(a, b):
            return a + b

        handler = _handler(Api(fn=add, validate=[int, int]))
        result = await handler({"a": "1", "b": "2"})
        assert result.body == 3


class TestBufferInput:
    @pytest.mark.asyncio
    async def test_raw_body_is_single_argument(self) -> None:
        received: list[object] = []

        async def upload(data):
            received.append(data)
            return len(data)

        handler = _handler(Api(fn=upload, has_buffer_input=True, validate=[int]))
        result = await handler(b'{"not": "parsed"}')
        assert received == [b'{"not": "parsed"}']
        assert result.body == 17
        assert handler.request_options.parse is False
        assert handler.request_options.output == "data"

    @pytest.mark.asyncio
    async def test_later_parameters_receive_none(self) -> None:
        received: list[object] = []

        async def upload(data, name):
            received.append((data, name))
            return len(data)

        handler = _handler(Api(fn=upload, has_buffer_input=True), "upload")
        result = await handler(b"abc")
        assert received == [(b"abc", None)]
        assert result.body == 3

    def test_stream_input_requests_stream_output(self) -> None:
        handler = _handler(Api(fn=lambda data: None, has_stream_input=True))
        assert handler.request_options.output == "stream"


class TestFailures:
    @pytest.mark.asyncio
    async def test_invalid_params_raise_400(self) -> None:
        async def add(a, b):
            return a + b

        with pytest.raises(ValidationFailed, match="Incorrect parameters for API add"):
            await _handler(Api(fn=add, validate=[int, int]), "add")({"a": "foo", "b": 1})

    @pytest.mark.asyncio
    async def test_non_object_payload_raises_400(self) -> None:
        with pytest.raises(ValidationFailed, match="payload must be an object"):
            await _handler(lambda a: a)([1, 2])

    @pytest.mark.asyncio
    async def test_plain_exception_becomes_599(self) -> None:
        service_logger = MagicMock(spec=logging.Logger)

        def fails():
            raise KeyError("missing")

        with pytest.raises(HandlerError) as exc_info:
            await _handler(fails, "fails", service_logger)(None)

        assert exc_info.value.status_code == 599
        assert exc_info.value.message.startswith("Error while calling API fails:")
        assert isinstance(exc_info.value.__cause__, KeyError)
        service_logger.warning.assert_called_once()

    @pytest.mark.asyncio
    async def test_annotated_error_passes_through(self) -> None:
        async def teapot():
            raise HTTPException(status_code=418, detail="teapot")

        with pytest.raises(HTTPException) as exc_info:
            await _handler(teapot)(None)
        assert exc_info.value.status_code == 418

    @pytest.mark.asyncio
    async def test_api_error_passes_through(self) -> None:
        async def custom():
            raise ValidationFailed("custom check failed")

        with pytest.raises(ValidationFailed, match="custom check failed"):
            await _handler(custom)(None)


class TestResponseSampling:
    """Amostragem 100 valida toda resposta; 0 nunca valida."""

    @pytest.mark.asyncio
    async def test_validate_response_rejects_bad_result(self) -> None:
        handler = _handler(
            Api(fn=lambda a: "not a number", response_schema=int, validate_response=True), "bad"
        )
        assert handler.response_sample == 100
        with pytest.raises(ResponseValidationFailed, match="Incorrect response for API bad"):
            await handler({"a": 1})

    @pytest.mark.asyncio
    async def test_documented_schema_is_never_checked(self) -> None:
        handler = _handler(Api(fn=lambda a: "not a number", response_schema=int), "doc")
        assert handler.response_sample == 0
        with patch("app.services.handler.validate_response") as validator:
            result = await handler({"a": 1})
        validator.assert_not_called()
        assert result.body == "not a number"


class TestRoutes:
    @pytest.mark.asyncio
    async def test_discovery_route_first_then_one_per_api(self) -> None:
        options = ServiceOptions(
            name="svc",
            version="2.0.0",
            groups=[Group("calc", lambda _options: {"add": lambda a, b: a + b, "ping": lambda: 1})],
        )
        exposure = await extract_apis(options)
        routes = build_routes(exposure, "svc", "2.0.0", "/api", max_bytes=1024)

        assert [(route.method, route.path) for route in routes] == [
            ("GET", "/api/exposed"),
            ("POST", "/api/calc/add"),
            ("GET", "/api/calc/ping"),
        ]
        assert routes[1].name == "calc.add"
        assert routes[1].request_options.max_bytes == 1024

        discovery = await routes[0].handler(None)
        assert discovery.body["name"] == "svc"
        assert discovery.body["version"] == "2.0.0"
        assert discovery.body["apis"] == exposure.exposed_dicts()
        assert discovery.headers[CHECKSUM_HEADER] == exposure.checksum
