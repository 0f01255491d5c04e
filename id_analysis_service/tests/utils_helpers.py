import asyncio
import json
import tempfile
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

from azure.core.pipeline.transport import AsyncHttpTransport
from azure.core.rest._http_response_impl_async import AsyncHttpResponseImpl
from azure.core.utils import CaseInsensitiveDict

from id_analysis_service.settings import Settings

# smallest header filetype recognizes as image/png
PNG_STREAM = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

ID_CARD_RESULT: dict[str, Any] = {
    "modelId": "prebuilt-idDocument",
    "documents": [
        {
            "docType": "idDocument.nationalIdentityCard",
            "fields": {
                "FirstName": {"type": "string", "valueString": "Ana"},
                "LastName": {"type": "string", "valueString": "Gomez"},
                "DocumentNumber": {"type": "string", "valueString": "X123"},
                "DateOfBirth": {"type": "date", "valueDate": "1990-01-01"},
            },
        }
    ],
}


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "FORM_RECOGNIZER_KEY": "test-key",
        "FORM_RECOGNIZER_ENDPOINT": "https://test.cognitiveservices.azure.com",
        "ID_ANALYSIS_UPLOAD_DIR": tempfile.mkdtemp(prefix="id_analysis_uploads_"),
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[call-arg]


class FakeAnalyzer:
    """Stands in for DocumentAnalyzer; records what it was sent."""

    model_id = "prebuilt-idDocument"

    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[bytes] = []

    async def analyze(self, stream: bytes) -> Any:
        self.calls.append(stream)
        if self.error is not None:
            raise self.error
        return self.result


class FakePoller:
    def __init__(self, result: Any = None, error: Exception | None = None, delay: float = 0.0) -> None:
        self._result = result
        self._error = error
        self._delay = delay

    async def result(self) -> Any:
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._result


class FakeHttpResponse:
    """Just enough of azure.core.rest.AsyncHttpResponse for error parsing."""

    def __init__(self, status_code: int, body: dict[str, Any] | None = None, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body or {}

    async def read(self) -> bytes:
        return self.text().encode()

    def text(self) -> str:
        return json.dumps(self.body)

    def json(self) -> dict[str, Any]:
        return self.body


@dataclass
class FakePipelineClient:
    response: FakeHttpResponse | None = None
    requests: list[Any] = field(default_factory=list)
    closed: bool = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True

    async def send_request(self, request: Any, **kwargs: Any) -> SimpleNamespace:
        self.requests.append(request)
        return SimpleNamespace(http_request=request, http_response=self.response)


def make_transport_response(request: Any, status_code: int, body: dict[str, Any] | None = None,
                            headers: dict[str, str] | None = None) -> AsyncHttpResponseImpl:
    content = json.dumps(body).encode() if body is not None else b""

    async def stream_download(**kwargs: Any):
        yield content

    response_headers = CaseInsensitiveDict(headers or {})
    if body is not None:
        response_headers["Content-Type"] = "application/json"
    return AsyncHttpResponseImpl(request=request,
                                 internal_response=AsyncMock(),
                                 status_code=status_code,
                                 reason="Accepted" if status_code == 202 else "OK",
                                 content_type=response_headers.get("Content-Type"),
                                 headers=response_headers,
                                 stream_download_generator=stream_download)


class FakeTransport(AsyncHttpTransport):
    """Answers pipeline requests from a script of (status_code, body, headers) tuples."""

    def __init__(self, script: list[tuple[int, dict[str, Any] | None, dict[str, str] | None]]) -> None:
        self.script = list(script)
        self.requests: list[Any] = []
        self.sleeps: list[float] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        pass

    async def open(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def sleep(self, duration: float) -> None:
        self.sleeps.append(duration)

    async def send(self, request: Any, **kwargs: Any) -> AsyncHttpResponseImpl:
        self.requests.append(request)
        status_code, body, headers = self.script.pop(0)
        response = make_transport_response(request, status_code, body, headers)
        await response.read()
        return response
