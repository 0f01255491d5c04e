from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

from azure.core import AsyncPipelineClient
from azure.core.credentials import AzureKeyCredential
from azure.core.exceptions import HttpResponseError
from azure.core.pipeline import PipelineResponse
from azure.core.pipeline.policies import (
    AzureKeyCredentialPolicy,
    ContentDecodePolicy,
    HeadersPolicy,
    HttpLoggingPolicy,
    ProxyPolicy,
    RequestIdPolicy,
    UserAgentPolicy,
)
from azure.core.pipeline.transport import AsyncHttpTransport
from azure.core.polling import AsyncLROPoller
from azure.core.polling.async_base_polling import AsyncLROBasePolling
from azure.core.rest import HttpRequest

from id_analysis_service.processor.exceptions import AnalysisServiceError, AnalysisTimeoutError
from id_analysis_service.utils.utils import setup_logging

ID_DOCUMENT_MODEL_ID = "prebuilt-idDocument"
API_VERSION = "2024-11-30"
API_KEY_HEADER = "Ocp-Apim-Subscription-Key"
USER_AGENT = "id-analysis-service"


def service_error_message(exception: HttpResponseError) -> str:
    """Return the message of the error object reported by the service, if any."""
    error = getattr(exception, "error", None)
    if error is not None and getattr(error, "message", None):
        return str(error.message)
    return str(exception.message or exception)


def deserialize_analyze_result(pipeline_response: PipelineResponse) -> dict[str, Any]:
    """Pull `analyzeResult` out of the final operation status body."""
    body = pipeline_response.http_response.json() or {}
    return body.get("analyzeResult") or {}


class DocumentAnalyzer:
    """Submits documents to Azure AI Document Intelligence and waits for the result.

    Talks to the REST API through an azure-core pipeline: the analyze POST
    answers 202 with an Operation-Location that AsyncLROBasePolling follows
    until the operation succeeds or fails. A new client is opened for every
    call, so concurrent requests never share a job handle or any other state.
    No retry policy is installed.
    """

    def __init__(self,
                 endpoint: str,
                 key: str,
                 model_id: str = ID_DOCUMENT_MODEL_ID,
                 poll_timeout: float | None = None,
                 polling_interval: float = 1.0,
                 log_level: int = 20,
                 client_factory: Callable[[], Any] | None = None,
                 transport: AsyncHttpTransport | None = None):
        self.endpoint = endpoint
        self.model_id = model_id
        self.poll_timeout = poll_timeout
        self.polling_interval = polling_interval
        self._key = key
        self._transport = transport
        self._client_factory = client_factory or self._create_client
        self.log = setup_logging(component_name="analyzer", log_level=log_level)

    def _create_client(self) -> AsyncPipelineClient:
        return AsyncPipelineClient(
            base_url=self.endpoint,
            policies=[
                RequestIdPolicy(),
                HeadersPolicy(),
                UserAgentPolicy(sdk_moniker=USER_AGENT),
                ProxyPolicy(),
                ContentDecodePolicy(),
                AzureKeyCredentialPolicy(AzureKeyCredential(self._key), API_KEY_HEADER),
                HttpLoggingPolicy(),
            ],
            transport=self._transport,
        )

    def build_analyze_request(self, stream: bytes) -> HttpRequest:
        url = f"{self.endpoint}/documentintelligence/documentModels/{quote(self.model_id)}:analyze"
        return HttpRequest(
            "POST",
            url,
            params={"api-version": API_VERSION},
            headers={"Content-Type": "application/octet-stream", "Accept": "application/json"},
            content=stream,
        )

    async def _begin_analyze(self, client: Any, stream: bytes) -> AsyncLROPoller[dict[str, Any]]:
        request = self.build_analyze_request(stream)
        pipeline_response = await client.send_request(request, _return_pipeline_response=True)

        response = pipeline_response.http_response
        if response.status_code != 202:
            await response.read()
            raise HttpResponseError(response=response)

        polling_method: AsyncLROBasePolling = AsyncLROBasePolling(
            timeout=self.polling_interval,
            lro_options={"final-state-via": "operation-location"},
        )
        return AsyncLROPoller(client, pipeline_response, deserialize_analyze_result, polling_method)

    async def _wait_for_result(self, poller: Any) -> Any:
        if self.poll_timeout is None:
            return await poller.result()
        return await asyncio.wait_for(poller.result(), timeout=self.poll_timeout)

    async def analyze(self, stream: bytes) -> dict[str, Any]:
        """ Runs the prebuilt model over the document bytes.

        Args:
            stream (bytes): raw image/PDF content, sent as-is.

        Raises:
            AnalysisServiceError: submission rejected or the operation failed
            AnalysisTimeoutError: poll_timeout is set and was exceeded

        Returns:
            dict: `analyzeResult` in its REST wire shape (documents, fields, ...)
        """

        start_time = time.time()

        async with self._client_factory() as client:
            self.log.info("analyzing document using model: " + self.model_id)
            try:
                poller = await self._begin_analyze(client, stream)
            except HttpResponseError as exception:
                self.log.error("unexpected response from the analysis service: " + str(exception))
                raise AnalysisServiceError(service_error_message(exception)) from exception

            self.log.info("waiting for analysis result (long running operation)")
            try:
                result = await self._wait_for_result(poller)
            except asyncio.TimeoutError as exception:
                raise AnalysisTimeoutError(
                    f"Analysis did not complete within {self.poll_timeout} seconds."
                ) from exception
            except HttpResponseError as exception:
                self.log.error("analysis operation failed: " + str(exception))
                raise AnalysisServiceError(service_error_message(exception)) from exception

        elapsed_time = round(time.time() - start_time, 4)
        self.log.info("analysis completed | Elapsed : " + str(elapsed_time) + " seconds")

        return dict(result or {})
