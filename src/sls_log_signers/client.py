"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Any

import httpx

from ._http import LogRequest, SignedRequest, TransportOptions, merge_transport_options
from ._identity import LogCredentialIdentity
from .exceptions import LogServiceError
from .models import GetLogsQuery, LogData, encode_log_data
from .signers import LogSigner

logger = logging.getLogger(__name__)

UNKNOWN_REQUEST_ID: str = "unknown"
REQUEST_ID_HEADER: str = "x-log-requestid"


@dataclass(kw_only=True)
class Configuration:
    endpoint: str
    scheme: str = "http"
    transport_options: TransportOptions | None = None


class LogClient:
    """
    Client that signs requests and sends them to the log service.

    Transport failures raised by httpx propagate unchanged; a delivered
    response carrying an error envelope raises :class:`LogServiceError`.
    """

    def __init__(
        self,
        *,
        identity: LogCredentialIdentity,
        config: Configuration,
        transport: httpx.BaseTransport | None = None,
    ):
        self._identity = identity
        self._config = config
        self._transport = transport
        self._signer = LogSigner()

    @property
    def identity(self) -> LogCredentialIdentity:
        return self._identity

    def update_credential(
        self,
        access_key_id: str,
        access_key_secret: str,
        security_token: str | None = None,
        expiration: datetime | None = None,
    ) -> None:
        self._identity.update(
            access_key_id, access_key_secret, security_token, expiration
        )

    def request(self, request: LogRequest) -> Any:
        signed = _sign(self._signer, self._identity, self._config, request)
        options = merge_transport_options(
            self._config.transport_options, request.transport_options
        )
        transport = self._transport or httpx.HTTPTransport(retries=options["retries"])
        client = httpx.Client(transport=transport, timeout=options["timeout"])
        try:
            response = client.request(
                signed.method, signed.url, headers=signed.headers, content=signed.body
            )
        finally:
            # An injected transport belongs to the caller and outlives this call.
            if self._transport is None:
                client.close()
        if options["raise_for_status"]:
            response.raise_for_status()
        return parse_response(response)

    def get_logs(
        self, project: str, logstore: str, query: GetLogsQuery
    ) -> list[dict[str, Any]]:
        return self.request(_query_request(project, logstore, "log", query))

    def get_histograms(
        self, project: str, logstore: str, query: GetLogsQuery
    ) -> list[dict[str, Any]]:
        return self.request(_query_request(project, logstore, "histogram", query))

    def post_logstore_logs(self, project: str, logstore: str, data: LogData) -> Any:
        return self.request(_track_request(project, logstore, data))


class AsyncLogClient:
    def __init__(
        self,
        *,
        identity: LogCredentialIdentity,
        config: Configuration,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._identity = identity
        self._config = config
        self._transport = transport
        self._signer = LogSigner()

    @property
    def identity(self) -> LogCredentialIdentity:
        return self._identity

    def update_credential(
        self,
        access_key_id: str,
        access_key_secret: str,
        security_token: str | None = None,
        expiration: datetime | None = None,
    ) -> None:
        self._identity.update(
            access_key_id, access_key_secret, security_token, expiration
        )

    async def request(self, request: LogRequest) -> Any:
        signed = _sign(self._signer, self._identity, self._config, request)
        options = merge_transport_options(
            self._config.transport_options, request.transport_options
        )
        transport = self._transport or httpx.AsyncHTTPTransport(
            retries=options["retries"]
        )
        client = httpx.AsyncClient(transport=transport, timeout=options["timeout"])
        try:
            response = await client.request(
                signed.method, signed.url, headers=signed.headers, content=signed.body
            )
        finally:
            if self._transport is None:
                await client.aclose()
        if options["raise_for_status"]:
            response.raise_for_status()
        return parse_response(response)

    async def get_logs(
        self, project: str, logstore: str, query: GetLogsQuery
    ) -> list[dict[str, Any]]:
        return await self.request(_query_request(project, logstore, "log", query))

    async def get_histograms(
        self, project: str, logstore: str, query: GetLogsQuery
    ) -> list[dict[str, Any]]:
        return await self.request(
            _query_request(project, logstore, "histogram", query)
        )

    async def post_logstore_logs(
        self, project: str, logstore: str, data: LogData
    ) -> Any:
        return await self.request(_track_request(project, logstore, data))


def parse_response(response: httpx.Response) -> Any:
    """Return the response body, raising on a known error envelope.

    Non-JSON responses are returned as text without inspection.
    """
    content_type = response.headers.get("content-type", "")
    if not content_type.startswith("application/json"):
        return response.text

    body = response.json()
    if not isinstance(body, Mapping):
        return body

    nested = body.get("Error")
    if body.get("errorCode") and body.get("errorMessage"):
        error = LogServiceError(
            body["errorMessage"],
            body["errorCode"],
            response.headers.get(REQUEST_ID_HEADER) or UNKNOWN_REQUEST_ID,
        )
    elif isinstance(nested, Mapping) and nested.get("Code") and nested.get("Message"):
        error = LogServiceError(
            nested["Message"],
            nested["Code"],
            nested.get("RequestId") or UNKNOWN_REQUEST_ID,
        )
    else:
        return body

    logger.debug(
        "Request %s rejected with %s (HTTP %s)",
        error.request_id,
        error.code,
        response.status_code,
    )
    raise error


def _sign(
    signer: LogSigner,
    identity: LogCredentialIdentity,
    config: Configuration,
    request: LogRequest,
) -> SignedRequest:
    signed = signer.sign(
        request=request,
        identity=identity,
        endpoint=config.endpoint,
        scheme=config.scheme,
    )
    logger.debug("Sending %s %s", signed.method, signed.url)
    return signed


def _query_request(
    project: str, logstore: str, query_type: str, query: GetLogsQuery
) -> LogRequest:
    return LogRequest(
        method="GET",
        path=f"/logstores/{logstore}",
        queries={"type": query_type, **query},
        project=project,
    )


def _track_request(project: str, logstore: str, data: LogData) -> LogRequest:
    body = encode_log_data(data)
    return LogRequest(
        method="POST",
        path=f"/logstores/{logstore}/track",
        body=body,
        headers={"x-log-bodyrawsize": str(len(body))},
        project=project,
    )
