"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import base64
import datetime
from collections.abc import Mapping, Sequence
from email.utils import format_datetime
from hashlib import md5, sha1
import hmac
import json
import logging
from typing import Any
from urllib.parse import urlencode

from ._http import LogRequest, SignedRequest
from ._identity import LogCredentialIdentity, LogCredentialSnapshot
from .exceptions import ExpiredIdentityException

logger = logging.getLogger(__name__)

CANONICAL_HEADER_PREFIXES: tuple[str, ...] = ("x-log-", "x-acs-")
SIGNATURE_SCHEME: str = "LOG"
API_VERSION: str = "0.6.0"
SIGNATURE_METHOD: str = "hmac-sha1"
DEFAULT_CONTENT_TYPE: str = "application/json"
SECURITY_TOKEN_HEADER: str = "x-acs-security-token"


class LogSigner:
    """
    Request signer for the log service's HMAC-SHA1 header scheme.
    """

    def sign(
        self,
        *,
        request: LogRequest,
        identity: LogCredentialIdentity,
        endpoint: str,
        scheme: str = "http",
    ) -> SignedRequest:
        # Read the credential exactly once so a concurrent rotation can
        # not mix old and new fields within one signature.
        credential = identity.snapshot()
        self._validate_identity(identity=credential)

        headers = self._default_headers()
        for key, value in (request.headers or {}).items():
            _set_header(headers, key, value)

        if credential.security_token:
            _set_header(headers, SECURITY_TOKEN_HEADER, credential.security_token)

        if request.body is not None:
            _set_header(headers, "content-length", str(len(request.body)))
            _set_header(
                headers, "content-md5", md5(request.body).hexdigest().upper()
            )

        canonical_resource = canonicalize_resource(request.path, request.queries)
        string_to_sign = self.string_to_sign(
            method=request.method,
            headers=headers,
            canonical_resource=canonical_resource,
        )
        logger.debug("StringToSign:\n%s", string_to_sign)
        signature = self._signature(
            string_to_sign=string_to_sign,
            secret_key=credential.access_key_secret,
        )
        _set_header(
            headers,
            "authorization",
            self.generate_authorization(credential=credential, signature=signature),
        )

        return SignedRequest(
            method=request.method,
            url=self.build_url(
                request=request, endpoint=endpoint, scheme=scheme
            ),
            headers=headers,
            body=request.body,
        )

    def string_to_sign(
        self,
        *,
        method: str,
        headers: Mapping[str, str],
        canonical_resource: str,
    ) -> str:
        # Every slot is always present; an absent value is an empty line.
        return (
            f"{method}\n"
            f"{_get_header(headers, 'content-md5')}\n"
            f"{_get_header(headers, 'content-type')}\n"
            f"{_get_header(headers, 'date')}\n"
            f"{canonicalize_headers(headers)}\n"
            f"{canonical_resource}"
        )

    def generate_authorization(
        self, *, credential: LogCredentialSnapshot, signature: str
    ) -> str:
        """Generate the `authorization` header value"""
        return f"{SIGNATURE_SCHEME} {credential.access_key_id}:{signature}"

    def build_url(self, *, request: LogRequest, endpoint: str, scheme: str) -> str:
        host = f"{request.project}.{endpoint}" if request.project else endpoint
        return (
            f"{scheme}://{host}{request.path}{format_query_string(request.queries)}"
        )

    def _signature(self, *, string_to_sign: str, secret_key: str) -> str:
        digest = hmac.new(
            key=secret_key.encode(), msg=string_to_sign.encode(), digestmod=sha1
        ).digest()
        return base64.b64encode(digest).decode()

    def _validate_identity(self, *, identity: LogCredentialSnapshot) -> None:
        """Reject a credential whose STS token has already expired."""
        if identity.is_expired:
            raise ExpiredIdentityException(
                f"Provided identity expired at {identity.expiration}. Please "
                "refresh the credentials with update_credential()."
            )

    def _default_headers(self) -> dict[str, str]:
        date_obj = datetime.datetime.now(datetime.timezone.utc)
        return {
            "content-type": DEFAULT_CONTENT_TYPE,
            "date": format_datetime(date_obj, usegmt=True),
            "x-log-apiversion": API_VERSION,
            "x-log-signaturemethod": SIGNATURE_METHOD,
        }


def format_query_value(value: Any) -> str:
    """Stringify a query or log field value.

    Used for the canonical resource, the wire query string and the values of
    a `track` batch, so all three agree.

    ``None`` is the empty string, booleans are lowercase, sequences are
    comma-joined and mappings are compact JSON with sorted keys.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return json.dumps(value, sort_keys=True, separators=(",", ":"))
    if isinstance(value, (bytes, bytearray)):
        return value.decode()
    if isinstance(value, Sequence):
        return ",".join(format_query_value(item) for item in value)
    return str(value)


def canonicalize_resource(path: str, queries: Mapping[str, Any] | None = None) -> str:
    if not queries:
        return path

    query_str = "&".join(
        f"{key}={format_query_value(queries[key])}" for key in sorted(queries)
    )
    return f"{path}?{query_str}"


def canonicalize_headers(headers: Mapping[str, str]) -> str:
    """Render the signed subset of ``headers``.

    Keys are matched on their lowercase form but emitted as supplied, and
    sorted by raw code point. Keys are unique in a mapping, so the order is
    total even when two keys differ only by case.
    """
    return "\n".join(
        f"{key}:{headers[key].strip()}"
        for key in sorted(headers)
        if key.lower().startswith(CANONICAL_HEADER_PREFIXES)
    )


def format_query_string(queries: Mapping[str, Any] | None) -> str:
    if not queries:
        return ""
    encoded = urlencode(
        [(key, format_query_value(value)) for key, value in queries.items()]
    )
    return f"?{encoded}"


def _get_header(headers: Mapping[str, str], name: str) -> str:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return ""


def _set_header(headers: dict[str, str], name: str, value: str) -> None:
    """Set ``name``, dropping any existing key that differs only in case."""
    for existing in [key for key in headers if key.lower() == name.lower()]:
        del headers[existing]
    headers[name] = value
