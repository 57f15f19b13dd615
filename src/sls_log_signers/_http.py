"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypedDict

from .exceptions import InvalidRequestException

SUPPORTED_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE")


class TransportOptions(TypedDict, total=False):
    timeout: float
    retries: int
    raise_for_status: bool


DEFAULT_TRANSPORT_OPTIONS: TransportOptions = {
    "timeout": 3.0,
    "retries": 2,
    "raise_for_status": False,
}


def merge_transport_options(
    *layers: TransportOptions | None,
) -> TransportOptions:
    """Merge option layers left to right, later layers winning.

    Always starts from :data:`DEFAULT_TRANSPORT_OPTIONS`.
    """
    merged = TransportOptions(**DEFAULT_TRANSPORT_OPTIONS)
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged


@dataclass(frozen=True, kw_only=True)
class LogRequest:
    """A single call against the log service, before signing."""

    method: str
    path: str
    queries: Mapping[str, Any] | None = None
    body: bytes | None = None
    headers: Mapping[str, str] | None = None
    project: str | None = None
    transport_options: TransportOptions | None = None

    def __post_init__(self) -> None:
        if self.method not in SUPPORTED_METHODS:
            raise InvalidRequestException(
                f"Unsupported method {self.method!r}. Expected one of "
                f"{', '.join(SUPPORTED_METHODS)}."
            )
        if not self.path.startswith("/"):
            raise InvalidRequestException(
                f"Request path must start with '/'. Received {self.path!r}."
            )


@dataclass(kw_only=True)
class SignedRequest:
    """The exact request handed to the transport."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None
