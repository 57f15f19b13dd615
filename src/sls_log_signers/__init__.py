"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0

SLS Log Signers signs requests for the log service's HMAC-SHA1 header
scheme and sends them over httpx.
"""

from __future__ import annotations

from ._http import LogRequest, SignedRequest, TransportOptions
from ._identity import LogCredentialIdentity
from ._version import __version__
from .client import AsyncLogClient, Configuration, LogClient
from .exceptions import LogServiceError
from .models import create_log
from .signers import LogSigner, canonicalize_headers, canonicalize_resource

__license__ = "Apache-2.0"
__version__ = __version__

__all__ = (
    "AsyncLogClient",
    "Configuration",
    "LogClient",
    "LogCredentialIdentity",
    "LogRequest",
    "LogServiceError",
    "LogSigner",
    "SignedRequest",
    "TransportOptions",
    "canonicalize_headers",
    "canonicalize_resource",
    "create_log",
)
