"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import json
from typing import Any, NotRequired, Required, TypedDict

from .signers import format_query_value


class LogEntity(TypedDict):
    content: dict[str, Any]
    timestamp: NotRequired[int | None]
    timestamp_ns_part: NotRequired[int | None]


class LogData(TypedDict, total=False):
    logs: Required[list[LogEntity]]
    tags: list[dict[str, str]]
    topic: str
    source: str


# Keys are the service's query parameter names, ``from`` included.
GetLogsQuery = TypedDict(
    "GetLogsQuery",
    {
        "from": Required[int],
        "to": Required[int],
        "query": str,
        "topic": str,
        "line": int,
        "offset": int,
        "reverse": bool,
        "powerSql": bool,
    },
    total=False,
)


def create_log(
    content: dict[str, Any],
    timestamp: int | None = None,
    timestamp_ns_part: int | None = None,
) -> LogEntity:
    return LogEntity(
        content=content,
        timestamp=timestamp,
        timestamp_ns_part=timestamp_ns_part,
    )


def encode_log_data(data: LogData) -> bytes:
    """Encode a batch as the JSON body accepted by the ``track`` API.

    Field values are sent as strings using the same rules as query values:
    lowercase booleans, empty string for ``None`` and compact JSON for
    mappings. Tag dictionaries are merged in order.
    """
    logs = []
    for entity in data["logs"]:
        log = {
            key: format_query_value(value)
            for key, value in entity["content"].items()
        }
        if entity.get("timestamp") is not None:
            log["__time__"] = format_query_value(entity["timestamp"])
        if entity.get("timestamp_ns_part") is not None:
            log["__time_ns_part__"] = format_query_value(entity["timestamp_ns_part"])
        logs.append(log)

    payload: dict[str, Any] = {"__logs__": logs}
    if "topic" in data:
        payload["__topic__"] = data["topic"]
    if "source" in data:
        payload["__source__"] = data["source"]
    if data.get("tags"):
        tags: dict[str, str] = {}
        for tag in data["tags"]:
            tags.update(tag)
        payload["__tags__"] = tags
    return json.dumps(payload, separators=(",", ":")).encode()
