"""Line-delimited JSON-RPC 2.0 encoding."""

from __future__ import annotations

import json

from ..errors import SerializationError
from .models import Request

JSONRPC_VERSION = "2.0"


def encode_request(request: Request) -> bytes:
    payload = {
        "jsonrpc": JSONRPC_VERSION,
        "id": request.id,
        "method": request.method,
        "params": list(request.params),
    }
    try:
        text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"cannot encode {request.method} request: {exc}") from exc
    return text.encode("utf-8") + b"\n"
