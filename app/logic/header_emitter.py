"""Centralised ETag header emitter.

Provides a single function to set domain-specific ETag headers and the
generic `ETag` header, so route handlers never assign these headers directly.
"""

from __future__ import annotations

import logging
from fastapi import Response

logger = logging.getLogger(__name__)


SCOPE_TO_HEADER = {
    "program": "Program-ETag",
}


def emit_etag_headers(response: Response, scope: str, token: str, include_generic: bool = True) -> None:
    """Set domain and generic ETag headers on the response.

    - `scope`: one of SCOPE_TO_HEADER keys
    - `token`: the entity tag value to set
    - `include_generic`: when True, also set `ETag` alongside the domain header
    """
    header_name = SCOPE_TO_HEADER.get(scope)
    if header_name is None:
        raise ValueError(f"unknown etag scope '{scope}'")
    if not str(token or "").strip():
        logger.warning("emit_etag_headers_blank_token scope=%s", scope)
        return
    response.headers[header_name] = token
    if include_generic:
        response.headers["ETag"] = token
    exposed = {t.strip() for t in response.headers.get("Access-Control-Expose-Headers", "").split(",") if t.strip()}
    exposed.update({"ETag", header_name})
    response.headers["Access-Control-Expose-Headers"] = ", ".join(sorted(exposed))


__all__ = ["SCOPE_TO_HEADER", "emit_etag_headers"]
