"""
Plain-text transport shim

Turns a raw request head (request line + headers) into a fetch and the
fetch outcome into status line / headers / body bytes. Socket handling is
left to the caller.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import MalformedRequest, MediaCacheError
from .negotiation import accepts_gzip
from .response import assemble, assemble_error
from .service import MediaService

logger = logging.getLogger(__name__)

INDEX_RESOURCE = "/index.html"


def resolve_resource_id(path: str) -> str:
    """Map the site root onto the index document."""
    return INDEX_RESOURCE if path in ("", "/") else path


@dataclass
class RequestHead:
    method: str
    resource_id: str
    raw_query: Optional[str]
    accepts_compression: bool


def parse_request_head(raw: str) -> RequestHead:
    """
    Parse ``METHOD /path?query VERSION`` plus header lines.

    Raises:
        MalformedRequest: the request line does not have three parts
    """
    lines = raw.splitlines()
    parts = lines[0].split() if lines else []
    if len(parts) != 3:
        raise MalformedRequest("Malformed request line")
    method, target, _version = parts

    path, sep, query = target.partition("?")
    accept_encoding = None
    for line in lines[1:]:
        name, colon, value = line.partition(":")
        if colon and name.strip().lower() == "accept-encoding":
            accept_encoding = value.strip()

    return RequestHead(
        method=method,
        resource_id=resolve_resource_id(path),
        raw_query=query if sep else None,
        accepts_compression=accepts_gzip(accept_encoding),
    )


async def handle_raw_request(service: MediaService, raw: str) -> bytes:
    """Serve one raw request and return the serialized response."""
    try:
        head = parse_request_head(raw)
    except MalformedRequest as e:
        return assemble_error(e.status_code, e.message).to_bytes()

    logger.info(f"[Transport] {head.method} {head.resource_id} {head.raw_query or ''}")
    if head.method != "GET":
        return assemble_error(404, "Not found").to_bytes()

    try:
        result = await service.fetch(head.resource_id, head.raw_query, head.accepts_compression)
    except MediaCacheError as e:
        logger.error(f"[Transport] {head.resource_id} failed ({e.status_code}): {e.message}")
        return assemble_error(e.status_code, e.message).to_bytes()

    return assemble(result.content_type, result.body, result.compressed).to_bytes()
