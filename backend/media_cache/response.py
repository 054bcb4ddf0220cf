"""
Response Assembly

Builds status + headers + body for the transport shims. One complete body,
no chunked framing.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

STATUS_TEXT = {
    200: "OK",
    201: "Created",
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    500: "Internal Server Error",
}


def status_text(status_code: int) -> str:
    return STATUS_TEXT.get(status_code, "Internal Server Error")


@dataclass
class AssembledResponse:
    """A complete response ready to be written by a transport."""
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def to_bytes(self) -> bytes:
        """Serialize as a plain-text status line, headers, blank line, body."""
        lines = [f"HTTP/1.1 {self.status_code} {status_text(self.status_code)}"]
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        head = "\r\n".join(lines) + "\r\n\r\n"
        return head.encode("latin-1") + self.body


def assemble(
    content_type: str,
    body: bytes,
    compressed: bool = False,
    status_code: int = 200,
    extra_headers: Optional[Dict[str, str]] = None,
) -> AssembledResponse:
    """
    Build a response for ``body``.

    Content-Length is always the exact length of ``body`` as given (already
    compressed if ``compressed``). Content-Encoding and Vary are only set
    for compressed bodies, so shared caches never hand gzip to a caller
    that did not ask for it.
    """
    headers = {
        "Content-Type": content_type,
        "Content-Length": str(len(body)),
    }
    if compressed:
        headers["Content-Encoding"] = "gzip"
        headers["Vary"] = "Accept-Encoding"
    if extra_headers:
        headers.update(extra_headers)
    return AssembledResponse(status_code=status_code, headers=headers, body=body)


def assemble_error(status_code: int, message: Optional[str] = None) -> AssembledResponse:
    """Plain-text error response; the body defaults to the reason phrase."""
    body = (message or status_text(status_code)).encode("utf-8")
    return assemble("text/plain; charset=utf-8", body, status_code=status_code)
