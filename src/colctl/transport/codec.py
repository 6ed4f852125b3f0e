"""Datagram codec for Request/Response.

Each message is the full body of one UDP datagram: compact JSON produced by
pydantic, with no length prefix or checksum.  Integrity is delegated to the
decode step; anything pydantic cannot validate is a MalformedResponse.
"""

from __future__ import annotations

from pydantic import ValidationError

from colctl.domain.messages import Request, Response
from colctl.errors import EncodingTooLarge, MalformedResponse

MAX_DATAGRAM = 65535


def encode_request(request: Request, *, limit: int = MAX_DATAGRAM) -> bytes:
    """Serialize *request* for the wire.

    Raises EncodingTooLarge if the encoding exceeds *limit* bytes.
    """
    data = request.model_dump_json(exclude_none=True).encode("utf-8")
    if len(data) > limit:
        msg = f"request '{request.command}' encodes to {len(data)} bytes, limit is {limit}"
        raise EncodingTooLarge(msg)
    return data


def decode_request(data: bytes) -> Request:
    """Inverse of :func:`encode_request`; used by responders and tests."""
    return Request.model_validate_json(data)


def encode_response(response: Response) -> bytes:
    return response.model_dump_json().encode("utf-8")


def decode_response(data: bytes) -> Response:
    """Decode one datagram as a Response.

    Raises MalformedResponse when the bytes are not a valid Response.
    """
    try:
        return Response.model_validate_json(data)
    except ValidationError as exc:
        msg = f"undecodable response ({len(data)} bytes, {exc.error_count()} error(s))"
        raise MalformedResponse(msg) from exc
