"""
Response classification for the artifact cache API.

This is the single place where status-code policy lives: every networked
call routes its response through ``check_response``.
"""

import json

import httpx

from actions_cache.exceptions import ActionsCacheError, ProtocolError, RemoteAPIError
from actions_cache.models.cache import RemoteError

RESPONSE_BODY_LIMIT = 32 * 1024


async def read_limited(response: httpx.Response, limit: int = RESPONSE_BODY_LIMIT) -> bytes:
    """
    Read at most ``limit`` bytes of a response body.

    Anything past the limit is left unread and dropped when the response closes.
    """
    buffer = bytearray()
    async for chunk in response.aiter_bytes():
        buffer.extend(chunk[: limit - len(buffer)])
        if len(buffer) >= limit:
            break
    return bytes(buffer)


def translate_error(status_code: int, body: bytes) -> ActionsCacheError:
    """
    Turn a failed response into an exception.

    Args:
        status_code: HTTP status of the response.
        body: Response body, already truncated to the read limit.

    Returns:
        RemoteAPIError when the body is a service error with a message,
        ProtocolError otherwise.
    """
    text = body.decode("utf-8", errors="replace")
    try:
        data = json.loads(body)
    except ValueError:
        data = None
    if not isinstance(data, dict):
        msg = f"Failed to parse error response {status_code}: {text}"
        return ProtocolError(msg, status_code=status_code, body=body)

    remote = RemoteError.from_dict(data)
    if remote.message:
        return RemoteAPIError(
            remote.message,
            status_code=status_code,
            error_code=remote.error_code,
            type_name=remote.type_name,
            type_key=remote.type_key,
        )

    msg = f"Unknown error {status_code}: {text}"
    return ProtocolError(msg, status_code=status_code, body=body)


async def check_response(response: httpx.Response, *, limit: int = RESPONSE_BODY_LIMIT) -> None:
    """
    Raise if the response is not a 2xx.

    Raises:
        RemoteAPIError: If the service returned a structured error.
        ProtocolError: If the error body could not be understood.
    """
    if httpx.codes.is_success(response.status_code):
        return
    body = await read_limited(response, limit)
    raise translate_error(response.status_code, body)
