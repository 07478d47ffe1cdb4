"""Async client for sockrpc servers."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from sockrpc.core.constants import DEFAULT_MAX_LINE_LENGTH, DEFAULT_SOCKET_PATH
from sockrpc.core.encoding import decode_line, encode_line
from sockrpc.core.errors import SockRpcError
from sockrpc.rpc.protocol import ParseError, parse_response, serialize_request
from sockrpc.rpc.types import Request, Response

logger = logging.getLogger(__name__)


class ClientError(SockRpcError):
    """Exception for client-side errors (connection, timeout, protocol)."""


class SockRpcClient:
    """Async client for a sockrpc Unix socket server.

    The server answers one request per connection, so every call opens and
    closes its own connection.

    Usage:
        async with SockRpcClient("/tmp/rpc.sock") as client:
            response = await client.call("reverse", ["abc"])
            value, value_type = client.check(response)
    """

    def __init__(
        self,
        socket_path: str | Path = DEFAULT_SOCKET_PATH,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the client.

        Args:
            socket_path: Path of the server's Unix domain socket.
            timeout: Seconds allowed for connecting, sending and receiving.
        """
        self._socket_path = str(socket_path)
        self._timeout = timeout
        self._request_id = 0
        logger.debug("SockRpcClient initialized: socket=%s, timeout=%s", socket_path, timeout)

    async def __aenter__(self) -> SockRpcClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass

    def _next_id(self) -> int:
        """Generate the next request ID."""
        self._request_id += 1
        return self._request_id

    async def call(
        self,
        method: str,
        params: Any = None,
        param_types: list[str] | None = None,
        request_id: int | None = None,
    ) -> Response:
        """Send one request and return the parsed response.

        Args:
            method: The RPC method name.
            params: Positional arguments, normally a list.
            param_types: Optional type names sent alongside params.
            request_id: Explicit request id. Auto-incremented when omitted.

        Returns:
            The parsed Response, which may carry an error.

        Raises:
            ClientError: On connection error, timeout, or protocol error.
        """
        request = Request(
            method=method,
            params=params,
            id=request_id if request_id is not None else self._next_id(),
            param_types=param_types,
        )
        logger.debug("RPC call: method=%s, id=%s", method, request.id)
        try:
            request_line = serialize_request(request)
        except ValueError as e:
            # NaN and infinities have no JSON form
            raise ClientError(f"Cannot encode request: {e}") from e
        line = await self.send_line(request_line)
        try:
            return parse_response(line)
        except ParseError as e:
            logger.warning("Invalid server response for method=%s: %s", method, e)
            raise ClientError(f"Invalid server response: {e.message}") from e

    async def send_line(self, line: str) -> str:
        """Send one raw line and return the raw response line.

        Args:
            line: Request text. A trailing newline is added if missing.

        Returns:
            The response line with its terminator.

        Raises:
            ClientError: On connection error, timeout, or an empty reply.
        """
        try:
            return await asyncio.wait_for(self._exchange(line), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.warning("Request timed out after %ss", self._timeout)
            raise ClientError(f"Request timed out after {self._timeout}s") from e
        except OSError as e:
            logger.warning("Connection failed to %s: %s", self._socket_path, e)
            raise ClientError(f"Connection failed: {e}") from e

    async def _exchange(self, line: str) -> str:
        reader, writer = await asyncio.open_unix_connection(
            self._socket_path, limit=DEFAULT_MAX_LINE_LENGTH
        )
        try:
            writer.write(encode_line(line))
            await writer.drain()
            try:
                raw = await reader.readline()
            except ValueError as e:
                # StreamReader reports an over-long line as ValueError
                raise ClientError(f"Response line too long: {e}") from e
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug("Connection close failed: %s", e)
        if not raw:
            raise ClientError("Server closed the connection without responding")
        try:
            return decode_line(raw)
        except UnicodeDecodeError as e:
            raise ClientError(f"Response is not valid UTF-8: {e}") from e

    @staticmethod
    def check(response: Response) -> tuple[str, str]:
        """Extract (result, result_type) or raise ClientError on an error response.

        Args:
            response: The Response to check.

        Raises:
            ClientError: If the response contains an error, or carries
                neither an error nor a complete result.
        """
        if response.error:
            code = response.error.get("code", -1)
            message = response.error.get("message", "Unknown error")
            logger.warning("RPC error %d: %s", code, message)
            raise ClientError(f"RPC error {code}: {message}")
        if response.result is None or response.result_type is None:
            raise ClientError(f"Response {response.id} has no result")
        return response.result, response.result_type
