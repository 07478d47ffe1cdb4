"""Unix domain socket server for line-delimited RPC requests.

Each accepted connection runs in its own asyncio task. The task reads one
request line, writes one response line, and closes the connection. With
keep_alive enabled the task instead keeps answering lines until the client
closes its end.

There are no read timeouts: a client that connects and never sends a line
holds its task until it disconnects.

Example usage:
    dispatcher = Dispatcher()
    await run_server("/tmp/rpc.sock", dispatcher)
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from sockrpc.core.constants import DEFAULT_MAX_LINE_LENGTH
from sockrpc.core.encoding import decode_line, encode_line
from sockrpc.core.errors import SockRpcError
from sockrpc.rpc.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


class ServerError(SockRpcError):
    """Raised when the server cannot bind its socket."""


def remove_stale_socket(path: Path) -> None:
    """Remove a socket file left behind by a previous server.

    Raises:
        ServerError: If something other than a socket occupies the path.
    """
    if not path.exists() and not path.is_symlink():
        return
    if not path.is_socket():
        raise ServerError(f"Refusing to replace non-socket file: {path}")
    logger.info("Removing stale socket: %s", path)
    path.unlink()


async def handle_connection(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    dispatcher: Dispatcher,
    keep_alive: bool = False,
) -> None:
    """Serve one accepted connection.

    Transport failures (read errors, over-long lines, invalid UTF-8, write
    errors) are logged and end the connection without a response. Any other
    unexpected error is logged with its traceback; it never reaches the
    accept loop.

    Args:
        reader: The asyncio StreamReader for the connection.
        writer: The asyncio StreamWriter for the connection.
        dispatcher: Shared dispatcher used to answer each line.
        keep_alive: Answer further lines until EOF instead of closing after
            the first response.
    """
    try:
        while True:
            try:
                raw = await reader.readline()
            except (asyncio.LimitOverrunError, ValueError) as e:
                logger.warning("Request line too long, dropping connection: %s", e)
                return
            except ConnectionError as e:
                logger.warning("Read failed: %s", e)
                return

            if not raw:
                logger.debug("Connection closed by client")
                return

            try:
                line = decode_line(raw)
            except UnicodeDecodeError as e:
                logger.warning("Request is not valid UTF-8, dropping connection: %s", e)
                return

            logger.debug("Received: %s", line.strip())
            response_line = dispatcher.handle_line(line)

            try:
                writer.write(encode_line(response_line))
                await writer.drain()
            except ConnectionError as e:
                logger.warning("Error sending response: %s", e)
                return
            logger.debug("Response sent: %s", response_line.rstrip("\n"))

            if not keep_alive:
                return

    except Exception as e:
        logger.error("Unexpected error handling connection: %s", e, exc_info=True)

    finally:
        try:
            writer.close()
            await writer.wait_closed()
        except Exception as close_err:
            logger.debug("Connection close failed (already closed?): %s", close_err)


async def run_server(
    socket_path: str | Path,
    dispatcher: Dispatcher | None = None,
    keep_alive: bool = False,
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
    started_event: asyncio.Event | None = None,
) -> None:
    """Listen on a Unix domain socket until cancelled.

    A stale socket file at socket_path is removed before binding, and the
    socket file is removed again when the server stops.

    Args:
        socket_path: Filesystem path to bind.
        dispatcher: Dispatcher shared by all connections. Defaults to one
            with the built-in methods.
        keep_alive: Serve multiple request lines per connection.
        max_line_length: Largest accepted request line in bytes.
        started_event: Optional event set once the socket is listening.

    Raises:
        ServerError: If a non-socket file occupies socket_path.
    """
    path = Path(socket_path)
    shared_dispatcher = dispatcher if dispatcher is not None else Dispatcher()

    remove_stale_socket(path)

    async def client_handler(
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        logger.info("New client connected")
        await handle_connection(reader, writer, shared_dispatcher, keep_alive)

    server = await asyncio.start_unix_server(
        client_handler,
        path=str(path),
        limit=max_line_length,
    )

    logger.info("RPC server listening on %s", path)
    if started_event:
        started_event.set()

    try:
        async with server:
            await server.serve_forever()
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to remove socket %s: %s", path, e)
        logger.info("RPC server stopped")
