"""Pydantic models for sockrpc configuration validation."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from sockrpc.core.constants import DEFAULT_MAX_LINE_LENGTH, DEFAULT_SOCKET_PATH

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class ServerConfig(BaseModel):
    """Configuration for the socket server.

    Example in config.json:
        "server": {
            "socket_path": "/tmp/rpc.sock",
            "keep_alive": false
        }
    """

    model_config = ConfigDict(extra="forbid")

    socket_path: str = DEFAULT_SOCKET_PATH
    """Filesystem path of the Unix domain socket to listen on."""

    keep_alive: bool = False
    """Serve further request lines on a connection instead of closing after
    the first response."""

    max_line_length: int = Field(default=DEFAULT_MAX_LINE_LENGTH, gt=0)
    """Largest request line accepted, in bytes (16 MiB by default). Longer
    lines drop the connection without a response."""


class LoggingConfig(BaseModel):
    """Configuration for server logging."""

    model_config = ConfigDict(extra="forbid")

    log_dir: str | None = None
    """Directory for server.log. None disables file logging."""

    level: LogLevel = "INFO"
    """Level for the file handler."""

    console_level: LogLevel = "INFO"
    """Level for the stderr handler."""


class ClientConfig(BaseModel):
    """Configuration for the bundled client."""

    model_config = ConfigDict(extra="forbid")

    timeout: float = Field(default=10.0, gt=0)
    """Seconds to wait for connect plus response."""


class Config(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    server: ServerConfig = ServerConfig()
    logging: LoggingConfig = LoggingConfig()
    client: ClientConfig = ClientConfig()
