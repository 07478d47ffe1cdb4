"""sockrpc - a minimal line-delimited JSON RPC server over a Unix domain socket."""

__version__ = "0.1.0"
