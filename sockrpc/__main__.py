"""Allow running as ``python -m sockrpc``."""

from sockrpc.cli import main

if __name__ == "__main__":
    main()
