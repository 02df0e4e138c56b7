"""Allow ``python -m json_mcp`` to start the stdio server."""

from json_mcp.mcp.server import main

if __name__ == "__main__":
    main()
