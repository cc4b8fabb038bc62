# =============================================================================
# main.py  —  Entry Point for the kweenkl MCP server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py                          # stdio (Claude Desktop etc.)
#   uv run python main.py --transport sse --port 8080
#   uv run python main.py --list-tools             # show advertised tools
#
# Or, once installed:  kweenkl-mcp [same options]
#
# WHAT HAPPENS:
#   1. Loads .env (KWEENKL_API_URL, KWEENKL_DEVICE_TOKEN, KWEENKL_DEBUG, ...)
#   2. Reads settings ONCE; they stay fixed for the life of the process
#   3. Configures logging to stderr (stdout belongs to the MCP protocol)
#   4. Builds the FastMCP server and serves it
#
# A failure in steps 2-4 is fatal: the process prints the reason to stderr
# and exits with status 1.
# =============================================================================

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

# Load environment variables from .env file before settings are read.
load_dotenv()

from fastmcp import Client
from pydantic import ValidationError

from core.config import load_settings
from tools.mcp_server import configure_logging, create_server

logger = logging.getLogger("kweenkl")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kweenkl-mcp",
        description="MCP server for sending kweenkl push notifications.",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "http"],
        default="stdio",
        help="MCP transport to serve (default: stdio)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind host for sse/http")
    parser.add_argument("--port", type=int, default=8080, help="Bind port for sse/http")
    parser.add_argument(
        "--list-tools",
        action="store_true",
        help="Print the tools this configuration advertises, then exit",
    )
    return parser.parse_args(argv)


async def list_tools(server) -> None:
    """Print every advertised tool with its required parameters."""
    async with Client(server) as client:
        tools = await client.list_tools()

    print("📋 Available tools:")
    for i, tool in enumerate(tools, start=1):
        required = tool.inputSchema.get("required", [])
        print(f"\n{i}. {tool.name}")
        print(f"   Description: {(tool.description or '')[:80]}...")
        print(f"   Required params: {', '.join(required) or 'none'}")
    print(f"\n✅ Total tools: {len(tools)}")
    if len(tools) == 1:
        print(
            "\n⚠️  Channel management tools require KWEENKL_DEVICE_TOKEN to be set."
        )


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings()
    except ValidationError as e:
        print(f"FATAL: invalid kweenkl configuration:\n{e}", file=sys.stderr)
        return 1

    configure_logging(settings.debug)
    logger.debug("Debug mode enabled")

    try:
        server = create_server(settings)
        if args.list_tools:
            asyncio.run(list_tools(server))
            return 0

        logger.info("kweenkl MCP server running on %s", args.transport)
        if args.transport == "stdio":
            server.run()
        else:
            server.run(transport=args.transport, host=args.host, port=args.port)
    except KeyboardInterrupt:
        return 0
    except Exception:
        logger.exception("Fatal error")
        return 1
    return 0


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    sys.exit(main())
