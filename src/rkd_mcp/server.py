"""
RKD MCP Server - Main entry point

Exposes Refinitiv Knowledge Direct data to MCP clients over stdio.
"""

import asyncio
import json
import logging
import sys
import time
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .auth import CredentialAcquirer, ServiceIdentity, TokenCache
from .client import RkdClient
from .config import settings
from .tools import charts, news, quotes, timeseries

logger = logging.getLogger(__name__)

# Global instances (initialized lazily)
_token_cache: TokenCache | None = None
_rkd_client: RkdClient | None = None


def configure_logging() -> None:
    """Send logs to stderr; stdout carries the MCP stream."""
    logging.basicConfig(
        level=getattr(logging, settings().log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def get_token_cache() -> TokenCache:
    """Get or create TokenCache instance."""
    global _token_cache
    if _token_cache is None:
        cfg = settings()
        acquirer = CredentialAcquirer(
            base_url=cfg.rkd_base_url,
            timeout=cfg.rkd_timeout,
            default_lifetime=cfg.rkd_default_token_lifetime_seconds,
            clock=time.time,
        )
        identity = ServiceIdentity(
            application_id=cfg.rkd_app_id,
            username=cfg.rkd_username,
            password=cfg.rkd_password.get_secret_value(),
        )
        _token_cache = TokenCache(
            acquirer=acquirer,
            identity=identity,
            refresh_margin=cfg.rkd_refresh_margin_seconds,
            clock=acquirer.clock,
        )
    return _token_cache


def get_rkd_client() -> RkdClient:
    """Get or create RkdClient instance."""
    global _rkd_client
    if _rkd_client is None:
        cfg = settings()
        _rkd_client = RkdClient(
            token_cache=get_token_cache(),
            base_url=cfg.rkd_base_url,
            timeout=cfg.rkd_timeout,
        )
    return _rkd_client


# Initialize MCP server
server = Server("rkd-mcp")


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools."""
    return [
        Tool(
            name="get_quote",
            description="Get a real-time quote for a security",
            inputSchema=quotes.GET_QUOTE_SCHEMA,
        ),
        Tool(
            name="get_timeseries",
            description="Get historical interday price data for a security",
            inputSchema=timeseries.GET_TIMESERIES_SCHEMA,
        ),
        Tool(
            name="get_news",
            description="Retrieve news headlines matching a query",
            inputSchema=news.GET_NEWS_SCHEMA,
        ),
        Tool(
            name="get_chart",
            description="Get a chart image for a security",
            inputSchema=charts.GET_CHART_SCHEMA,
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool invocations."""
    logger.info(f"Tool called: {name}")
    logger.debug(f"Arguments: {arguments}")

    handlers: dict[str, Any] = {
        "get_quote": quotes.get_quote,
        "get_timeseries": timeseries.get_timeseries,
        "get_news": news.get_news,
        "get_chart": charts.get_chart,
    }

    handler = handlers.get(name)
    if not handler:
        raise ValueError(f"Unknown tool: {name}")

    try:
        result = await handler(get_rkd_client(), arguments or {})
        return [TextContent(type="text", text=json.dumps(result, indent=2, default=str))]
    except Exception as e:
        logger.error(f"Tool {name} failed: {e}", exc_info=True)
        error_response = {
            "error": True,
            "error_type": type(e).__name__,
            "message": str(e),
            "status_code": getattr(e, "status_code", None),
        }
        return [TextContent(type="text", text=json.dumps(error_response, indent=2))]


async def run_server():
    """Run the MCP server."""
    logger.info("Starting RKD MCP Server...")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main():
    """Entry point for the server."""
    configure_logging()
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
