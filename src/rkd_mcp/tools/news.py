"""News tools for RKD MCP Server."""

from typing import Any

from ..client import RkdClient

# Schema for get_news tool
GET_NEWS_SCHEMA = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "description": "Headline query (e.g., 'R:AAPL.O' or 'Topic:EUROPE')",
        },
        "maxCount": {
            "type": "integer",
            "description": "Maximum number of headlines (default: 25)",
            "default": 25,
        },
        "start": {
            "type": "string",
            "description": "Range start (ISO-8601), used only together with end",
        },
        "end": {
            "type": "string",
            "description": "Range end (ISO-8601), used only together with start",
        },
    },
    "required": ["query"],
}


async def get_news(client: RkdClient, args: dict) -> Any:
    """
    Retrieve news headlines.

    Args:
        client: RkdClient instance
        args: Tool arguments with 'query' and optional maxCount, start, end

    Returns:
        Raw RetrieveHeadlineML response
    """
    return await client.get_news(
        args["query"],
        max_count=args.get("maxCount") or 25,
        start=args.get("start"),
        end=args.get("end"),
    )
