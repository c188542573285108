"""Quote tools for RKD MCP Server."""

from typing import Any

from ..client import RkdClient

# Schema for get_quote tool
GET_QUOTE_SCHEMA = {
    "type": "object",
    "properties": {
        "ric": {
            "type": "string",
            "description": "Reuters Instrument Code (e.g., 'AAPL.O', 'VOD.L')",
        },
        "scope": {
            "type": "string",
            "description": "Field scope of the quote (default: All)",
            "default": "All",
        },
    },
    "required": ["ric"],
}


async def get_quote(client: RkdClient, args: dict) -> Any:
    """
    Get real-time quote for a single instrument.

    Args:
        client: RkdClient instance
        args: Tool arguments with 'ric' and optional 'scope'

    Returns:
        Raw RetrieveItem response
    """
    return await client.get_quote(args["ric"], scope=args.get("scope") or "All")
