"""Time series tools for RKD MCP Server."""

from typing import Any

from ..client import RkdClient

INTERVALS = ["Daily", "Weekly", "Monthly"]

# Schema for get_timeseries tool
GET_TIMESERIES_SCHEMA = {
    "type": "object",
    "properties": {
        "ric": {
            "type": "string",
            "description": "Reuters Instrument Code",
        },
        "start": {
            "type": "string",
            "description": "Start date (ISO-8601, e.g. 2024-01-01T00:00:00)",
        },
        "end": {
            "type": "string",
            "description": "End date (ISO-8601)",
        },
        "interval": {
            "type": "string",
            "enum": INTERVALS,
            "description": "Interval between data points (default: Daily)",
            "default": "Daily",
        },
    },
    "required": ["ric", "start", "end"],
}


async def get_timeseries(client: RkdClient, args: dict) -> Any:
    """
    Get historical interday price data.

    Args:
        client: RkdClient instance
        args: Tool arguments with ric, start, end and optional interval

    Returns:
        Raw GetInterdayTimeSeries response
    """
    interval = args.get("interval") or "Daily"
    if interval not in INTERVALS:
        raise ValueError(f"Invalid interval: {interval}. Expected one of {INTERVALS}")

    return await client.get_timeseries(
        args["ric"],
        start=args["start"],
        end=args["end"],
        interval=interval,
    )
