"""Chart tools for RKD MCP Server."""

from typing import Any

from ..client import RkdClient

CHART_TYPES = ["Line", "Candlestick", "Bar"]
PERIODS = ["1M", "3M", "6M", "1Y", "2Y"]

# Schema for get_chart tool
GET_CHART_SCHEMA = {
    "type": "object",
    "properties": {
        "ric": {
            "type": "string",
            "description": "Reuters Instrument Code",
        },
        "chartType": {
            "type": "string",
            "enum": CHART_TYPES,
            "description": "Chart style (default: Line)",
            "default": "Line",
        },
        "period": {
            "type": "string",
            "enum": PERIODS,
            "description": "Period covered by the chart (default: 1Y)",
            "default": "1Y",
        },
        "width": {
            "type": "integer",
            "description": "Image width in pixels (default: 600)",
            "default": 600,
        },
        "height": {
            "type": "integer",
            "description": "Image height in pixels (default: 400)",
            "default": 400,
        },
    },
    "required": ["ric"],
}


async def get_chart(client: RkdClient, args: dict) -> Any:
    """
    Get a chart image for an instrument.

    Args:
        client: RkdClient instance
        args: Tool arguments with 'ric' and optional style/size params

    Returns:
        Raw GetChart response (contains the chart image URL)
    """
    chart_type = args.get("chartType") or "Line"
    period = args.get("period") or "1Y"
    if chart_type not in CHART_TYPES:
        raise ValueError(f"Invalid chartType: {chart_type}. Expected one of {CHART_TYPES}")
    if period not in PERIODS:
        raise ValueError(f"Invalid period: {period}. Expected one of {PERIODS}")

    return await client.get_chart(
        args["ric"],
        chart_type=chart_type,
        period=period,
        width=args.get("width") or 600,
        height=args.get("height") or 400,
    )
