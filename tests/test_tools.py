"""Tests for the tools module."""

import pytest

from rkd_mcp.tools import charts, news, quotes, timeseries


class RecordingClient:
    """Stands in for RkdClient and records capability calls."""

    def __init__(self):
        self.calls = []

    async def get_quote(self, ric, scope="All"):
        self.calls.append(("get_quote", ric, {"scope": scope}))
        return {"quote": ric}

    async def get_timeseries(self, ric, start, end, interval="Daily"):
        self.calls.append(("get_timeseries", ric, {"start": start, "end": end, "interval": interval}))
        return {"series": ric}

    async def get_news(self, query, max_count=25, start=None, end=None):
        self.calls.append(("get_news", query, {"max_count": max_count, "start": start, "end": end}))
        return {"headlines": []}

    async def get_chart(self, ric, chart_type="Line", period="1Y", width=600, height=400):
        self.calls.append(
            (
                "get_chart",
                ric,
                {"chart_type": chart_type, "period": period, "width": width, "height": height},
            )
        )
        return {"chart": ric}


class TestQuoteTool:
    """Tests for the get_quote tool."""

    @pytest.mark.asyncio
    async def test_get_quote_default_scope(self):
        """Test scope defaults to All."""
        client = RecordingClient()
        result = await quotes.get_quote(client, {"ric": "AAPL.O"})

        assert result == {"quote": "AAPL.O"}
        assert client.calls == [("get_quote", "AAPL.O", {"scope": "All"})]

    @pytest.mark.asyncio
    async def test_get_quote_custom_scope(self):
        """Test an explicit scope is forwarded."""
        client = RecordingClient()
        await quotes.get_quote(client, {"ric": "AAPL.O", "scope": "Bid"})

        assert client.calls[0][2] == {"scope": "Bid"}

    @pytest.mark.asyncio
    async def test_get_quote_requires_ric(self):
        """Test a missing ric is an error."""
        with pytest.raises(KeyError):
            await quotes.get_quote(RecordingClient(), {})

    def test_schema_requires_ric(self):
        assert quotes.GET_QUOTE_SCHEMA["required"] == ["ric"]

    def test_schema_scope_default(self):
        """Test the advertised scope default matches the handler default."""
        assert quotes.GET_QUOTE_SCHEMA["properties"]["scope"]["default"] == "All"


class TestTimeseriesTool:
    """Tests for the get_timeseries tool."""

    @pytest.mark.asyncio
    async def test_get_timeseries_default_interval(self):
        """Test interval defaults to Daily."""
        client = RecordingClient()
        await timeseries.get_timeseries(
            client, {"ric": "VOD.L", "start": "2024-01-01", "end": "2024-02-01"}
        )

        assert client.calls == [
            ("get_timeseries", "VOD.L", {"start": "2024-01-01", "end": "2024-02-01", "interval": "Daily"})
        ]

    @pytest.mark.asyncio
    async def test_get_timeseries_invalid_interval(self):
        """Test an unknown interval is rejected before any request."""
        client = RecordingClient()
        with pytest.raises(ValueError):
            await timeseries.get_timeseries(
                client,
                {"ric": "VOD.L", "start": "2024-01-01", "end": "2024-02-01", "interval": "Hourly"},
            )
        assert client.calls == []

    def test_schema_required_fields(self):
        assert timeseries.GET_TIMESERIES_SCHEMA["required"] == ["ric", "start", "end"]


class TestNewsTool:
    """Tests for the get_news tool."""

    @pytest.mark.asyncio
    async def test_get_news_defaults(self):
        """Test maxCount defaults to 25 and no range is sent."""
        client = RecordingClient()
        await news.get_news(client, {"query": "Topic:EUROPE"})

        assert client.calls == [
            ("get_news", "Topic:EUROPE", {"max_count": 25, "start": None, "end": None})
        ]

    @pytest.mark.asyncio
    async def test_get_news_with_range(self):
        """Test maxCount and range are forwarded."""
        client = RecordingClient()
        await news.get_news(
            client, {"query": "R:AAPL.O", "maxCount": 5, "start": "2024-01-01", "end": "2024-01-02"}
        )

        assert client.calls[0][2] == {"max_count": 5, "start": "2024-01-01", "end": "2024-01-02"}


class TestChartTool:
    """Tests for the get_chart tool."""

    @pytest.mark.asyncio
    async def test_get_chart_defaults(self):
        """Test chart defaults match the service defaults."""
        client = RecordingClient()
        await charts.get_chart(client, {"ric": "MSFT.O"})

        assert client.calls == [
            (
                "get_chart",
                "MSFT.O",
                {"chart_type": "Line", "period": "1Y", "width": 600, "height": 400},
            )
        ]

    @pytest.mark.asyncio
    async def test_get_chart_custom(self):
        """Test explicit styling is forwarded."""
        client = RecordingClient()
        await charts.get_chart(
            client,
            {"ric": "MSFT.O", "chartType": "Candlestick", "period": "6M", "width": 800, "height": 300},
        )

        assert client.calls[0][2] == {
            "chart_type": "Candlestick",
            "period": "6M",
            "width": 800,
            "height": 300,
        }

    @pytest.mark.asyncio
    async def test_get_chart_invalid_period(self):
        """Test an unknown period is rejected."""
        with pytest.raises(ValueError):
            await charts.get_chart(RecordingClient(), {"ric": "MSFT.O", "period": "10Y"})

    @pytest.mark.asyncio
    async def test_get_chart_invalid_type(self):
        """Test an unknown chart type is rejected."""
        with pytest.raises(ValueError):
            await charts.get_chart(RecordingClient(), {"ric": "MSFT.O", "chartType": "Pie"})
