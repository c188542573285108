"""
RKD API HTTP client.

Every business request goes through ``dispatch``, which attaches a valid
service token from the TokenCache.
"""

import logging
from typing import Any, Optional

import httpx

from .auth import JSON_CONTENT_TYPE, TokenCache

logger = logging.getLogger(__name__)


class DispatchError(Exception):
    """Raised when a business request to the RKD API fails."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        path: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.path = path


class RkdClient:
    """Async HTTP client for RKD API."""

    AUTH_HEADER = "X-Trkd-Auth-Token"

    QUOTES_PATH = "/Quotes/Quotes.svc/REST/Quotes_1/RetrieveItem_3"
    TIMESERIES_PATH = "/TimeSeries/TimeSeries.svc/REST/TimeSeries_1/GetInterdayTimeSeries_5"
    NEWS_PATH = "/News/News.svc/REST/News_1/RetrieveHeadlineML_1"
    CHART_PATH = "/Charts/Charts.svc/REST/Charts_1/GetChart_2"

    def __init__(
        self,
        token_cache: TokenCache,
        base_url: str,
        timeout: int = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize RkdClient.

        Args:
            token_cache: TokenCache instance for authentication
            base_url: RKD API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.token_cache = token_cache
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def dispatch(self, path: str, payload: dict) -> Any:
        """
        Make an authenticated request to RKD API.

        Args:
            path: Service path relative to the base URL
            payload: JSON request body

        Returns:
            Parsed JSON response, unchanged

        Raises:
            AcquisitionError: If no service token can be obtained
            DispatchError: If the request fails or returns a non-success status
        """
        credential = await self.token_cache.get_usable_credential()
        headers = {
            "content-type": JSON_CONTENT_TYPE,
            self.AUTH_HEADER: credential.token,
        }
        url = f"{self.base_url}{path}"

        try:
            async with httpx.AsyncClient(
                timeout=float(self.timeout), transport=self.transport
            ) as client:
                response = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            raise DispatchError(f"Request to {path} failed: {e}", path=path) from e

        logger.debug(f"POST {path} -> {response.status_code}")

        # No retry on 401: the caller decides what to do with a rejected token
        if not response.is_success:
            raise DispatchError(
                f"Request to {path} failed with status {response.status_code}",
                status_code=response.status_code,
                path=path,
            )

        try:
            return response.json()
        except ValueError as e:
            raise DispatchError(
                f"Response from {path} is not valid JSON",
                status_code=response.status_code,
                path=path,
            ) from e

    # ==========================================================================
    # Quotes
    # ==========================================================================

    async def get_quote(self, ric: str, scope: str = "All") -> Any:
        """
        Get a real-time quote for an instrument.

        Args:
            ric: Reuters Instrument Code (e.g., 'AAPL.O')
            scope: Field scope of the quote

        Returns:
            RetrieveItem response
        """
        body = {
            "RetrieveItem_Request_3": {
                "TrimResponse": False,
                "ItemRequest": [
                    {
                        "RequestKey": [{"Name": ric, "NameType": "RIC"}],
                        "Scope": scope,
                    }
                ],
            }
        }
        return await self.dispatch(self.QUOTES_PATH, body)

    # ==========================================================================
    # Time Series
    # ==========================================================================

    async def get_timeseries(
        self, ric: str, start: str, end: str, interval: str = "Daily"
    ) -> Any:
        """
        Get interday price history.

        Args:
            ric: Reuters Instrument Code
            start: Start date (ISO-8601)
            end: End date (ISO-8601)
            interval: Daily, Weekly, or Monthly

        Returns:
            GetInterdayTimeSeries response
        """
        body = {
            "GetInterdayTimeSeries_Request_5": {
                "Symbol": ric,
                "StartDate": start,
                "EndDate": end,
                "Interval": interval,
            }
        }
        return await self.dispatch(self.TIMESERIES_PATH, body)

    # ==========================================================================
    # News
    # ==========================================================================

    async def get_news(
        self,
        query: str,
        max_count: int = 25,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> Any:
        """
        Retrieve news headlines.

        Args:
            query: Headline query expression
            max_count: Maximum number of headlines
            start: Optional range start, only used together with end
            end: Optional range end, only used together with start

        Returns:
            RetrieveHeadlineML response
        """
        request: dict[str, Any] = {
            "Query": query,
            "MaxCount": max_count,
        }
        if start and end:
            request["DateRange"] = {"StartDate": start, "EndDate": end}
        return await self.dispatch(self.NEWS_PATH, {"RetrieveHeadlineML_Request_1": request})

    # ==========================================================================
    # Charts
    # ==========================================================================

    async def get_chart(
        self,
        ric: str,
        chart_type: str = "Line",
        period: str = "1Y",
        width: int = 600,
        height: int = 400,
    ) -> Any:
        """
        Get a chart image for an instrument.

        Args:
            ric: Reuters Instrument Code
            chart_type: Line, Candlestick, or Bar
            period: 1M, 3M, 6M, 1Y, or 2Y
            width: Image width in pixels
            height: Image height in pixels

        Returns:
            GetChart response
        """
        body = {
            "GetChart_Request_2": {
                "Symbol": ric,
                "ChartType": chart_type,
                "Period": period,
                "Width": width,
                "Height": height,
            }
        }
        return await self.dispatch(self.CHART_PATH, body)
