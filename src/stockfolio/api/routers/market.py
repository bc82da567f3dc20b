"""Market data endpoints."""

from fastapi import APIRouter, Depends

from stockfolio.api.deps import get_dashboard, get_market_data
from stockfolio.api.schemas import MarketStatusResponse, QuoteResponse
from stockfolio.core.exceptions import TickerLookupError, TickerNotFoundError
from stockfolio.services import DashboardService, MarketDataGateway

router = APIRouter(prefix="/market", tags=["market"])


@router.get("/quote/{ticker}", response_model=QuoteResponse)
def get_quote(
    ticker: str,
    market: MarketDataGateway = Depends(get_market_data),
) -> QuoteResponse:
    """Look up a single quote."""
    try:
        quote = market.fetch_quote(ticker)
    except TickerNotFoundError as exc:
        raise TickerLookupError(ticker.strip().upper()) from exc
    return QuoteResponse.model_validate(quote)


@router.get("/status", response_model=MarketStatusResponse)
def get_status(dashboard: DashboardService = Depends(get_dashboard)) -> MarketStatusResponse:
    """Whether market data is live or mock, and when it was last refreshed."""
    return MarketStatusResponse(
        is_mock=dashboard.is_mock,
        last_refreshed_at=dashboard.last_refreshed_at,
    )
