"""Portfolio valuation endpoints for the active account."""

from fastapi import APIRouter, Depends

from stockfolio.api.deps import get_dashboard
from stockfolio.api.routers.accounts import to_account_response
from stockfolio.api.schemas import (
    AllocationItemResponse,
    HistoricalPointResponse,
    PositionResponse,
    RefreshResponse,
    SnapshotResponse,
    SummaryResponse,
)
from stockfolio.domain.views import Position
from stockfolio.services import DashboardService

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


def to_position_response(p: Position) -> PositionResponse:
    return PositionResponse(
        ticker=p.ticker,
        company_name=p.company_name,
        shares=p.shares,
        average_cost=p.average_cost,
        current_price=p.current_price,
        market_value=p.market_value,
        cost_basis=p.cost_basis,
        gain_loss=p.gain_loss,
        gain_loss_percent=p.gain_loss_percent,
        volume=p.volume,
        day_high=p.day_high,
        day_low=p.day_low,
        previous_close=p.previous_close,
    )


@router.get("", response_model=SnapshotResponse)
def get_snapshot(dashboard: DashboardService = Depends(get_dashboard)) -> SnapshotResponse:
    """Positions, summary, allocation and history in one response."""
    snapshot = dashboard.get_snapshot()
    return SnapshotResponse(
        account=to_account_response(snapshot.account, snapshot.account.id),
        positions=[to_position_response(p) for p in snapshot.positions],
        summary=SummaryResponse.model_validate(snapshot.summary),
        allocation=[AllocationItemResponse.model_validate(a) for a in snapshot.allocation],
        history=[HistoricalPointResponse.model_validate(h) for h in snapshot.history],
        is_mock=snapshot.is_mock,
        as_of=snapshot.as_of,
    )


@router.get("/positions", response_model=list[PositionResponse])
def get_positions(dashboard: DashboardService = Depends(get_dashboard)) -> list[PositionResponse]:
    """Visible positions marked to the latest quotes."""
    return [to_position_response(p) for p in dashboard.get_positions()]


@router.get("/summary", response_model=SummaryResponse)
def get_summary(dashboard: DashboardService = Depends(get_dashboard)) -> SummaryResponse:
    return SummaryResponse.model_validate(dashboard.get_summary())


@router.get("/history", response_model=list[HistoricalPointResponse])
def get_history(dashboard: DashboardService = Depends(get_dashboard)) -> list[HistoricalPointResponse]:
    """Trailing daily values, oldest first. An empty list means no data."""
    return [HistoricalPointResponse.model_validate(h) for h in dashboard.get_history()]


@router.post("/refresh", response_model=RefreshResponse)
def refresh(dashboard: DashboardService = Depends(get_dashboard)) -> RefreshResponse:
    """Re-fetch market data now. Skipped if a refresh is already running."""
    refreshed = dashboard.refresh()
    return RefreshResponse(
        refreshed=refreshed,
        is_mock=dashboard.is_mock,
        as_of=dashboard.last_refreshed_at,
    )
