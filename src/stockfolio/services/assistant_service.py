"""Portfolio assistant backed by an OpenAI model."""

import json
import logging
from typing import Any, Optional

from stockfolio.domain.views import PortfolioSummary, Position
from stockfolio.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a helpful and friendly US stock portfolio assistant.\n"
    "Analyze the provided JSON data which contains the user's current portfolio "
    "positions, trading cash, and a summary.\n"
    "The user will ask questions about their portfolio. Provide concise and accurate "
    "answers based *only* on the data provided.\n"
    "Format numerical values as currency where appropriate (e.g., $1,234.56).\n"
    "Do not provide financial advice or make any predictions.\n"
    "Current portfolio data is as follows:\n"
)

FALLBACK_REPLY = (
    "Sorry, I'm having trouble connecting to my brain right now. "
    "Please try again in a moment."
)


def build_context(positions: list[Position], summary: PortfolioSummary) -> dict[str, Any]:
    """Snapshot of computed data handed to the model."""
    return {
        "summary": {
            "totalMarketValue": summary.total_market_value,
            "totalGainLoss": summary.total_gain_loss,
            "totalGainLossPercent": summary.total_gain_loss_percent,
            "tradingCash": summary.trading_cash,
        },
        "positions": [
            {
                "ticker": p.ticker,
                "companyName": p.company_name,
                "shares": p.shares,
                "averageCost": p.average_cost,
                "currentPrice": p.current_price,
                "marketValue": p.market_value,
                "gainLoss": p.gain_loss,
            }
            for p in positions
        ],
    }


class AssistantService:
    """Answers free-text questions about the active account. Never raises."""

    def __init__(
        self,
        dashboard: DashboardService,
        api_key: Optional[str] = None,
        model: str = "gpt-4.1-mini",
        client: Any = None,
    ):
        self._dashboard = dashboard
        self._api_key = api_key
        self._model = model
        self._client = client

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(api_key=self._api_key)
        return self._client

    def ask(self, question: str) -> str:
        """Return the model's answer, or a fixed apology on any failure."""
        try:
            snapshot = self._dashboard.get_snapshot()
            context = json.dumps(build_context(snapshot.positions, snapshot.summary), indent=2)
            response = self._get_client().responses.create(
                model=self._model,
                input=[
                    {"role": "system", "content": f"{SYSTEM_INSTRUCTION}\n{context}"},
                    {"role": "user", "content": question},
                ],
            )
            return response.output_text
        except Exception as exc:
            logger.exception("Assistant call failed: %s", exc)
            return FALLBACK_REPLY
