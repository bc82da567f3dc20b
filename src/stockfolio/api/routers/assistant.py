"""Portfolio assistant endpoint."""

from fastapi import APIRouter, Depends

from stockfolio.api.deps import get_assistant
from stockfolio.api.schemas import AskRequest, AskResponse
from stockfolio.services import AssistantService

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/ask", response_model=AskResponse)
def ask(data: AskRequest, assistant: AssistantService = Depends(get_assistant)) -> AskResponse:
    """Ask a question about the active account."""
    return AskResponse(answer=assistant.ask(data.question))
