"""Investigation endpoints - run a search and read a session's state."""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from server.dependencies import get_api_key, get_config, get_session_store
from server.schemas.requests import InvestigationRequest
from server.schemas.responses import InvestigationStateDTO
from server.utils import new_session_id
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Investigations"])


@router.post("/investigations", response_model=InvestigationStateDTO)
async def create_investigation(
    body: InvestigationRequest,
    request: Request,
    api_key: str = Depends(get_api_key),
    store=Depends(get_session_store),
    config=Depends(get_config),
):
    """
    Run one investigation on the session's pipeline and return its state.

    Provider failures come back as status "failed" with HTTP 200; a blank
    subject returns the session's state unchanged.

    When a newer POST on the same session replaces this one before it
    finishes, the response carries the newer run's state with
    ``superseded`` set to true. Under the reject policy a POST made while
    another run is in flight returns that run's state unchanged.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    if len(body.subject_name.strip()) > config.MAX_SUBJECT_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"subject_name exceeds {config.MAX_SUBJECT_LENGTH} characters",
        )

    session_id = body.session_id or new_session_id()
    pipeline = store.get_or_create(session_id)

    logger.info(
        "Investigation requested",
        extra={"extra_fields": {"request_id": request_id, "session_id": session_id}},
    )

    started_at = pipeline.generation
    await pipeline.investigate(body.subject_name)
    # an accepted call bumps the generation once; any further bump is a newer call
    superseded = pipeline.generation > started_at + 1
    if superseded:
        logger.info(
            "Investigation superseded by a newer request",
            extra={"extra_fields": {"request_id": request_id, "session_id": session_id}},
        )
    return InvestigationStateDTO.from_state(
        session_id, pipeline.current_state, superseded=superseded
    )


@router.get("/investigations/{session_id}", response_model=InvestigationStateDTO)
async def get_investigation(
    session_id: str,
    api_key: str = Depends(get_api_key),
    store=Depends(get_session_store),
):
    """Return the current state of a session's pipeline."""
    pipeline = store.get(session_id)
    if pipeline is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown session")
    return InvestigationStateDTO.from_state(session_id, pipeline.current_state)
