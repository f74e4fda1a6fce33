# backend/app/routes/v1/sessions.py
"""
Training session routes - API v1

Versioned session endpoints under /api/v1/sessions.
All business logic delegated to TrainingSessionService.

Endpoints:
    GET / - Caller's sessions (as trainer for trainers, else as client)
    POST / - Schedule a session
    GET /stats/overview - Caller's session statistics
    GET /{session_id} - Session details (participants only)
    PUT /{session_id} - Edit a scheduled session
    DELETE /{session_id} - Cancel a scheduled session
    PUT /{session_id}/status - Change status (any value, audited)
    POST /{session_id}/rating - Client rating of a completed session
"""

import asyncio
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies import get_current_active_user, get_training_session_service
from ...core.exceptions import DomainException
from ...models.training_session import SessionStatus, SessionType
from ...models.user import User
from ...schemas.base_responses import SuccessResponse
from ...schemas.training_session import (
    SessionCreate,
    SessionRatingCreate,
    SessionResponse,
    SessionStatsResponse,
    SessionStatusUpdate,
    SessionUpdate,
)
from ...services.training_session_service import TrainingSessionService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["sessions-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=List[SessionResponse])
async def list_sessions(
    status_filter: Optional[SessionStatus] = Query(None, alias="status"),
    session_type: Optional[SessionType] = Query(None, alias="type"),
    current_user: User = Depends(get_current_active_user),
    session_service: TrainingSessionService = Depends(get_training_session_service),
) -> List[SessionResponse]:
    try:
        sessions = await asyncio.to_thread(
            session_service.list_sessions,
            current_user,
            status_filter.value if status_filter else None,
            session_type.value if session_type else None,
        )
        return [SessionResponse.from_session(s) for s in sessions]
    except DomainException as e:
        handle_domain_exception(e)


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreate,
    current_user: User = Depends(get_current_active_user),
    session_service: TrainingSessionService = Depends(get_training_session_service),
) -> SessionResponse:
    """
    Schedule a session with a trainer.

    Rejected when the trainer does not work that weekday (400), the date
    is in the past (400) or the slot overlaps another session (409).
    """
    try:
        session = await asyncio.to_thread(
            session_service.create_session, current_user, payload.model_dump()
        )
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/stats/overview", response_model=SessionStatsResponse)
async def session_stats(
    current_user: User = Depends(get_current_active_user),
    session_service: TrainingSessionService = Depends(get_training_session_service),
) -> SessionStatsResponse:
    try:
        stats = await asyncio.to_thread(session_service.session_stats, current_user)
        return SessionStatsResponse(**stats)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    current_user: User = Depends(get_current_active_user),
    session_service: TrainingSessionService = Depends(get_training_session_service),
) -> SessionResponse:
    try:
        session = await asyncio.to_thread(session_service.get_session, current_user, session_id)
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: str,
    payload: SessionUpdate,
    current_user: User = Depends(get_current_active_user),
    session_service: TrainingSessionService = Depends(get_training_session_service),
) -> SessionResponse:
    try:
        session = await asyncio.to_thread(
            session_service.update_session,
            current_user,
            session_id,
            payload.model_dump(exclude_unset=True),
        )
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{session_id}", response_model=SuccessResponse)
async def cancel_session(
    session_id: str,
    current_user: User = Depends(get_current_active_user),
    session_service: TrainingSessionService = Depends(get_training_session_service),
) -> SuccessResponse:
    try:
        session = await asyncio.to_thread(session_service.cancel_session, current_user, session_id)
        return SuccessResponse(
            message="Session cancelled successfully",
            data={"id": session.id, "status": session.status},
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{session_id}/status", response_model=SessionResponse)
async def update_session_status(
    session_id: str,
    payload: SessionStatusUpdate,
    current_user: User = Depends(get_current_active_user),
    session_service: TrainingSessionService = Depends(get_training_session_service),
) -> SessionResponse:
    try:
        session = await asyncio.to_thread(
            session_service.update_session_status,
            current_user,
            session_id,
            payload.status,
            payload.notes,
        )
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{session_id}/rating", response_model=SessionResponse)
async def rate_session(
    session_id: str,
    payload: SessionRatingCreate,
    current_user: User = Depends(get_current_active_user),
    session_service: TrainingSessionService = Depends(get_training_session_service),
) -> SessionResponse:
    try:
        session = await asyncio.to_thread(
            session_service.rate_session,
            current_user,
            session_id,
            payload.score,
            payload.comment,
        )
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)
