# backend/app/routes/v1/bookings.py
"""
Booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to BookingService.

Endpoints:
    GET / - Caller's bookings with filters and pagination
    POST / - Create a booking (prices computed server-side)
    GET /trainer/{trainer_id} - Public list of a trainer's bookings
    GET /{booking_id} - Full booking details (participants only)
    DELETE /{booking_id} - Cancel a pending/confirmed booking
    PUT /{booking_id}/status - Change status (confirm materializes sessions)
    PUT /{booking_id}/payment - Record a payment status change
"""

import asyncio
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies import get_booking_service, get_current_active_user
from ...core.config import settings
from ...core.exceptions import DomainException
from ...models.booking import BookingStatus
from ...models.user import User
from ...schemas.base_responses import PaginatedResponse, SuccessResponse
from ...schemas.booking import (
    BookingCreate,
    BookingPaymentUpdate,
    BookingResponse,
    BookingStatusUpdate,
)
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=PaginatedResponse[BookingResponse])
async def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> PaginatedResponse[BookingResponse]:
    """List the caller's bookings, newest first."""
    try:
        bookings, total = await asyncio.to_thread(
            booking_service.list_bookings,
            current_user,
            status_filter.value if status_filter else None,
            page,
            limit,
        )
        return PaginatedResponse[BookingResponse].build(
            items=[BookingResponse.from_booking(b) for b in bookings],
            total=total,
            page=page,
            per_page=limit,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate,
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Create a pending booking.

    Each line item is priced as (hourly rate / 60) x duration using the
    trainer's best-matching service.
    """
    try:
        booking = await asyncio.to_thread(
            booking_service.create_booking, current_user, payload.model_dump()
        )
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/trainer/{trainer_id}", response_model=PaginatedResponse[BookingResponse])
async def list_trainer_bookings(
    trainer_id: str,
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    booking_service: BookingService = Depends(get_booking_service),
) -> PaginatedResponse[BookingResponse]:
    try:
        bookings, total = await asyncio.to_thread(
            booking_service.list_trainer_bookings,
            trainer_id,
            status_filter.value if status_filter else None,
            page,
            limit,
        )
        return PaginatedResponse[BookingResponse].build(
            items=[BookingResponse.from_booking(b) for b in bookings],
            total=total,
            page=page,
            per_page=limit,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, current_user, booking_id)
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{booking_id}", response_model=SuccessResponse)
async def cancel_booking(
    booking_id: str,
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> SuccessResponse:
    try:
        booking, refund = await asyncio.to_thread(
            booking_service.cancel_booking, current_user, booking_id
        )
        return SuccessResponse(
            message="Booking cancelled successfully",
            data={"id": booking.id, "status": booking.status, "refund_amount": float(refund)},
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Change the booking status.

    Confirming schedules a session per line item and fails with 409 if
    any of them would clash with the trainer's calendar. Cancelling also
    cancels the sessions created from the booking.
    """
    try:
        booking = await asyncio.to_thread(
            booking_service.update_booking_status,
            current_user,
            booking_id,
            payload.status,
            payload.notes,
        )
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{booking_id}/payment", response_model=BookingResponse)
async def update_payment(
    booking_id: str,
    payload: BookingPaymentUpdate,
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.update_payment,
            current_user,
            booking_id,
            payload.payment_status,
            payload.transaction_id,
            payload.payment_method,
        )
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)
