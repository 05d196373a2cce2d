from fastapi import APIRouter, Depends, HTTPException, status, Query, Response

from event_checkout.exceptions import (
    CheckoutError, CheckoutValidationError, GatewayNotReadyError,
    InvalidTransitionError, PaymentLaunchError, SessionNotFoundError
)
from event_checkout.bookings.schemas import BuyerUpdateRequest
from event_checkout.checkout.schemas import (
    CheckoutSnapshot, CheckoutView, PaymentStartResponse,
    PaymentCallbackRequest, PaymentCancelRequest
)
from event_checkout.checkout.session_service import CheckoutSession, CheckoutSessionService, session_service
from event_checkout.checkout.view_selector import select_view
from event_checkout.gateway.schemas import GatewayStatusResponse

router = APIRouter()

def get_session_service() -> CheckoutSessionService:
    return session_service

def _http_error(error: CheckoutError) -> HTTPException:
    """Translate a rejected checkout action into an HTTP error"""
    if isinstance(error, SessionNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    if isinstance(error, CheckoutValidationError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": error.message,
                "field_errors": [field_error.model_dump() for field_error in error.field_errors]
            }
        )
    if isinstance(error, GatewayNotReadyError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=error.message,
            headers={"Retry-After": "1"}
        )
    if isinstance(error, InvalidTransitionError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error.message)
    if isinstance(error, PaymentLaunchError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=error.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)

def _get_session(service: CheckoutSessionService, session_id: str) -> CheckoutSession:
    try:
        return service.get_session(session_id)
    except SessionNotFoundError as e:
        raise _http_error(e)

# Session lifecycle
@router.post("/sessions", response_model=CheckoutSnapshot, status_code=status.HTTP_201_CREATED)
async def open_checkout_session(service: CheckoutSessionService = Depends(get_session_service)):
    """Start a page session and begin loading the payment gateway"""
    try:
        session = await service.open_session()
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to open checkout session: {str(e)}"
        )
    return session.snapshot()

@router.get("/sessions/{session_id}", response_model=CheckoutSnapshot)
async def get_checkout_session(
    session_id: str,
    service: CheckoutSessionService = Depends(get_session_service)
):
    """Current checkout state"""
    return _get_session(service, session_id).snapshot()

@router.get("/sessions/{session_id}/view", response_model=CheckoutView)
async def get_checkout_view(
    session_id: str,
    service: CheckoutSessionService = Depends(get_session_service)
):
    """Page and overlays to render"""
    return select_view(_get_session(service, session_id).snapshot())

@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_checkout_session(
    session_id: str,
    service: CheckoutSessionService = Depends(get_session_service)
):
    """Tear down a page session"""
    try:
        await service.close_session(session_id)
    except SessionNotFoundError as e:
        raise _http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/sessions/{session_id}/gateway", response_model=GatewayStatusResponse)
async def get_gateway_status(
    session_id: str,
    wait_seconds: float = Query(0, ge=0, le=30, description="Wait up to this long for readiness"),
    service: CheckoutSessionService = Depends(get_session_service)
):
    """Payment gateway readiness, optionally long-polling until ready"""
    session = _get_session(service, session_id)
    readiness = session.loader.readiness

    if wait_seconds > 0:
        await readiness.wait_ready(wait_seconds)

    return GatewayStatusResponse(
        readiness=readiness.current,
        ready=readiness.is_ready,
        history=readiness.history,
        script_url=session.loader.script_url
    )

# Booking form
@router.patch("/sessions/{session_id}/buyer", response_model=CheckoutSnapshot)
async def update_buyer_details(
    session_id: str,
    update: BuyerUpdateRequest,
    service: CheckoutSessionService = Depends(get_session_service)
):
    """Update one or more booking form fields"""
    session = _get_session(service, session_id)
    try:
        session.orchestrator.update_buyer(update)
    except CheckoutError as e:
        raise _http_error(e)
    return session.snapshot()

@router.post("/sessions/{session_id}/booking/open", response_model=CheckoutSnapshot)
async def open_booking_modal(
    session_id: str,
    service: CheckoutSessionService = Depends(get_session_service)
):
    """Book Now"""
    session = _get_session(service, session_id)
    try:
        session.orchestrator.open_booking()
    except CheckoutError as e:
        raise _http_error(e)
    return session.snapshot()

@router.post("/sessions/{session_id}/booking/close", response_model=CheckoutSnapshot)
async def close_booking_modal(
    session_id: str,
    service: CheckoutSessionService = Depends(get_session_service)
):
    """Close the booking modal, keeping the buyer's input"""
    session = _get_session(service, session_id)
    try:
        session.orchestrator.close_booking()
    except CheckoutError as e:
        raise _http_error(e)
    return session.snapshot()

@router.post("/sessions/{session_id}/return", response_model=CheckoutSnapshot)
async def return_to_main_page(
    session_id: str,
    service: CheckoutSessionService = Depends(get_session_service)
):
    """Leave the success page"""
    session = _get_session(service, session_id)
    try:
        session.orchestrator.return_to_landing()
    except CheckoutError as e:
        raise _http_error(e)
    return session.snapshot()

# Payment
@router.post("/sessions/{session_id}/payment", response_model=PaymentStartResponse)
async def start_payment(
    session_id: str,
    service: CheckoutSessionService = Depends(get_session_service)
):
    """Pay Now: returns the payload the page opens the payment widget with.

    A repeat Pay while the attempt is running carries no launch payload.
    """
    session = _get_session(service, session_id)
    try:
        attempt, launched = session.orchestrator.begin_payment()
    except CheckoutError as e:
        raise _http_error(e)

    handler = session.gateway.handler_for(attempt.reference_id) if launched else None
    return PaymentStartResponse(
        snapshot=session.snapshot(),
        launched=launched,
        launch=handler.launch if handler else None
    )

@router.post("/sessions/{session_id}/payment/callback", response_model=CheckoutSnapshot)
async def payment_callback(
    session_id: str,
    request: PaymentCallbackRequest,
    service: CheckoutSessionService = Depends(get_session_service)
):
    """Relay the payment widget's success callback"""
    session = _get_session(service, session_id)
    handler = session.gateway.handler_for(request.ref)
    if not handler:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payment attempt not found"
        )

    handler.complete({"reference": request.reference} if request.reference else {})
    return session.snapshot()

@router.post("/sessions/{session_id}/payment/cancel", response_model=CheckoutSnapshot)
async def payment_cancelled(
    session_id: str,
    request: PaymentCancelRequest,
    service: CheckoutSessionService = Depends(get_session_service)
):
    """Relay the payment widget being closed"""
    session = _get_session(service, session_id)
    handler = session.gateway.handler_for(request.ref)
    if not handler:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payment attempt not found"
        )

    handler.close()
    return session.snapshot()
