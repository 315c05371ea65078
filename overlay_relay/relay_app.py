import logging
from typing import Optional

from fastapi import (
    FastAPI,
    APIRouter,
    Depends,
    HTTPException,
    WebSocket,
    WebSocketDisconnect,
    status,
    Request,
)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from overlay_relay.container import RelayContainer
from overlay_relay.core.api_models import (
    AlertListResponse,
    HealthResponse,
    PaymentLinkRequest,
    PaymentLinkResponse,
    QRCodeResponse,
    WebhookAck,
)
from overlay_relay.core.bootstrap import register_startup_events
from overlay_relay.core.exceptions import PaymentLinkError, QRCodeError
from overlay_relay.intake import IntakeStatus


logger = logging.getLogger(__name__)

SERVICE_NAME = "overlay-relay"


class HeaderKeys:
    SIGNATURE = "X-Signature"
    PROVIDER_SIGNATURE = "X-Razorpay-Signature"


# Routers by context
intake_router = APIRouter()
realtime_router = APIRouter()
alerts_router = APIRouter()
payments_router = APIRouter()


def get_container(request: Request) -> RelayContainer:
    return request.app.state.container


_ACK_STATUS = {
    IntakeStatus.APPENDED: "ok",
    IntakeStatus.DUPLICATE_IGNORED: "duplicate",
    IntakeStatus.IGNORED: "ignored",
}

_REJECT_DETAIL = {
    IntakeStatus.REJECTED_SIGNATURE: "invalid signature",
    IntakeStatus.REJECTED_MALFORMED: "invalid payload",
}


@intake_router.post("/razorpay-webhook", response_model=WebhookAck)
async def provider_webhook(
    request: Request,
    container: RelayContainer = Depends(get_container),
) -> WebhookAck:
    """
    Receive a payment event from the provider.

    Flow:
    1. Verify the signature over the raw body
    2. Decode the event into an alert (or ignore it)
    3. Append to the alert log, publishing only first-seen ids

    Returns:
        Acknowledgement; 400 for a bad signature or unreadable body
    """
    raw_body = await request.body()
    signature = (
        request.headers.get(HeaderKeys.SIGNATURE)
        or request.headers.get(HeaderKeys.PROVIDER_SIGNATURE)
    )

    result = container.intake_service().handle(raw_body, signature)

    if not result.accepted:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_REJECT_DETAIL[result.status],
        )
    return WebhookAck(status=_ACK_STATUS[result.status], alert_id=result.alert_id)


@realtime_router.websocket("/ws/alerts")
async def websocket_alerts(websocket: WebSocket) -> None:
    """
    WebSocket endpoint for overlay viewers.

    Sends:
    - ``all_alerts`` once, with every alert recorded so far
    - ``new_alert`` for each alert recorded afterwards

    Client messages are read only to notice the disconnect.
    """
    relay = websocket.app.state.container.relay()
    viewer = await relay.connect(websocket)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.info("Overlay WebSocket disconnected")
                break
    except WebSocketDisconnect:
        logger.info("Overlay WebSocket disconnected")
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
    finally:
        relay.disconnect(viewer)


@alerts_router.get("/alerts", response_model=AlertListResponse)
async def list_alerts(container: RelayContainer = Depends(get_container)) -> AlertListResponse:
    """
    Get every alert recorded since the process started, oldest first.
    """
    snapshot = container.alert_log().snapshot()
    return AlertListResponse(alerts=[alert.to_dict() for alert in snapshot])


@alerts_router.get("/health", response_model=HealthResponse)
async def health_check(container: RelayContainer = Depends(get_container)) -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        Status, alert count and connected viewer count
    """
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        alerts=len(container.alert_log()),
        viewers=container.relay().active_count,
        webhook_secret_configured=bool(container.config().razorpay.webhook_secret),
    )


@payments_router.post("/create_payment_link", response_model=PaymentLinkResponse)
async def create_payment_link(
    payload: Optional[PaymentLinkRequest] = None,
    container: RelayContainer = Depends(get_container),
):
    """
    Create a donation payment link with the provider.

    Args:
        payload: Amount (major units), customer and purpose; all optional

    Returns:
        The created link, or a 500 carrying the provider's error message
    """
    try:
        link = await container.payment_link_service().create(payload)
    except PaymentLinkError as e:
        logger.error(f"Error creating payment link: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=PaymentLinkResponse(success=False, error=e.message).model_dump(),
        )
    return PaymentLinkResponse(success=True, link=link)


@payments_router.get("/qrcode", response_model=QRCodeResponse)
async def qrcode_image(
    url: Optional[str] = None,
    container: RelayContainer = Depends(get_container),
) -> QRCodeResponse:
    """
    Render a URL as a QR code data URI.

    Args:
        url: Link to encode

    Returns:
        ``{"qrcode": "data:image/png;base64,..."}``
    """
    if not url:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="missing url")
    try:
        return QRCodeResponse(qrcode=container.qrcode_service().to_data_uri(url))
    except QRCodeError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="qr error",
        ) from e


def create_app(container: Optional[RelayContainer] = None) -> FastAPI:
    """
    Create the FastAPI application and register routers/events.

    Args:
        container: Component container; a fresh one when None

    Returns:
        Configured FastAPI app; the container is on ``app.state.container``
    """
    container = container or RelayContainer()
    config = container.config()

    app = FastAPI(title="Donation Overlay Relay")
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(intake_router)
    app.include_router(realtime_router)
    app.include_router(alerts_router)
    app.include_router(payments_router)

    register_startup_events(app)
    return app
