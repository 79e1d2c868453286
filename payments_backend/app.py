import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from payments_backend.api import routes_health, routes_order, routes_webhook
from payments_backend.core.config import Settings, get_settings
from payments_backend.core.exceptions import PaymentError
from payments_backend.core.log_config import configure_logging
from payments_backend.db import session
from payments_backend.services.gateway import RazorpayGateway
from payments_backend.services.orders import OrderService
from payments_backend.services.payment_store import PaymentStore
from payments_backend.services.webhook import WebhookRecorder

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if settings.ENV == 'development':
        await session.init_db(app.state.engine)
    logger.info(f"Server running on port {settings.PORT}")
    yield
    await app.state.gateway.aclose()
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        description=settings.PROJECT_DESCRIPTION,
        lifespan=lifespan
    )

    # store and gateway clients are created once per process
    engine = session.build_engine(settings)
    payment_store = PaymentStore(session.build_session_factory(engine), timeout=settings.DATABASE_TIMEOUT)
    gateway = RazorpayGateway.from_settings(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.payment_store = payment_store
    app.state.gateway = gateway
    app.state.order_service = OrderService(gateway, default_currency=settings.DEFAULT_CURRENCY)
    app.state.webhook_recorder = WebhookRecorder(
        payment_store,
        secret=settings.RAZORPAY_WEBHOOK_SECRET,
        default_currency=settings.DEFAULT_CURRENCY
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(routes_health.router)
    app.include_router(routes_order.router, tags=["orders"])
    app.include_router(routes_webhook.router, tags=["webhooks"])

    @app.exception_handler(PaymentError)
    async def payment_error_handler(request: Request, ex: PaymentError):
        if ex.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {ex.message}")
            if ex.stack_trace:
                logger.error(ex.stack_trace)
        return JSONResponse(status_code=ex.status_code, content={"success": False, "error": ex.message})

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Payments backend is running!"

    return app
