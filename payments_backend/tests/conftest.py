import json
import httpx
import pytest
from payments_backend.api.deps import get_order_service
from payments_backend.app import create_app
from payments_backend.core.config import Settings
from payments_backend.db.session import build_engine, build_session_factory, init_db
from payments_backend.services.gateway import RazorpayGateway
from payments_backend.services.orders import OrderService
from payments_backend.services.payment_store import PaymentStore

WEBHOOK_SECRET = "whsec_test_secret"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        ENV="test",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'payments_test.db'}",
        RAZORPAY_KEY_ID="rzp_test_key",
        RAZORPAY_KEY_SECRET="rzp_test_secret",
        RAZORPAY_WEBHOOK_SECRET=WEBHOOK_SECRET,
        RAZORPAY_API_BASE_URL="https://gateway.test/v1",
    )


@pytest.fixture
async def db_engine(settings):
    engine = build_engine(settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def payment_store(db_engine):
    return PaymentStore(build_session_factory(db_engine), timeout=5)


class FakeGateway:
    """
    Records every request sent to the orders api and answers with
    the configured response.
    """

    def __init__(self):
        self.requests = []
        self.response = None
        self.error = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response
        body = json.loads(request.content)
        return httpx.Response(200, json={
            "id": "order_test_1",
            "entity": "order",
            "amount": body["amount"],
            "currency": body["currency"],
            "receipt": body["receipt"],
            "status": "created",
        })

    @property
    def sent(self):
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
async def gateway(settings, fake_gateway):
    client = RazorpayGateway(
        key_id=settings.RAZORPAY_KEY_ID,
        key_secret=settings.RAZORPAY_KEY_SECRET,
        base_url=settings.RAZORPAY_API_BASE_URL,
        timeout=1,
        transport=httpx.MockTransport(fake_gateway.handler),
    )
    yield client
    await client.aclose()


@pytest.fixture
async def app(settings, gateway):
    app = create_app(settings)
    await init_db(app.state.engine)
    app.dependency_overrides[get_order_service] = lambda: OrderService(gateway)
    yield app
    await app.state.gateway.aclose()
    await app.state.engine.dispose()


@pytest.fixture
async def client(app):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def app_store(app) -> PaymentStore:
    return app.state.payment_store