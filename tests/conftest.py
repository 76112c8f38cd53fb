"""Pytest configuration and fixtures."""

from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import get_app_settings, get_mailer
from src.api.main import app
from src.core.config import Settings
from src.domain.services.accounts import AccountLifecycleManager
from src.domain.services.email import generate_token
from src.domain.services.links import ShortLinkManager
from src.domain.services.tokens import TokenIssuer
from src.storage.database import create_engine_for, create_session_factory, init_db
from src.storage.repositories import AccountStore, LinkStore


@dataclass
class SentMail:
    message: str
    recipient: str
    link_base: str
    extra: str | None
    token: str

    @property
    def link_value(self) -> str:
        """Query value the real dispatcher would put in the link."""
        if self.extra is None:
            return self.token
        return f"{self.token}_._{self.extra}"


class RecordingMailer:
    """Mail dispatcher stand-in that keeps every message instead of sending."""

    def __init__(self):
        self.sent: list[SentMail] = []

    async def send_and_generate(self, message, recipient, link_base, extra=None):
        token = generate_token()
        self.sent.append(SentMail(message, recipient, link_base, extra, token))
        return token

    @property
    def last(self) -> SentMail:
        return self.sent[-1]


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a per-test SQLite database."""
    return Settings(
        db_url=f"sqlite+aiosqlite:///{tmp_path}",
        db_name="test_shorturl",
        jwt_key="test-secret-key",
        api_url="http://test",
        frontend_url="https://ui.test",
        smtp_user="",
    )


@pytest.fixture
async def engine(settings):
    test_engine = create_engine_for(settings.database_url)
    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def db_session(session_factory):
    """Async database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def issuer(settings):
    return TokenIssuer.from_settings(settings)


@pytest.fixture
def account_manager(db_session, mailer, issuer, settings):
    return AccountLifecycleManager(AccountStore(db_session), mailer, issuer, settings)


@pytest.fixture
def link_manager(db_session, settings):
    return ShortLinkManager(LinkStore(db_session), AccountStore(db_session), settings)


@pytest.fixture
async def client(settings, session_factory, mailer):
    """Async test client for FastAPI app wired to the test database and mailer.

    ASGITransport skips the lifespan, so the session factory it would build
    is placed on app.state directly.
    """
    app.state.session_factory = session_factory
    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_mailer] = lambda: mailer
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
    del app.state.session_factory
