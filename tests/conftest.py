import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from deckhaven.db.database import get_session
from deckhaven.main import app
from deckhaven.models.db import Base
from deckhaven.models.failure import MetadataLookupError
from deckhaven.services.card_metadata import CardMetadata, CardSearchPage, get_metadata_provider


class FakeMetadataProvider:
    """In-memory metadata provider that records every lookup."""

    def __init__(
        self,
        names: dict[str, str] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self.names = names or {}
        self.failing = failing or set()
        self.calls: list[str] = []

    async def lookup(self, card_id: str) -> CardMetadata | None:
        self.calls.append(card_id)
        if card_id in self.failing:
            raise MetadataLookupError(card_id, "ReadTimeout: timed out")
        name = self.names.get(card_id)
        if name is None:
            return None
        return CardMetadata(id=card_id, name=name)

    async def search(self, query: str, page: int = 1) -> CardSearchPage:
        self.calls.append(query)
        cards = [
            CardMetadata(id=card_id, name=name)
            for card_id, name in self.names.items()
            if query.lower() in name.lower()
        ]
        return CardSearchPage(cards=cards, total=len(cards), has_more=False, page=page)


@pytest.fixture
def fake_provider() -> FakeMetadataProvider:
    """Provider knowing a handful of cards by id."""
    return FakeMetadataProvider(
        names={
            "sol-ring": "Sol Ring",
            "bolt": "Lightning Bolt",
            "forest": "Forest",
            "island": "Island",
            "snow-forest": "Snow-Covered Forest",
            "lowercase-forest": "forest",
        },
        failing={"flaky"},
    )


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
async def client(async_engine, fake_provider: FakeMetadataProvider):
    """Async test client with overridden database session and metadata provider."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_metadata_provider] = lambda: fake_provider

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
