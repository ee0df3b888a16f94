"""
Test fixtures - file-backed SQLite database per test + HTTP client bound to the app
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from quilo_backend.database import Base, configure_sqlite, get_db, get_session_factory
from quilo_backend.main import app
from quilo_backend.models.dish import Dish
from quilo_backend.models.judge import Judge
from quilo_backend.services.notifier import Notifier, get_notifier


@pytest_asyncio.fixture()
async def engine(tmp_path):
    """Fresh SQLite file per test; statistics open several connections at once"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    configure_sqlite(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Insert baseline test data: 2 judges + 3 dishes"""
    ana = Judge(name="Ana Paula", email="ana@oquiloenosso.com")
    bruno = Judge(name="Bruno Silva", email="bruno@oquiloenosso.com")
    pequi = Dish(name="Presunto de Frango com Pequi", restaurant="Junior Cozinha Brasileira", region="Goiás")
    sopa = Dish(name="Sopa Oriental de Ervilha", restaurant="Pantanal Gourmet", region="Mato Grosso do Sul")
    penne = Dish(name="Penne com Molho de Tomate", restaurant="Massa & Arte", region="Rio de Janeiro")

    db_session.add_all([ana, bruno, pequi, sopa, penne])
    await db_session.commit()
    for record in (ana, bruno, pequi, sopa, penne):
        await db_session.refresh(record)

    return {"ana": ana, "bruno": bruno, "pequi": pequi, "sopa": sopa, "penne": penne}


@pytest.fixture()
def notifier():
    return Notifier()


@pytest_asyncio.fixture()
async def client(db_session, session_factory, notifier, seed_data):
    """httpx AsyncClient bound to the FastAPI app"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
