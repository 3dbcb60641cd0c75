"""Pytest configuration and shared fixtures."""

import os


# Settings are read at import time; point them at SQLite before the
# application is imported.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from rbac_admin import models  # noqa: E402, F401
from rbac_admin.core.auth.backend import create_access_token  # noqa: E402
from rbac_admin.core.database import Base, get_db  # noqa: E402
from rbac_admin.main import create_app  # noqa: E402
from rbac_admin.modules.users.models import User  # noqa: E402
from rbac_admin.modules.users.repos import UserRepository  # noqa: E402
from rbac_admin.seeding import SeedCatalog, apply_seed  # noqa: E402


TEST_DATABASE_URL = "sqlite+aiosqlite://"

ADMIN_CODES = [
    "permissions.view",
    "permissions.manage",
    "groups.view",
    "groups.manage",
    "users.view",
    "users.manage",
    "menus.view",
    "menus.manage",
]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory test database shared by every connection."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional database session for tests.

    Each test runs in its own transaction that is rolled back
    after the test completes.
    """
    session_factory = async_sessionmaker(
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with engine.connect() as conn:
        await conn.begin()

        async with session_factory(bind=conn) as session:
            yield session

        await conn.rollback()


@pytest.fixture
async def app(db: AsyncSession):
    """Create test application instance."""
    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# Catalog Fixtures
# ============================================================


@pytest.fixture
def seed_catalog() -> SeedCatalog:
    """A small catalog with an admin, a member and a deactivated user.

    - ``admin`` group grants every administration code plus the
      dashboard and reports codes
    - ``members`` grants the dashboard and daily report codes
    - ``reports.archive`` is inactive
    """
    return SeedCatalog(
        permissions=[
            {"code": "dashboard.view", "name": "View Dashboard"},
            {"code": "reports", "name": "Reports"},
            {"code": "reports.view", "name": "View Reports", "parent_code": "reports"},
            {
                "code": "reports.archive",
                "name": "Archived Reports",
                "parent_code": "reports",
                "is_active": False,
            },
            *({"code": code, "name": code.title()} for code in ADMIN_CODES),
        ],
        groups=[
            {
                "code": "admin",
                "name": "Administrators",
                "permissions": ["dashboard.view", "reports.view", *ADMIN_CODES],
            },
            {
                "code": "members",
                "name": "Members",
                "permissions": ["dashboard.view", "reports.archive"],
            },
        ],
        menus=[
            {
                "name": "Dashboard",
                "path": "/dashboard",
                "order": 1,
                "permission_code": "dashboard.view",
            },
            {
                "name": "Reports",
                "path": "/reports",
                "order": 2,
                "permission_code": "reports.view",
            },
            {
                "name": "Report Archive",
                "path": "/reports/archive",
                "order": 1,
                "parent_path": "/reports",
                "permission_code": "dashboard.view",
            },
            {
                "name": "Users",
                "path": "/admin/users",
                "order": 3,
                "permission_code": "users.view",
            },
        ],
        users=[
            {"email": "admin@example.com", "display_name": "Admin", "groups": ["admin"]},
            {"email": "member@example.com", "display_name": "Member", "groups": ["members"]},
            {
                "email": "former@example.com",
                "display_name": "Former",
                "is_active": False,
                "groups": ["admin"],
            },
        ],
    )


@pytest.fixture
async def seeded(db: AsyncSession, seed_catalog: SeedCatalog) -> SeedCatalog:
    """Write ``seed_catalog`` to the test database."""
    await apply_seed(db, seed_catalog)
    return seed_catalog


async def _get_user(db: AsyncSession, email: str) -> User:
    user = await UserRepository(db).get_by_email(email)
    assert user is not None
    return user


def bearer(user: User) -> dict[str, str]:
    """Authorization header with a valid access token for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user_id=user.id)}"}


@pytest.fixture
async def admin_user(db: AsyncSession, seeded: SeedCatalog) -> User:
    return await _get_user(db, "admin@example.com")


@pytest.fixture
async def member_user(db: AsyncSession, seeded: SeedCatalog) -> User:
    return await _get_user(db, "member@example.com")


@pytest.fixture
async def inactive_user(db: AsyncSession, seeded: SeedCatalog) -> User:
    return await _get_user(db, "former@example.com")


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return bearer(admin_user)


@pytest.fixture
def member_headers(member_user: User) -> dict[str, str]:
    return bearer(member_user)


@pytest.fixture
def headers_for():
    """Build authorization headers for any persisted user."""
    return bearer
