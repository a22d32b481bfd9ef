"""
SAP Technologies API - Test Configuration and Fixtures
"""
import os
import tempfile
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from faker import Faker

# Set testing environment
os.environ['TESTING'] = 'true'
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite://'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['UPLOAD_PATH'] = tempfile.mkdtemp(prefix='saptech-test-uploads-')

from app.main import app
from app.core.database import Base, get_db
from app.core.security import get_password_hash, create_access_token
from app.models import (
    AwardCategory, Nomination, NominationStatus, Product, Project, Service, User, UserRole,
)
from app.services.cache_service import cache_service

fake = Faker()

# 1x1 transparent PNG
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00"
    b"\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\xff\xff?\x00\x05\xfe\x02\xfe\xa75\x81\x84"
    b"\x00\x00\x00\x00IEND\xaeB`\x82"
)

NOMINATION_REASON = (
    "Built a solar powered irrigation network that now serves more than two "
    "hundred smallholder farms across the region."
)

# Test database setup (single shared in-memory connection)
test_engine = create_async_engine(
    'sqlite+aiosqlite://',
    echo=False,
    connect_args={'check_same_thread': False},
    poolclass=StaticPool,
)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(autouse=True)
def clear_cache():
    """Cached listings must not leak between tests"""
    cache_service.clear()
    yield
    cache_service.clear()


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user"""
    user = User(
        email=fake.unique.email(),
        hashed_password=get_password_hash('testpassword123'),
        name=fake.name(),
        role=UserRole.USER,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an admin test user"""
    user = User(
        email=fake.unique.email(),
        hashed_password=get_password_hash('adminpassword123'),
        name=fake.name(),
        role=UserRole.ADMIN,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


def _bearer(user: User) -> dict:
    token_data = {
        'sub': str(user.id),
        'email': user.email,
        'role': user.role.value
    }
    return {'Authorization': f'Bearer {create_access_token(token_data)}'}


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return _bearer(test_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return _bearer(admin_user)


@pytest.fixture
async def service(db_session: AsyncSession) -> Service:
    service = Service(
        title="Custom Web Development",
        description="Responsive websites and web applications",
        features=["Responsive design", "SEO"],
        technologies=["React", "FastAPI"],
        starting_price=500.0,
    )
    db_session.add(service)
    await db_session.commit()
    await db_session.refresh(service)
    return service


@pytest.fixture
async def project(db_session: AsyncSession) -> Project:
    project = Project(
        title="Farm Monitoring Dashboard",
        description="IoT dashboard for soil moisture sensors",
        technologies=["Vue", "MQTT"],
    )
    db_session.add(project)
    await db_session.commit()
    await db_session.refresh(project)
    return project


@pytest.fixture
async def product(db_session: AsyncSession) -> Product:
    product = Product(
        name="Smart Water Meter",
        short_description="Prepaid smart water meter",
        technical_description="LoRaWAN enabled meter with tamper detection",
        features=["Prepaid tokens", "Leak alerts"],
        tags=["iot", "water"],
        price_amount=120.0,
    )
    db_session.add(product)
    await db_session.commit()
    await db_session.refresh(product)
    return product


@pytest.fixture
async def award_category(db_session: AsyncSession) -> AwardCategory:
    category = AwardCategory(
        name="Innovation Excellence",
        description="Outstanding innovation in technology",
    )
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


@pytest.fixture
def make_nomination(db_session: AsyncSession, award_category: AwardCategory):
    """Factory for nominations in a given status"""
    async def _make(status: NominationStatus = NominationStatus.APPROVED, **overrides) -> Nomination:
        fields = dict(
            nominee_name=fake.name(),
            nominee_photo="/uploads/awards/nominee-test.png",
            nominee_company="Acme Labs",
            category_id=award_category.id,
            nomination_reason=NOMINATION_REASON,
            nominator_name=fake.name(),
            nominator_email=fake.unique.email(),
            status=status,
            votes=0,
            slug=f"nominee-{fake.unique.random_int(100000, 999999)}",
        )
        fields.update(overrides)
        nomination = Nomination(**fields)
        db_session.add(nomination)
        await db_session.commit()
        await db_session.refresh(nomination)
        return nomination
    return _make


@pytest.fixture
def png_file():
    """Multipart tuple for a small PNG upload"""
    return ('photo.png', PNG_BYTES, 'image/png')
