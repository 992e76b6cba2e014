"""
Test configuration and fixtures for the listings API.
Provides database fixtures, image storage fixtures, test data factories, and common test utilities.
"""

import os
import tempfile

# Settings are read at import time, point them at test resources first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="listings-uploads-")

import io
import pytest
from decimal import Decimal
from pathlib import Path
from typing import AsyncGenerator, List, Optional
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from listings_api.main import app
from listings_api.database import Base, get_db
from listings_api.models import Agent, Property
from listings_api.repositories.agent import AgentRepository
from listings_api.repositories.property import PropertyRepository
from listings_api.services.agent import AgentService
from listings_api.services.image import ImageService
from listings_api.services.property import PropertyService
from listings_api.utils.dependencies import get_agent_image_service, get_property_image_service
from listings_api.utils.image_paths import dump_reference_list


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
MAX_TEST_FILE_SIZE = 1024 * 1024


@pytest.fixture
async def db_engine():
    """In-memory database with a fresh schema for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


# Image storage fixtures
@pytest.fixture
def property_upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "properties"


@pytest.fixture
def agent_upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "agents"


@pytest.fixture
def property_image_service(property_upload_dir: Path) -> ImageService:
    """Property image service writing to a temporary directory."""
    return ImageService(
        directory=property_upload_dir,
        url_prefix="/uploads/properties/",
        filename_prefix="property",
        max_file_size=MAX_TEST_FILE_SIZE,
        max_files=5
    )


@pytest.fixture
def agent_image_service(agent_upload_dir: Path) -> ImageService:
    """Agent image service writing to a temporary directory."""
    return ImageService(
        directory=agent_upload_dir,
        url_prefix="/uploads/agents/",
        filename_prefix="agent",
        max_file_size=MAX_TEST_FILE_SIZE,
        max_files=1
    )


@pytest.fixture
async def async_client(
    db_session: AsyncSession,
    property_image_service: ImageService,
    agent_image_service: ImageService
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database and storage overrides."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_property_image_service] = lambda: property_image_service
    app.dependency_overrides[get_agent_image_service] = lambda: agent_image_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    """Create a property repository instance."""
    return PropertyRepository(db_session)


@pytest.fixture
def agent_repository(db_session: AsyncSession) -> AgentRepository:
    """Create an agent repository instance."""
    return AgentRepository(db_session)


# Service fixtures
@pytest.fixture
def property_service(db_session: AsyncSession, property_image_service: ImageService) -> PropertyService:
    """Create a property service instance."""
    return PropertyService(db_session, property_image_service)


@pytest.fixture
def agent_service(db_session: AsyncSession, agent_image_service: ImageService) -> AgentService:
    """Create an agent service instance."""
    return AgentService(db_session, agent_image_service)


def create_test_image(width: int = 64, height: int = 48, format: str = "JPEG", color: str = "red") -> bytes:
    """Create a test image in memory."""
    img = Image.new("RGB", (width, height), color=color)
    img_bytes = io.BytesIO()
    img.save(img_bytes, format=format)
    return img_bytes.getvalue()


def image_upload(filename: str = "photo.jpg", content_type: str = "image/jpeg", content: Optional[bytes] = None):
    """Build a multipart file tuple for httpx."""
    if content is None:
        content = create_test_image(format="PNG" if content_type == "image/png" else "JPEG")
    return (filename, content, content_type)


def stored_files(directory: Path) -> List[str]:
    """Names of the files currently in an upload directory."""
    if not directory.exists():
        return []
    return sorted(p.name for p in directory.iterdir() if p.is_file())


# Test data factories
class AgentFactory:
    """Factory for creating test agents."""

    @staticmethod
    def create_agent_data(
        name: str = "Test Agent",
        mobile_number: str = "+971500000000",
        image: Optional[str] = None
    ) -> dict:
        return {"name": name, "mobile_number": mobile_number, "image": image}

    @staticmethod
    async def create_agent(agent_repo: AgentRepository, **kwargs) -> Agent:
        """Create a test agent in the database."""
        return await agent_repo.create(AgentFactory.create_agent_data(**kwargs))


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        title: str = "Test Property",
        description: str = "A beautiful test property",
        category: str = "residential",
        sub_category: str = "apartment",
        status: str = "sale",
        price: Decimal = Decimal("250000.00"),
        size: Decimal = Decimal("1200.00"),
        location: str = "Dubai Marina",
        bedroom: str = "2",
        bathroom: int = 2,
        agent_id: Optional[int] = None,
        is_featured: bool = False,
        images: Optional[List[str]] = None
    ) -> dict:
        """Create property data dictionary."""
        return {
            "title": title,
            "description": description,
            "category": category,
            "sub_category": sub_category,
            "status": status,
            "price": price,
            "size": size,
            "location": location,
            "bedroom": bedroom,
            "bathroom": bathroom,
            "agent_id": agent_id,
            "is_featured": is_featured,
            "images": dump_reference_list(images or [])
        }

    @staticmethod
    async def create_property(property_repo: PropertyRepository, **kwargs) -> Property:
        """Create a test property in the database."""
        return await property_repo.create(PropertyFactory.create_property_data(**kwargs))


# Common test fixtures
@pytest.fixture
async def test_agent(agent_repository: AgentRepository) -> Agent:
    """Create a test agent."""
    return await AgentFactory.create_agent(agent_repository, name="Sara Agent")


@pytest.fixture
async def test_property(property_repository: PropertyRepository) -> Property:
    """Create a test property."""
    return await PropertyFactory.create_property(
        property_repository,
        title="Marina View Apartment",
        price=Decimal("300000.00"),
        bedroom="2",
        location="Dubai Marina"
    )


def assert_property_equal(prop1: Property, prop2: Property):
    """Assert that two properties are equal."""
    assert prop1.id == prop2.id
    assert prop1.title == prop2.title
    assert prop1.description == prop2.description
    assert prop1.price == prop2.price
    assert prop1.bedroom == prop2.bedroom
    assert prop1.location == prop2.location
    assert prop1.image_paths == prop2.image_paths
