"""
Pytest configuration and fixtures
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from models import Base
from typing import AsyncGenerator

# In-memory database shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    yield engine
    
    # Drop all tables after test
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def catalog_xml():
    """A small WHC catalog with three rows"""
    return """<?xml version="1.0" encoding="UTF-8"?>
<query>
  <row>
    <category>Cultural</category>
    <criteria_txt>(i)(iii)</criteria_txt>
    <date_inscribed>1979</date_inscribed>
    <id_number>208</id_number>
    <unique_number>230</unique_number>
    <iso_code>it</iso_code>
    <latitude>45.4375</latitude>
    <longitude>12.3358</longitude>
    <region>Europe and North America</region>
    <site>Venice and its Lagoon</site>
    <states>Italy</states>
    <transboundary>0</transboundary>
  </row>
  <row>
    <category>Mixed</category>
    <id_number>274</id_number>
    <unique_number>281</unique_number>
    <latitude>-13.1631</latitude>
    <longitude>-72.5450</longitude>
    <site>Historic Sanctuary of Machu Picchu</site>
    <states>Peru</states>
  </row>
  <row>
    <category>Natural</category>
    <id_number>156</id_number>
    <unique_number>160</unique_number>
    <site>Serengeti National Park</site>
    <states>United Republic of Tanzania</states>
  </row>
</query>
"""


@pytest.fixture
def licenses_payload():
    """flickr.photos.licenses.getInfo response"""
    return {
        "licenses": {
            "license": [
                {"id": 0, "name": "All Rights Reserved", "url": ""},
                {"id": 4, "name": "Attribution License", "url": "https://creativecommons.org/licenses/by/2.0/"},
                {"id": 5, "name": "Attribution-ShareAlike License", "url": "https://creativecommons.org/licenses/by-sa/2.0/"},
                {"id": 9, "name": "Public Domain Dedication (CC0)", "url": "https://creativecommons.org/publicdomain/zero/1.0/"},
            ]
        },
        "stat": "ok"
    }


def _search_payload(*photo_ids):
    """flickr.photos.search response with the given photo ids"""
    return {
        "photos": {
            "page": 1,
            "pages": 1,
            "perpage": 10,
            "total": len(photo_ids),
            "photo": [
                {"id": pid, "owner": "1234@N00", "secret": f"s{pid}", "server": "65535", "farm": 66, "title": pid}
                for pid in photo_ids
            ]
        },
        "stat": "ok"
    }


def _photo_info_payload(photo_id, license_id=4, username="traveller"):
    """flickr.photos.getInfo response"""
    return {
        "photo": {
            "id": photo_id,
            "secret": f"s{photo_id}",
            "server": "65535",
            "farm": 66,
            "originalsecret": f"o{photo_id}",
            "originalformat": "jpg",
            "license": str(license_id),
            "owner": {"nsid": "1234@N00", "username": username, "realname": ""}
        },
        "stat": "ok"
    }


@pytest.fixture
def make_search_payload():
    return _search_payload


@pytest.fixture
def make_photo_info_payload():
    return _photo_info_payload
