from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./brackets.db")

def build_engine(url: str = None):
    url = url or DATABASE_URL
    if url.startswith("sqlite"):
        if url.rstrip("/").endswith(":memory:") or url.endswith("://"):
            # In-memory SQLite lives on a single shared connection
            return create_async_engine(url, echo=False, poolclass=StaticPool)
        return create_async_engine(url, echo=False)

    return create_async_engine(
        url,
        echo=False,
        # Several requests may record results on the same bracket at once
        pool_size=20,
        max_overflow=20
    )

def get_session_maker(bind=None):
    return sessionmaker(
        bind=bind or engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

engine = build_engine()
AsyncSessionLocal = get_session_maker(engine)

Base = declarative_base()

# Dependency for API routes
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session
