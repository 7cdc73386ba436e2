import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api.brackets import router as brackets_router
from backend.app.core.database import engine, Base
from backend.app.models.bracket_model import Bracket, TournamentProgress
from backend.app.models.enums import BracketType
from backend.app.models.match_model import Match

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# --- LIFESPAN MANAGER ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: make sure bracket tables exist (safe create, never drops)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Bracket tables ready")

    yield

    await engine.dispose()
# -------------------------------------------------

app = FastAPI(title="Event Brackets", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(brackets_router, prefix="/brackets", tags=["Brackets"])

@app.get("/bracket-types")
async def get_bracket_types():
    """Returns the supported bracket formats."""
    return [t.value for t in BracketType]


def run():
    """Serves the app; same as `uvicorn backend.app.main:app`."""
    import uvicorn
    uvicorn.run(app, host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))


if __name__ == "__main__":
    run()
