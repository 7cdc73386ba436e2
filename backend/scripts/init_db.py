import asyncio
import os
import sys

# Add project root to path so we can import from backend.app
sys.path.append(os.path.join(os.path.dirname(__file__), '../../'))

from backend.app.core.database import engine, Base
# IMPORT ALL MODELS
from backend.app.models.bracket_model import Bracket, TournamentProgress
from backend.app.models.match_model import Match

async def init_models():
    async with engine.begin() as conn:
        # Safe create (only creates if missing)
        await conn.run_sync(Base.metadata.create_all)
        print("Database tables updated.")

if __name__ == "__main__":
    asyncio.run(init_models())
