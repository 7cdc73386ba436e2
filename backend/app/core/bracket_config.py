import logging
import os
import yaml
from pathlib import Path
from pydantic import BaseModel
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "brackets.yaml"

class ScoringConfig(BaseModel):
    win_points: int = 3
    draw_points: int = 1

class BracketConfig(BaseModel):
    scoring: ScoringConfig = ScoringConfig()
    # Fixed seed makes round-1 shuffles reproducible (None = system randomness)
    shuffle_seed: Optional[int] = None

def load_config(path: Optional[str] = None) -> BracketConfig:
    config_path = Path(path or os.getenv("BRACKETS_CONFIG", DEFAULT_CONFIG_PATH))
    if not config_path.exists():
        logger.warning("Bracket config %s not found, using defaults", config_path)
        return BracketConfig()

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}
    return BracketConfig(**data)

# Singleton instance
settings = load_config()
