# config.py
from dataclasses import dataclass
from typing import Optional

@dataclass
class Config:
    """Holds all application configuration."""
    SEARCH_RESULT_LIMIT: int = 15
    ARTWORK_SIZE: int = 75
    SEARCH_DEBOUNCE: float = 0.3
    AUTH_POLL_INTERVAL: float = 5.0
    STATE_FILENAME: str = "combined_queue_state.json"
    AUTH_FILENAME: Optional[str] = None
    LOG_LEVEL: str = "WARNING"
    LOG_FILENAME: Optional[str] = None
