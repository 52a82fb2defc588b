"""
Application State

Components shared between the server lifespan and the route modules.
"""

from fastapi import HTTPException

# Global state
state = {}


def get_state(key: str):
    """Get item from app state."""
    return state.get(key)


def get_engine():
    """The running engine; 500 until the lifespan has built it."""
    engine = state.get("engine")
    if engine is None:
        raise HTTPException(500, "Engine not initialized")
    return engine
