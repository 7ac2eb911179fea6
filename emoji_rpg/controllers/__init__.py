"""FastAPI routers acting as controllers in the MVC architecture."""

from . import game, voice

__all__ = ["game", "voice"]
