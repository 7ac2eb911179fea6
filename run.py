#!/usr/bin/env python3
"""
Run script for the Emoji RPG backend
"""
import uvicorn

from emoji_rpg.config.settings import settings
from emoji_rpg.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
