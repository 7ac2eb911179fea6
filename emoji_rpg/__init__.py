"""Emoji RPG voice-action backend."""
