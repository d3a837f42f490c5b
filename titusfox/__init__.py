"""Readers for Titus the Fox and Moktar game data: SQZ archives, settings, sprites, images and tile animation."""

__version__ = "0.1.0"
__all__ = ["sqz", "settings", "sprites", "images", "tile_animation"]