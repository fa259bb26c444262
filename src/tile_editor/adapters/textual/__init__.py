"""Textual host integration."""

from .controller import TextualTileAdapter, TextualUIHooks

__all__ = ["TextualTileAdapter", "TextualUIHooks"]
