"""Textual front end for the alignment engine."""

from .controller import TextualAlignAdapter, TextualUIHooks

__all__ = ["TextualAlignAdapter", "TextualUIHooks"]
