"""Page controls and console prompts."""

from .interface import UserInterface, PageInterface, ConsoleInterface

__all__ = ["UserInterface", "PageInterface", "ConsoleInterface"]
