"""
Interfaces for the Printing Framework

Defines the renderer capability the orchestrator drives. Any engine that can
load an HTML document, signal when it has finished loading and print it to
PDF can implement it.
"""

from abc import ABC, abstractmethod
from typing import Any


class IPdfRenderer(ABC):
    """
    Interface for paginating PDF rendering engines.

    A handle returned by launch() is owned by exactly one render and must be
    passed to close() once, whatever happens in between.
    """

    #: Name of the engine, used in log and error messages
    name = 'renderer'

    @abstractmethod
    async def launch(self) -> Any:
        """
        Acquire the rendering engine.

        Returns:
            An opaque renderer handle

        Raises:
            CapabilityUnavailable: If the engine is not installed or cannot start
        """
        pass

    @abstractmethod
    async def load_html(self, handle: Any, html: str) -> None:
        """
        Load an HTML document.

        Must only return once the engine signals that content and styles
        have finished loading.

        Args:
            handle: Handle from launch()
            html: Complete HTML document
        """
        pass

    @abstractmethod
    async def print_to_pdf(self, handle: Any, margin_px: int) -> bytes:
        """
        Print the loaded document.

        Args:
            handle: Handle from launch()
            margin_px: Margin in pixels for all four page edges

        Returns:
            PDF content as bytes
        """
        pass

    @abstractmethod
    async def close(self, handle: Any) -> None:
        """
        Release the engine (terminate process, close connection).

        Args:
            handle: Handle from launch()
        """
        pass
