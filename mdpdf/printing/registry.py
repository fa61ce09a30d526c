"""
Renderer Registry

Central registry for resolving renderer names (the MDPDF_RENDERER setting,
the --renderer option) to IPdfRenderer factories.
"""

from typing import Callable

from .interfaces import IPdfRenderer
from .playwright_renderer import PlaywrightRenderer
from .weasyprint_renderer import WeasyPrintRenderer


class RendererRegistry:
    """Registry for renderer factories"""

    def __init__(self):
        self._factories: dict[str, Callable[[], IPdfRenderer]] = {}

    def register(self, name: str, factory: Callable[[], IPdfRenderer]) -> None:
        """
        Register a renderer.

        Args:
            name: Unique renderer name (e.g., 'chromium')
            factory: Factory function that returns a renderer instance
        """
        if name in self._factories:
            raise ValueError(f"Renderer '{name}' is already registered")
        self._factories[name] = factory

    def get_renderer(self, name: str) -> IPdfRenderer:
        """
        Create a renderer by its name.

        Raises:
            KeyError: If the name is not registered
        """
        if name not in self._factories:
            raise KeyError(f"Renderer '{name}' not found")
        return self._factories[name]()

    def is_registered(self, name: str) -> bool:
        return name in self._factories

    def list_renderers(self) -> list[str]:
        return list(self._factories.keys())


def _chromium_factory() -> IPdfRenderer:
    from ..conf import get_setting

    return PlaywrightRenderer(
        page_format=get_setting('PAGE_FORMAT'),
        launch_args=get_setting('CHROMIUM_ARGS'),
    )


# Global registry instance
_registry = RendererRegistry()
_registry.register('chromium', _chromium_factory)
_registry.register('weasyprint', WeasyPrintRenderer)


def register_renderer(name: str, factory: Callable[[], IPdfRenderer]) -> None:
    """Register a renderer in the global registry"""
    _registry.register(name, factory)


def get_renderer(name: str) -> IPdfRenderer:
    """Create a renderer from the global registry"""
    return _registry.get_renderer(name)


def list_renderers() -> list[str]:
    """List all registered renderer names"""
    return _registry.list_renderers()
