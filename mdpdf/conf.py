"""
Configuration for the Markdown to PDF pipeline.

Settings are read from django.conf.settings with MDPDF_ prefixed names and
fall back to DEFAULTS, so the package works inside any Django project as well
as with the standalone settings in mdpdf.settings.
"""

from pathlib import Path
from typing import Any, Optional, Union

from django.conf import settings


SETTINGS_PREFIX = 'MDPDF_'

DEFAULTS = {
    'MARGIN_PX': 50,
    'RENDERER': 'chromium',
    'RENDER_TIMEOUT': 60.0,
    'ALLOW_RAW_HTML': False,
    'PAGE_FORMAT': 'A4',
    'CHROMIUM_ARGS': ['--no-sandbox', '--disable-gpu'],
}


def get_setting(name: str) -> Any:
    """
    Get a pipeline setting.

    Args:
        name: Setting name without prefix (e.g. 'MARGIN_PX')

    Returns:
        The value of settings.MDPDF_<name>, or its default

    Raises:
        KeyError: If the setting is unknown
    """
    if name not in DEFAULTS:
        raise KeyError(f"Unknown mdpdf setting '{name}'")
    return getattr(settings, SETTINGS_PREFIX + name, DEFAULTS[name])


def default_output_path(input_path: Union[str, Path]) -> Path:
    """Output path derived from the input: same name with a .pdf suffix."""
    return Path(input_path).with_suffix('.pdf')


def build_render_config(
    *,
    margin_px: Optional[int] = None,
    output_path: Optional[Union[str, Path]] = None,
    input_path: Optional[Union[str, Path]] = None,
    title: Optional[str] = None,
) -> "RenderConfig":
    """
    Build a RenderConfig, filling unset values from settings.

    Args:
        margin_px: Page margin in pixels (defaults to MDPDF_MARGIN_PX)
        output_path: Output PDF path
        input_path: Markdown input path, used to derive output_path when unset
        title: Document title

    Returns:
        RenderConfig
    """
    from .printing.dto import RenderConfig

    if margin_px is None:
        margin_px = int(get_setting('MARGIN_PX'))
    if output_path is None and input_path is not None:
        output_path = default_output_path(input_path)
    return RenderConfig(
        margin_px=margin_px,
        output_path=Path(output_path) if output_path is not None else None,
        title=title,
    )
