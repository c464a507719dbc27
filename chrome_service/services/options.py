"""
Option Translator.

Maps the free-form ``options`` object of a request onto typed rendering
configurations. Coercion is best-effort: unknown keys and values of the
wrong JSON type are skipped, never rejected.
"""

import math
from typing import Any, Dict, Mapping, Optional

from ..models import PrintConfiguration, ScreenshotConfiguration

PRINT_FLAG_KEYS = ("landscape", "display_header_footer", "print_background")
PRINT_NUMBER_KEYS = (
    "scale",
    "paper_width",
    "paper_height",
    "margin_top",
    "margin_bottom",
    "margin_left",
    "margin_right",
)
PRINT_STRING_KEYS = ("page_ranges",)


def _is_flag(value: Any) -> bool:
    return isinstance(value, bool)


def _is_number(value: Any) -> bool:
    # JSON numbers decode to int or float; bool is an int subclass but not a number here.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_dimension(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value)


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def translate_print_options(options: Optional[Mapping[str, Any]]) -> PrintConfiguration:
    """
    Build a PrintConfiguration from a request's option bag.

    Args:
        options: Decoded JSON object, or None

    Returns:
        PrintConfiguration with only the recognized, well-typed keys set
    """
    fields: Dict[str, Any] = {}
    if not isinstance(options, Mapping):
        return PrintConfiguration()

    for key in PRINT_FLAG_KEYS:
        if _is_flag(options.get(key)):
            fields[key] = options[key]
    for key in PRINT_NUMBER_KEYS:
        if _is_number(options.get(key)):
            fields[key] = float(options[key])
    for key in PRINT_STRING_KEYS:
        if _is_string(options.get(key)):
            fields[key] = options[key]

    return PrintConfiguration(**fields)


def translate_screenshot_options(options: Optional[Mapping[str, Any]]) -> ScreenshotConfiguration:
    """
    Build a ScreenshotConfiguration from a request's option bag.

    Width and height are truncated toward zero; missing or mistyped keys keep
    the 1280x720 viewport and viewport-only capture.
    """
    config = ScreenshotConfiguration()
    if not isinstance(options, Mapping):
        return config

    if _is_dimension(options.get("width")):
        config.width = int(options["width"])
    if _is_dimension(options.get("height")):
        config.height = int(options["height"])
    if _is_flag(options.get("full_page")):
        config.full_page = options["full_page"]

    return config
