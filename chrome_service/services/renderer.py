"""
Page Renderer Service.

PDF and PNG capture over the DevTools protocol, and the request-level
orchestration that ties the option translator, a render session, the
content injector and a renderer together.
"""

import base64
import logging
import math
import time
from typing import Any, Dict, Mapping, Optional

from ..models import PrintConfiguration, ScreenshotConfiguration
from .errors import PHASE_RENDER, RenderError, SessionClosedError
from .injector import load_html
from .options import translate_print_options, translate_screenshot_options
from .session import RenderSession, SessionManager, session_manager

logger = logging.getLogger("chrome_service.renderer")

FULL_PAGE_QUALITY = 100


def _decode_artifact(response: Dict[str, Any], kind: str) -> bytes:
    data = response.get("data")
    if not data:
        raise RenderError(f"engine returned an empty {kind}", phase=PHASE_RENDER)
    return base64.b64decode(data)


async def render_pdf(session: RenderSession, config: PrintConfiguration) -> bytes:
    """
    Print the session's document to PDF.

    Only the configuration fields that were set are passed to
    Page.printToPDF; the page-count metadata of the response is dropped.

    Raises:
        RenderError: If the engine rejects the call or returns no data
    """
    session.phase = PHASE_RENDER
    try:
        response = await session.send("Page.printToPDF", config.to_cdp_params())
    except SessionClosedError:
        raise
    except Exception as e:
        raise RenderError(f"failed to generate PDF: {e}", phase=PHASE_RENDER) from e

    return _decode_artifact(response, "PDF")


async def render_screenshot(session: RenderSession, config: ScreenshotConfiguration) -> bytes:
    """
    Capture the session's document as PNG.

    The viewport is sized to ``config.width`` x ``config.height`` first. With
    ``full_page`` the capture covers the whole scrollable document, never
    less than the viewport.

    Raises:
        RenderError: If the engine rejects any capture step
    """
    session.phase = PHASE_RENDER
    try:
        await session.send(
            "Emulation.setDeviceMetricsOverride",
            {
                "width": config.width,
                "height": config.height,
                "deviceScaleFactor": 1,
                "mobile": False,
            },
        )

        if config.full_page:
            metrics = await session.send("Page.getLayoutMetrics")
            content = metrics.get("cssContentSize") or metrics.get("contentSize") or {}
            width = max(int(math.ceil(content.get("width", 0))), config.width)
            height = max(int(math.ceil(content.get("height", 0))), config.height)
            response = await session.send(
                "Page.captureScreenshot",
                {
                    "format": "png",
                    "quality": FULL_PAGE_QUALITY,
                    "captureBeyondViewport": True,
                    "fromSurface": True,
                    "clip": {"x": 0, "y": 0, "width": width, "height": height, "scale": 1},
                },
            )
        else:
            response = await session.send("Page.captureScreenshot", {"format": "png"})

    except SessionClosedError:
        raise
    except Exception as e:
        raise RenderError(f"failed to capture screenshot: {e}", phase=PHASE_RENDER) from e

    return _decode_artifact(response, "screenshot")


# =============================================================================
# ORCHESTRATION
# =============================================================================


async def html_to_pdf(
    html: str,
    options: Optional[Mapping[str, Any]] = None,
    manager: Optional[SessionManager] = None,
) -> bytes:
    """
    Render an HTML document to PDF in a dedicated session.

    Args:
        html: Complete HTML markup
        options: Raw print options from the request
        manager: Session manager to use (defaults to the process-wide one)

    Returns:
        PDF bytes
    """
    config = translate_print_options(options)
    manager = manager or session_manager
    start_time = time.time()

    async def body(session: RenderSession) -> bytes:
        await load_html(session, html)
        return await render_pdf(session, config)

    pdf_bytes = await manager.with_session(body)

    render_time_ms = int((time.time() - start_time) * 1000)
    logger.info(f"Rendered PDF in {render_time_ms}ms: {len(pdf_bytes)} bytes")
    return pdf_bytes


async def html_to_screenshot(
    html: str,
    options: Optional[Mapping[str, Any]] = None,
    manager: Optional[SessionManager] = None,
) -> bytes:
    """
    Render an HTML document to a PNG screenshot in a dedicated session.

    Args:
        html: Complete HTML markup
        options: Raw screenshot options from the request
        manager: Session manager to use (defaults to the process-wide one)

    Returns:
        PNG bytes
    """
    config = translate_screenshot_options(options)
    manager = manager or session_manager
    start_time = time.time()

    async def body(session: RenderSession) -> bytes:
        await load_html(session, html)
        return await render_screenshot(session, config)

    png_bytes = await manager.with_session(body)

    render_time_ms = int((time.time() - start_time) * 1000)
    logger.info(
        f"Captured {config.width}x{config.height} screenshot "
        f"(full_page={config.full_page}) in {render_time_ms}ms: {len(png_bytes)} bytes"
    )
    return png_bytes
