"""
Content Injector - loads inline HTML as the session's document.
"""

import logging

from .errors import PHASE_INJECT, RenderError, SessionClosedError

logger = logging.getLogger("chrome_service.injector")

BLANK_URL = "about:blank"
LOAD_EVENT = "Page.loadEventFired"


async def load_html(session, html: str) -> None:
    """
    Replace the top-level frame's document with ``html``.

    The page is first parked on about:blank and the load of that blank
    document is awaited, so no navigation is pending when the frame's
    content is set directly over CDP. No URL is needed to host the markup.

    Raises:
        RenderError: If any of the steps is rejected by the engine
    """
    session.phase = PHASE_INJECT

    try:
        await session.send("Page.enable")
        blank_loaded = session.expect_event(LOAD_EVENT)
        navigation = await session.send("Page.navigate", {"url": BLANK_URL})
        if navigation.get("errorText"):
            blank_loaded.cancel()
            raise RenderError(
                f"failed to load HTML content: navigation to {BLANK_URL} failed: {navigation['errorText']}",
                phase=PHASE_INJECT,
            )
        # Bounded by the session deadline.
        await blank_loaded

        frame_tree = await session.send("Page.getFrameTree")
        frame_id = frame_tree.get("frameTree", {}).get("frame", {}).get("id")
        if not frame_id:
            raise RenderError("failed to load HTML content: top-level frame not found", phase=PHASE_INJECT)

        await session.send("Page.setDocumentContent", {"frameId": frame_id, "html": html})

    except (RenderError, SessionClosedError):
        raise
    except Exception as e:
        raise RenderError(f"failed to load HTML content: {e}", phase=PHASE_INJECT) from e

    logger.debug(f"Loaded {len(html)} chars of HTML into frame {frame_id}")
