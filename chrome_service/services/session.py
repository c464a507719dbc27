"""
Render Session Manager.

Opens one isolated automation session (browser context, page and DevTools
protocol session) per render call, bounds the call by a hard deadline and
tears the session down on every exit path.
"""

import asyncio
import logging
import time
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from playwright.async_api import BrowserContext, CDPSession, Page

from ..config import settings
from .engine import ChromeEngine, chrome_engine
from .errors import (
    PHASE_SESSION,
    RenderError,
    RenderTimeoutError,
    SessionClosedError,
    describe_phase,
)

logger = logging.getLogger("chrome_service.session")

T = TypeVar("T")


class RenderSession:
    """
    One render operation's private view of the engine.

    Created and released by SessionManager only. ``phase`` is updated by the
    steps running inside the session so failures can say where they happened.
    """

    def __init__(
        self,
        context: BrowserContext,
        page: Page,
        cdp: CDPSession,
        deadline: float,
    ):
        self.id = uuid.uuid4().hex[:12]
        self.context = context
        self.page = page
        self.created_at = time.monotonic()
        self.deadline = deadline
        self.phase = PHASE_SESSION
        self._cdp = cdp
        self._released = False

    async def send(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Issue one DevTools protocol command in this session."""
        if self._released:
            raise SessionClosedError(f"render session {self.id} used after release ({method})")
        return await self._cdp.send(method, params or {})

    def expect_event(self, event: str) -> "asyncio.Future[Dict[str, Any]]":
        """Future resolved with the params of the next ``event`` in this session."""
        if self._released:
            raise SessionClosedError(f"render session {self.id} used after release ({event})")
        future = asyncio.get_running_loop().create_future()

        def _on_event(params: Dict[str, Any]) -> None:
            if not future.done():
                future.set_result(params)

        self._cdp.once(event, _on_event)
        return future

    def remaining(self) -> float:
        """Seconds left before the deadline."""
        return max(0.0, self.deadline - time.monotonic())

    @property
    def released(self) -> bool:
        return self._released


class SessionManager:
    """
    Hands out single-use render sessions against a ChromeEngine.

    There is no pooling and no admission control: every call opens its own
    browser context and pays the full startup cost.
    """

    def __init__(
        self,
        engine: ChromeEngine,
        timeout_seconds: float = 30.0,
        release_timeout_seconds: float = 5.0,
    ):
        self.engine = engine
        self.timeout_seconds = timeout_seconds
        self.release_timeout_seconds = release_timeout_seconds
        self._active_sessions = 0
        self._lock = asyncio.Lock()

    async def with_session(
        self,
        body: Callable[[RenderSession], Awaitable[T]],
        timeout: Optional[float] = None,
    ) -> T:
        """
        Run ``body`` inside a fresh render session.

        Args:
            body: Coroutine function receiving the session and producing the result
            timeout: Deadline in seconds, covering session creation and ``body``

        Returns:
            Whatever ``body`` returns

        Raises:
            RenderTimeoutError: If the deadline elapses before ``body`` finishes
            RenderError: If the session cannot be opened or ``body`` fails in the engine
        """
        timeout = self.timeout_seconds if timeout is None else timeout
        session: Optional[RenderSession] = None
        # One deadline covers opening the session and running the body.
        deadline = time.monotonic() + timeout

        try:
            session = await asyncio.wait_for(self._open(deadline), timeout)
            return await asyncio.wait_for(body(session), session.remaining())
        except asyncio.TimeoutError as e:
            phase = session.phase if session is not None else PHASE_SESSION
            logger.error(f"Render session timed out during {describe_phase(phase)}")
            raise RenderTimeoutError(
                f"render timed out after {timeout:g}s during {describe_phase(phase)}",
                phase=phase,
            ) from e
        finally:
            if session is not None:
                await self._release(session)

    async def _open(self, deadline: float) -> RenderSession:
        try:
            context = await self.engine.new_context()
        except Exception as e:
            raise RenderError(f"failed to open render session: {e}", phase=PHASE_SESSION) from e

        try:
            page = await context.new_page()
            cdp = await context.new_cdp_session(page)
        except asyncio.CancelledError:
            await self._close_context(context)
            raise
        except Exception as e:
            await self._close_context(context)
            raise RenderError(f"failed to open render session: {e}", phase=PHASE_SESSION) from e

        session = RenderSession(context, page, cdp, deadline)
        async with self._lock:
            self._active_sessions += 1
        logger.debug(f"Opened render session {session.id}")
        return session

    async def _release(self, session: RenderSession) -> None:
        if session.released:
            return
        session._released = True

        try:
            await asyncio.wait_for(self._teardown(session), self.release_timeout_seconds)
        except Exception as e:
            logger.warning(f"Error releasing render session {session.id}: {e!r}")
        finally:
            async with self._lock:
                self._active_sessions = max(0, self._active_sessions - 1)

        elapsed_ms = int((time.monotonic() - session.created_at) * 1000)
        logger.debug(f"Released render session {session.id} after {elapsed_ms}ms")

    async def _teardown(self, session: RenderSession) -> None:
        try:
            await session._cdp.detach()
        except Exception as e:
            logger.debug(f"CDP detach failed for session {session.id}: {e}")
        await session.context.close()

    async def _close_context(self, context: BrowserContext) -> None:
        try:
            await asyncio.wait_for(context.close(), self.release_timeout_seconds)
        except Exception as e:
            logger.warning(f"Error closing browser context: {e!r}")

    @property
    def active_sessions(self) -> int:
        """Number of render sessions currently open."""
        return self._active_sessions


# Singleton instance
session_manager = SessionManager(
    chrome_engine,
    timeout_seconds=settings.session_timeout_seconds,
    release_timeout_seconds=settings.session_release_timeout_seconds,
)
