"""
Shared fixtures.

The rendering engine is replaced by an in-memory fake that answers the same
DevTools protocol commands the service issues, so no browser is needed.
"""

import asyncio
import base64
import os
import struct
import zlib

import pytest

# Tests never run the real converter.
os.environ.setdefault("PDFA_CONVERTER", "passthrough")

HANG = "hang"


def make_png(width: int, height: int) -> bytes:
    """Minimal PNG: signature, IHDR with the given size, IEND."""
    def chunk(kind: bytes, data: bytes) -> bytes:
        return (
            struct.pack(">I", len(data))
            + kind
            + data
            + struct.pack(">I", zlib.crc32(kind + data) & 0xFFFFFFFF)
        )

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IEND", b"")


def png_size(data: bytes):
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    return struct.unpack(">II", data[16:24])


class FakeCDPSession:
    def __init__(self, engine: "FakeEngine"):
        self.engine = engine
        self.frame_id = f"frame-{len(engine.contexts)}"
        self.document = None
        self.viewport = (800, 600)
        self.calls = []
        self.detached = False
        self.loading = False
        self._listeners = {}

    def once(self, event, handler):
        self._listeners.setdefault(event, []).append(handler)

    def _finish_load(self):
        if self.engine.hold_load:
            return
        self.loading = False
        for handler in self._listeners.pop("Page.loadEventFired", []):
            handler({"timestamp": 1.0})

    async def send(self, method, params=None):
        params = params or {}
        self.calls.append((method, params))

        failure = self.engine.failures.get(method)
        if failure == HANG:
            await asyncio.sleep(3600)
        elif failure is not None:
            raise failure

        # Yield so concurrent sessions interleave.
        await asyncio.sleep(0)

        if method == "Page.enable":
            return {}
        if method == "Page.navigate":
            self.document = ""
            self.loading = True
            # The load event arrives some time after the navigate reply.
            asyncio.get_running_loop().call_later(0.01, self._finish_load)
            return {"frameId": self.frame_id, "loaderId": "loader-1"}
        if method == "Page.getFrameTree":
            return {"frameTree": {"frame": {"id": self.frame_id, "url": "about:blank"}}}
        if method == "Page.setDocumentContent":
            assert params["frameId"] == self.frame_id
            if self.loading:
                raise RuntimeError("Cannot set document content while a navigation is pending")
            self.document = params["html"]
            return {}
        if method == "Page.printToPDF":
            pdf = b"%PDF-1.7\n" + (self.document or "").encode("utf-8") + b"\n%%EOF\n"
            return {"data": base64.b64encode(pdf).decode("ascii"), "stream": None}
        if method == "Emulation.setDeviceMetricsOverride":
            self.viewport = (params["width"], params["height"])
            return {}
        if method == "Page.getLayoutMetrics":
            width, height = self.viewport
            return {
                "cssContentSize": {
                    "x": 0,
                    "y": 0,
                    "width": width,
                    "height": max(height, self.engine.document_height),
                }
            }
        if method == "Page.captureScreenshot":
            clip = params.get("clip")
            size = (clip["width"], clip["height"]) if clip else self.viewport
            return {"data": base64.b64encode(make_png(*size)).decode("ascii")}
        raise AssertionError(f"unexpected CDP method {method}")

    async def detach(self):
        self.detached = True


class FakeContext:
    def __init__(self, engine: "FakeEngine"):
        self.engine = engine
        self.cdp = None
        self.close_count = 0

    async def new_page(self):
        return object()

    async def new_cdp_session(self, page):
        self.cdp = FakeCDPSession(self.engine)
        return self.cdp

    async def close(self):
        self.close_count += 1
        if self.engine.close_error is not None:
            raise self.engine.close_error


class FakeEngine:
    """Stands in for ChromeEngine."""

    def __init__(self):
        self.contexts = []
        self.failures = {}
        self.close_error = None
        self.document_height = 2000
        self.connected = True
        self.hold_load = False
        self.new_context_delay = 0.0

    async def new_context(self):
        if self.new_context_delay:
            await asyncio.sleep(self.new_context_delay)
        if not self.connected:
            raise ConnectionRefusedError("connect ECONNREFUSED 127.0.0.1:9222")
        context = FakeContext(self)
        self.contexts.append(context)
        return context

    @property
    def is_connected(self) -> bool:
        return self.connected


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def manager(fake_engine):
    from chrome_service.services.session import SessionManager

    return SessionManager(fake_engine, timeout_seconds=5.0, release_timeout_seconds=1.0)


@pytest.fixture
def client(manager):
    """Test client wired to the fake engine and the passthrough converter."""
    from fastapi.testclient import TestClient

    from chrome_service.deps import get_pdfa_converter, get_session_manager
    from chrome_service.main import app
    from chrome_service.services.pdfa import PassthroughConverter

    app.dependency_overrides[get_session_manager] = lambda: manager
    app.dependency_overrides[get_pdfa_converter] = lambda: PassthroughConverter()
    yield TestClient(app)
    app.dependency_overrides.clear()
