"""
Render error hierarchy.

Every failure that crosses the engine boundary is raised as a RenderError
tagged with the phase that was running when it happened.
"""

PHASE_SESSION = "session"
PHASE_INJECT = "inject"
PHASE_RENDER = "render"

_PHASE_LABELS = {
    PHASE_SESSION: "session setup",
    PHASE_INJECT: "content injection",
    PHASE_RENDER: "rendering",
}


def describe_phase(phase: str) -> str:
    return _PHASE_LABELS.get(phase, phase)


class RenderError(Exception):
    """Raised when the engine fails to produce an artifact."""

    def __init__(self, message: str, phase: str = PHASE_RENDER, status_code: int = 500):
        super().__init__(message)
        self.phase = phase
        self.status_code = status_code


class RenderTimeoutError(RenderError):
    """Raised when a render session outlives its deadline."""


class SessionClosedError(RuntimeError):
    """Raised when a released render session is used again."""
