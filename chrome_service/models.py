"""
Chrome Service Pydantic Models.

Request/response models for the HTTP API and the typed rendering
configurations built from a request's option bag.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# =============================================================================
# REQUESTS
# =============================================================================


class PrintRequest(BaseModel):
    """Request model for HTML to PDF rendering."""

    html: str = Field(..., min_length=1, description="HTML document to render")
    options: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Print options (landscape, scale, paper_width, margin_top, page_ranges, ...)",
    )


class ScreenshotRequest(BaseModel):
    """Request model for HTML to PNG rendering."""

    html: str = Field(..., min_length=1, description="HTML document to render")
    options: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Screenshot options (width, height, full_page)",
    )


class ConvertRequest(BaseModel):
    """Request model for converting an existing PDF to PDF/A."""

    pdf: str = Field(..., min_length=1, description="PDF document content")
    options: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Conversion options (pdfa_part)",
    )


# =============================================================================
# RENDERING CONFIGURATION
# =============================================================================


class PrintConfiguration(BaseModel):
    """
    Typed parameters for the engine's print-to-PDF call.

    Fields left as None are never sent, so the engine applies its own
    defaults. Lengths are in inches.
    """

    landscape: Optional[bool] = None
    display_header_footer: Optional[bool] = Field(default=None, serialization_alias="displayHeaderFooter")
    print_background: Optional[bool] = Field(default=None, serialization_alias="printBackground")
    scale: Optional[float] = None
    paper_width: Optional[float] = Field(default=None, serialization_alias="paperWidth")
    paper_height: Optional[float] = Field(default=None, serialization_alias="paperHeight")
    margin_top: Optional[float] = Field(default=None, serialization_alias="marginTop")
    margin_bottom: Optional[float] = Field(default=None, serialization_alias="marginBottom")
    margin_left: Optional[float] = Field(default=None, serialization_alias="marginLeft")
    margin_right: Optional[float] = Field(default=None, serialization_alias="marginRight")
    page_ranges: Optional[str] = Field(default=None, serialization_alias="pageRanges")

    def to_cdp_params(self) -> Dict[str, Any]:
        """Parameters for Page.printToPDF, camelCased, unset fields dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ScreenshotConfiguration(BaseModel):
    """Viewport and capture mode for a screenshot."""

    width: int = 1280
    height: int = 720
    full_page: bool = False


# =============================================================================
# RESPONSES
# =============================================================================


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""

    error: str = Field(..., description="Human readable error message")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy", description="Service status")
    engine_connected: bool = Field(..., description="Whether the rendering engine is reachable")
    active_sessions: int = Field(..., description="Render sessions currently open")
    session_timeout_seconds: float = Field(..., description="Deadline applied to each session")
    pdfa_converter: str = Field(..., description="Configured PDF/A converter backend")
