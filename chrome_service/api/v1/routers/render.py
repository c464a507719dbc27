"""
Render Router - HTML to PDF/PNG and PDF/A endpoints.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from ....deps import get_pdfa_converter, get_session_manager
from ....models import ConvertRequest, ErrorResponse, PrintRequest, ScreenshotRequest
from ....services.pdfa import PdfaConversionError, PdfaConverter
from ....services.renderer import html_to_pdf, html_to_screenshot
from ....services.errors import RenderError
from ....services.session import SessionManager

logger = logging.getLogger("chrome_service.api.render")

router = APIRouter(
    tags=["render"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)

PDF_MEDIA_TYPE = "application/pdf"
PNG_MEDIA_TYPE = "image/png"


async def _render_pdf(request: PrintRequest, manager: SessionManager) -> bytes:
    try:
        return await html_to_pdf(request.html, request.options, manager=manager)
    except RenderError as e:
        logger.warning(f"PDF render failed during {e.phase}: {e}")
        raise HTTPException(status_code=e.status_code, detail=str(e))


async def _convert(pdf_bytes: bytes, request_options, converter: PdfaConverter) -> bytes:
    try:
        return await converter.convert(pdf_bytes, request_options)
    except PdfaConversionError as e:
        logger.warning(f"PDF/A conversion failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/print", response_class=Response)
async def print_pdf(
    request: PrintRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> Response:
    """
    Render HTML to PDF.

    Recognized options: landscape, display_header_footer, print_background,
    scale, paper_width, paper_height, margin_top, margin_bottom, margin_left,
    margin_right, page_ranges.
    """
    pdf_bytes = await _render_pdf(request, manager)
    return Response(content=pdf_bytes, media_type=PDF_MEDIA_TYPE)


@router.post("/print_pdfa", response_class=Response)
async def print_pdfa(
    request: PrintRequest,
    manager: SessionManager = Depends(get_session_manager),
    converter: PdfaConverter = Depends(get_pdfa_converter),
) -> Response:
    """Render HTML to PDF, then convert the result to PDF/A."""
    pdf_bytes = await _render_pdf(request, manager)
    pdfa_bytes = await _convert(pdf_bytes, request.options, converter)
    return Response(content=pdfa_bytes, media_type=PDF_MEDIA_TYPE)


@router.post("/convert_pdfa", response_class=Response)
async def convert_pdfa(
    request: ConvertRequest,
    converter: PdfaConverter = Depends(get_pdfa_converter),
) -> Response:
    """
    Convert an existing PDF to PDF/A.

    ``pdf`` carries the document itself, not base64; its bytes are the UTF-8
    encoding of the JSON string.
    """
    pdf_bytes = request.pdf.encode("utf-8", errors="surrogatepass")
    pdfa_bytes = await _convert(pdf_bytes, request.options, converter)
    return Response(content=pdfa_bytes, media_type=PDF_MEDIA_TYPE)


@router.post("/screenshot", response_class=Response)
async def screenshot(
    request: ScreenshotRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> Response:
    """
    Render HTML to a PNG screenshot.

    Recognized options: width (default 1280), height (default 720),
    full_page (default false).
    """
    try:
        png_bytes = await html_to_screenshot(request.html, request.options, manager=manager)
    except RenderError as e:
        logger.warning(f"Screenshot failed during {e.phase}: {e}")
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return Response(content=png_bytes, media_type=PNG_MEDIA_TYPE)
