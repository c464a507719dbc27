"""
PDF/A conversion.

The render path hands finished PDF bytes to a PdfaConverter and returns
whatever it produces. Two converters are provided:

- PassthroughConverter: returns the input unchanged (placeholder, default)
- GhostscriptConverter: rewrites the document with Ghostscript's pdfwrite
  device in PDF/A mode

Select one with the PDFA_CONVERTER setting.
"""

import asyncio
import logging
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional

from ..config import settings

logger = logging.getLogger("chrome_service.pdfa")

SUPPORTED_PDFA_PARTS = (1, 2, 3)


class PdfaConversionError(RuntimeError):
    """Raised when a PDF cannot be converted to PDF/A."""


class PdfaConverter:
    """Interface for PDF to PDF/A converters."""

    name = "base"

    async def convert(self, pdf_bytes: bytes, options: Optional[Mapping[str, Any]] = None) -> bytes:
        raise NotImplementedError


class PassthroughConverter(PdfaConverter):
    name = "passthrough"

    async def convert(self, pdf_bytes: bytes, options: Optional[Mapping[str, Any]] = None) -> bytes:
        logger.warning("PDF/A conversion not enabled, returning original PDF")
        return pdf_bytes


class GhostscriptConverter(PdfaConverter):
    """
    Convert with Ghostscript.

    Equivalent to:
        gs -dPDFA=3 -dBATCH -dNOPAUSE -sColorConversionStrategy=RGB \\
           -sDEVICE=pdfwrite -dPDFACompatibilityPolicy=1 \\
           -sOutputFile=output.pdf input.pdf

    The ``pdfa_part`` option (1, 2 or 3) overrides the configured part.
    """

    name = "ghostscript"

    def __init__(
        self,
        binary: str = "gs",
        part: int = 3,
        compatibility_policy: int = 1,
        timeout_seconds: float = 60.0,
    ):
        self.binary = binary
        self.part = part
        self.compatibility_policy = compatibility_policy
        self.timeout_seconds = timeout_seconds

    def _resolve_part(self, options: Optional[Mapping[str, Any]]) -> int:
        value = (options or {}).get("pdfa_part")
        if isinstance(value, (int, float)) and not isinstance(value, bool) and int(value) in SUPPORTED_PDFA_PARTS:
            return int(value)
        return self.part

    def build_command(self, input_pdf: Path, output_pdf: Path, part: int) -> list:
        return [
            self.binary,
            f"-dPDFA={part}",
            "-dBATCH",
            "-dNOPAUSE",
            "-dQUIET",
            "-sColorConversionStrategy=RGB",
            "-sDEVICE=pdfwrite",
            f"-dPDFACompatibilityPolicy={self.compatibility_policy}",
            f"-sOutputFile={output_pdf}",
            str(input_pdf),
        ]

    async def convert(self, pdf_bytes: bytes, options: Optional[Mapping[str, Any]] = None) -> bytes:
        part = self._resolve_part(options)

        with tempfile.TemporaryDirectory(prefix="chrome_service_pdfa_") as tmpdir:
            input_pdf = Path(tmpdir) / "input.pdf"
            output_pdf = Path(tmpdir) / "output.pdf"
            await asyncio.to_thread(input_pdf.write_bytes, pdf_bytes)
            command = self.build_command(input_pdf, output_pdf, part)

            try:
                process = await asyncio.create_subprocess_exec(
                    *command,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as e:
                raise PdfaConversionError(f"Failed to invoke Ghostscript: {e}") from e

            try:
                _, stderr = await asyncio.wait_for(process.communicate(), self.timeout_seconds)
            except asyncio.TimeoutError as e:
                process.kill()
                await process.wait()
                raise PdfaConversionError(
                    f"Ghostscript PDF/A conversion timed out after {self.timeout_seconds:g}s"
                ) from e

            if process.returncode != 0:
                raise PdfaConversionError(
                    f"Ghostscript PDF/A-{part} conversion failed "
                    f"(exit {process.returncode}): {stderr.decode(errors='replace').strip()}"
                )

            result = await asyncio.to_thread(_read_output, output_pdf)
            if not result:
                raise PdfaConversionError("Ghostscript produced no output")

        logger.info(f"Converted PDF to PDF/A-{part}: {len(pdf_bytes)} -> {len(result)} bytes")
        return result


def _read_output(path: Path) -> bytes:
    return path.read_bytes() if path.exists() else b""


def get_converter(name: Optional[str] = None) -> PdfaConverter:
    """Build the converter selected by ``name`` or the PDFA_CONVERTER setting."""
    name = (name or settings.pdfa_converter).lower()
    if name == PassthroughConverter.name:
        return PassthroughConverter()
    if name == GhostscriptConverter.name:
        return GhostscriptConverter(
            binary=settings.ghostscript_binary,
            part=settings.pdfa_part,
            compatibility_policy=settings.pdfa_compatibility_policy,
            timeout_seconds=settings.pdfa_timeout_seconds,
        )
    raise ValueError(f"Unknown PDF/A converter: {name}")
