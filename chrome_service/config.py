"""
Chrome Service Configuration.

Environment-driven settings for the HTML rendering microservice.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # =========================================================================
    # API SETTINGS
    # =========================================================================
    api_title: str = "Chrome Rendering Service"
    api_version: str = "1.0.0"
    debug: bool = Field(default=False, description="Enable verbose logging")
    host: str = Field(default="0.0.0.0", description="Interface to bind the HTTP server to")
    port: int = Field(default=8080, description="Port to bind the HTTP server to")

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed origins for CORS",
    )
    cors_credentials: bool = True
    cors_methods: List[str] = ["*"]
    cors_headers: List[str] = ["*"]

    # =========================================================================
    # ENGINE SETTINGS
    # =========================================================================
    browser_cdp_url: Optional[str] = Field(
        default=None,
        description="CDP endpoint of an already-running Chromium; launch one locally when unset",
    )
    browser_headless: bool = Field(
        default=True,
        description="Run the locally launched browser in headless mode",
    )
    browser_launch_args: List[str] = Field(
        default=[
            "--disable-gpu",
            "--disable-dev-shm-usage",
            "--disable-setuid-sandbox",
            "--no-sandbox",
        ],
        description="Extra command line flags for the locally launched browser",
    )

    # =========================================================================
    # SESSION SETTINGS
    # =========================================================================
    session_timeout_seconds: float = Field(
        default=30.0,
        description="Hard deadline for one render session, measured from its creation",
    )
    session_release_timeout_seconds: float = Field(
        default=5.0,
        description="Upper bound on tearing down a render session",
    )

    # =========================================================================
    # PDF/A CONVERSION
    # =========================================================================
    pdfa_converter: str = Field(
        default="passthrough",
        description="PDF/A converter backend: 'passthrough' or 'ghostscript'",
    )
    ghostscript_binary: str = Field(default="gs", description="Ghostscript executable")
    pdfa_part: int = Field(default=3, description="PDF/A part passed to Ghostscript (1, 2 or 3)")
    pdfa_compatibility_policy: int = Field(
        default=1,
        description="Ghostscript PDFACompatibilityPolicy",
    )
    pdfa_timeout_seconds: float = Field(default=60.0, description="Ghostscript run timeout")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
