from .services.pdfa import PdfaConverter, get_converter
from .services.session import SessionManager, session_manager

_pdfa_converter = get_converter()

def get_session_manager() -> SessionManager:
    return session_manager

def get_pdfa_converter() -> PdfaConverter:
    return _pdfa_converter
