from .pymupdf_engine import PyMuPDFEngine

__all__ = ["PyMuPDFEngine"]
