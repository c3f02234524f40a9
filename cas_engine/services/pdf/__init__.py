from .text_extractor import PyMuPDFTextExtractor, text_extractor

__all__ = ["PyMuPDFTextExtractor", "text_extractor"]
