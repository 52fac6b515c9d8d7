from .base import TextRecognizer
from .tesseract_cli import TesseractCliEngine, parse_tesseract_tsv

__all__ = ["TextRecognizer", "TesseractCliEngine", "parse_tesseract_tsv"]
