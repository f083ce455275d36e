from .base import OcrEngine
from .tesseract_cli import TesseractCliEngine, parse_tesseract_tsv

__all__ = ["OcrEngine", "TesseractCliEngine", "parse_tesseract_tsv"]
