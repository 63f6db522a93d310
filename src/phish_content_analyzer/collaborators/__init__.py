"""Adapters for the external capabilities the pipeline consumes."""

from phish_content_analyzer.collaborators.eml_reader import read_container
from phish_content_analyzer.collaborators.ocr import TesseractTextExtractor, run_image_ocr
from phish_content_analyzer.collaborators.url_reputation import (
    HeuristicUrlReputation,
    VirusTotalUrlReputation,
    build_url_reputation,
)

__all__ = [
    "HeuristicUrlReputation",
    "TesseractTextExtractor",
    "VirusTotalUrlReputation",
    "build_url_reputation",
    "read_container",
    "run_image_ocr",
]
