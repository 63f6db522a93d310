"""OCR worker APIs."""

from __future__ import annotations

from dataclasses import dataclass
import io

from PIL import Image
import pytesseract

from phish_content_analyzer.core.errors import CollaboratorFailureError
from phish_content_analyzer.core.logging import get_logger
from phish_content_analyzer.domain.data_uri import parse_data_uri

logger = get_logger(__name__)


def run_image_ocr(image: bytes, *, backend: str = "tesseract", languages: str = "eng") -> tuple[str, str, str | None]:
    if backend.strip().lower() != "tesseract":
        return "", backend, "unsupported_ocr_backend"
    try:
        with Image.open(io.BytesIO(image)) as handle:
            text = pytesseract.image_to_string(handle, lang=languages or "eng")
        return text, "tesseract", None
    except (pytesseract.TesseractError, OSError, ValueError) as exc:
        return "", "tesseract", f"tesseract_error:{type(exc).__name__}"


@dataclass(frozen=True)
class TesseractTextExtractor:
    """Turn an image data URI into text; failures raise `CollaboratorFailureError`."""

    backend: str = "tesseract"
    languages: str = "eng"

    def __call__(self, image_data_uri: str) -> str:
        payload = parse_data_uri(image_data_uri, label="image")
        text, backend, error = run_image_ocr(payload.data, backend=self.backend, languages=self.languages)
        if error:
            logger.warning("ocr_failed", backend=backend, error=error, mime_type=payload.mime_type)
            raise CollaboratorFailureError(f"Failed to extract text from image: {error}")
        logger.debug("ocr_done", backend=backend, chars=len(text))
        return " ".join(text.split())
