"""FastAPI entrypoint."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from phish_content_analyzer.config.settings import load_config
from phish_content_analyzer.core.errors import NormalizationError
from phish_content_analyzer.core.logging import configure_logging, get_logger
from phish_content_analyzer.orchestrator.build import create_service

logger = get_logger(__name__)


class AnalyzeContentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str | None = None
    image_data_uri: str | None = Field(default=None, alias="imageDataUri")
    email_data_uri: str | None = Field(default=None, alias="emailDataUri")
    model: str | None = None


def create_app() -> FastAPI:
    cfg, _ = load_config()
    configure_logging(cfg.log_level, cfg.log_format)
    app = FastAPI(title="phish-content-analyzer")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/analyze")
    def analyze(payload: AnalyzeContentRequest) -> dict[str, object]:
        model_override = payload.model.strip() if payload.model and payload.model.strip() else None
        service, _ = create_service(model_override=model_override)
        try:
            verdict = service.analyze_content(
                text=payload.text,
                image_data_uri=payload.image_data_uri,
                email_data_uri=payload.email_data_uri,
            )
        except NormalizationError as exc:
            logger.info("analyze_rejected", error=type(exc).__name__, detail=str(exc))
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return verdict.to_payload()

    return app


app = create_app()
