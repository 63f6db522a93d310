"""Build and wire the analysis service."""

from __future__ import annotations

from phish_content_analyzer.collaborators.eml_reader import read_container
from phish_content_analyzer.collaborators.ocr import TesseractTextExtractor
from phish_content_analyzer.collaborators.url_reputation import build_url_reputation
from phish_content_analyzer.config.settings import AppConfig, load_config
from phish_content_analyzer.orchestrator.analyzer import AnalysisOrchestrator
from phish_content_analyzer.orchestrator.backend import ChatCompletionsBackend
from phish_content_analyzer.orchestrator.capabilities import default_capability_registry
from phish_content_analyzer.orchestrator.normalizer import InputNormalizer
from phish_content_analyzer.orchestrator.pipeline import ContentAnalysisService
from phish_content_analyzer.orchestrator.tool_executor import ToolExecutor
from phish_content_analyzer.providers.llm_openai import ProviderConfig, build_completion_fn


def build_service(cfg: AppConfig, *, model: str | None = None) -> ContentAnalysisService:
    active_model = model or cfg.model
    backend = ChatCompletionsBackend(
        completion=build_completion_fn(
            ProviderConfig(
                provider=cfg.provider,
                model=active_model,
                api_base=cfg.api_base,
                api_key=cfg.api_key,
            )
        ),
        model=active_model,
        temperature=cfg.temperature,
    )
    orchestrator = AnalysisOrchestrator(
        backend=backend,
        registry=default_capability_registry(build_url_reputation(cfg)),
        executor=ToolExecutor(max_retries=cfg.tool_max_retries, max_workers=cfg.tool_max_workers),
        max_turns=cfg.max_turns,
        attach_images=cfg.attach_images,
    )
    normalizer = InputNormalizer(
        extract_text=TesseractTextExtractor(backend=cfg.ocr_backend, languages=cfg.ocr_languages),
        read_container=read_container,
    )
    return ContentAnalysisService(normalizer=normalizer, orchestrator=orchestrator, provider=cfg.provider)


def create_service(
    *,
    profile_override: str | None = None,
    model_override: str | None = None,
) -> tuple[ContentAnalysisService, dict[str, object]]:
    cfg, yaml_cfg = load_config(profile_override=profile_override)
    active_model = model_override or cfg.model
    service = build_service(cfg, model=active_model)
    profiles = yaml_cfg.get("profiles")
    profile_map = profiles if isinstance(profiles, dict) else {}
    runtime = {
        "profile": cfg.profile,
        "profile_choices": [str(item) for item in profile_map.keys() if str(item).strip()],
        "provider": cfg.provider,
        "model": active_model,
        "model_choices": cfg.model_choices,
        "temperature": cfg.temperature,
        "api_base": cfg.api_base,
        "max_turns": cfg.max_turns,
        "attach_images": cfg.attach_images,
        "ocr_backend": cfg.ocr_backend,
        "url_reputation_backend": cfg.url_reputation_backend,
        "capabilities": service.orchestrator.registry.names(),
    }
    return service, runtime
