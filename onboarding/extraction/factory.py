from typing import ClassVar

from onboarding.config.settings import Settings
from onboarding.extraction.base import BaseExtractor
from onboarding.extraction.example_client_adapter import ExampleClientAdapter
from onboarding.extraction.extractor import DocumentExtractor
from onboarding.extraction.openai_client_adapter import OpenAIClientAdapter
from onboarding.pdf.base import BasePdfRasterizer


class ExtractorFactory:
    """Creates the configured document extractor."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings, rasterizer: BasePdfRasterizer) -> BaseExtractor:
        provider = settings.extraction_provider.strip().lower()
        if provider == "example":
            return DocumentExtractor(
                client=ExampleClientAdapter(),
                model="example",
                rasterizer=rasterizer,
                zoom=settings.pdf_raster_zoom,
            )
        client = OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            timeout_seconds=settings.extraction_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return DocumentExtractor(
            client=client,
            model=cls._resolve_model_name(provider, settings),
            rasterizer=rasterizer,
            temperature=settings.extraction_temperature,
            zoom=settings.pdf_raster_zoom,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.extraction_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "extraction_openai_compatible_base_url is required for "
                    "extraction_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = ["example", "openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]
        raise ValueError(f"Unknown extraction provider '{provider}'. Choose from: {supported}")

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.extraction_openai_api_key,
            "openai_compatible": settings.extraction_openai_compatible_api_key,
            "openrouter": settings.extraction_openrouter_api_key,
            "groq": settings.extraction_groq_api_key,
            "together": settings.extraction_together_api_key,
            "ollama": settings.extraction_ollama_api_key,
        }
        return key_map.get(provider, "")

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.extraction_openai_model_name,
            "openai_compatible": settings.extraction_openai_compatible_model_name,
            "openrouter": settings.extraction_openrouter_model_name,
            "groq": settings.extraction_groq_model_name,
            "together": settings.extraction_together_model_name,
            "ollama": settings.extraction_ollama_model_name,
        }
        return key_map.get(provider, "")
