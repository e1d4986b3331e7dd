"""Extraction backends and provider selection.

Backends are interchangeable: the service only depends on the
``TimetableExtractor`` interface. Provider selection lives here so the
normalization core never looks at configuration.
"""

from __future__ import annotations

from dataclasses import dataclass

from timetable_extractor.backends.base import TimetableExtractor
from timetable_extractor.backends.gemini import GeminiExtractor
from timetable_extractor.backends.ollama import OllamaExtractor
from timetable_extractor.config import Settings
from timetable_extractor.exceptions import ConfigurationError

PROVIDERS: dict[str, type[TimetableExtractor]] = {
    OllamaExtractor.name: OllamaExtractor,
    GeminiExtractor.name: GeminiExtractor,
}


@dataclass(frozen=True)
class ProviderInfo:
    """A configured provider and the model it will use."""

    name: str
    model: str
    supports_images: bool


def build_extractor(provider: str | None = None, settings: Settings | None = None) -> TimetableExtractor:
    """Create the backend for a provider name.

    Args:
        provider: Provider name. If None, uses settings.default_provider.
        settings: Application settings. If None, uses default settings.

    Raises:
        ConfigurationError: If the provider is unknown or not configured.
    """
    from timetable_extractor.config import get_settings

    settings = settings or get_settings()
    name = (provider or settings.default_provider).strip().lower()
    try:
        cls = PROVIDERS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unsupported provider: {name!r} (choose from {', '.join(sorted(PROVIDERS))})"
        ) from None
    return cls(settings)


def available_providers(settings: Settings) -> list[ProviderInfo]:
    """List providers that have the configuration they need."""

    providers: list[ProviderInfo] = []
    if settings.ollama_host:
        providers.append(
            ProviderInfo(
                name=OllamaExtractor.name,
                model=settings.ollama_model,
                supports_images=bool(OllamaExtractor.vision_mime_types),
            )
        )
    if settings.gemini_api_key is not None:
        providers.append(
            ProviderInfo(
                name=GeminiExtractor.name,
                model=settings.gemini_model,
                supports_images=bool(GeminiExtractor.vision_mime_types),
            )
        )
    return providers


__all__ = [
    "PROVIDERS",
    "GeminiExtractor",
    "OllamaExtractor",
    "ProviderInfo",
    "TimetableExtractor",
    "available_providers",
    "build_extractor",
]
