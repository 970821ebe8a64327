from typing import Any

from .base import CompletionClient
from .providers import OpenAICompatibleClient

# Default endpoint and model per OpenAI-compatible provider
PROVIDER_PRESETS: dict[str, dict[str, str | None]] = {
    "openai": {
        "base_url": None,
        "model": "gpt-4o-mini",
    },
    "anyscale": {
        "base_url": "https://api.endpoints.anyscale.com/v1",
        "model": "meta-llama/Llama-2-70b-chat-hf",
    },
    "deepseek": {
        "base_url": "https://api.deepseek.com",
        "model": "deepseek-chat",
    },
}


def create_completion_client(provider: str, **config: Any) -> CompletionClient:
    """Create a completion client instance.

    This factory function hides which endpoint is behind the client. All
    supported providers speak the OpenAI chat completions protocol and
    differ only in their default base URL and model.

    Args:
        provider: Provider type ('openai', 'anyscale', 'deepseek')
        **config: Client configuration
            - api_key: str (required)
            - model: str | None (default: provider preset)
            - base_url: str | None (default: provider preset)

    Returns:
        Initialized completion client

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> client = create_completion_client(
        ...     "anyscale",
        ...     api_key="esecret_...",
        ...     model="meta-llama/Llama-2-70b-chat-hf"
        ... )
    """
    provider_lower = provider.lower()

    preset = PROVIDER_PRESETS.get(provider_lower)
    if preset is None:
        raise ValueError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: {', '.join(repr(p) for p in PROVIDER_PRESETS)}"
        )

    if "api_key" not in config:
        raise TypeError(f"{provider_lower} provider requires 'api_key' in config")

    for key, default in preset.items():
        if config.get(key) is None and default is not None:
            config[key] = default

    return OpenAICompatibleClient(**config)
