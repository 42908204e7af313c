"""LLM configuration for the VizPilot analysis agent."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from langchain_core.language_models import BaseChatModel

from vizpilot.errors import NoApiKey
from vizpilot.oracle import Oracle

# Default models per provider
DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "gemini": "gemini-2.5-flash",
}

SUPPORTED_PROVIDERS = set(DEFAULT_MODELS.keys())

# Environment variable holding the API key for each provider
API_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GOOGLE_API_KEY",
}

DEFAULT_PROVIDER = "gemini"
DEFAULT_TEMPERATURE = 0.7


@dataclass
class OracleConfig:
    """Provider selection and credentials for one oracle instance.

    Created by the caller whenever the settings change; nothing here is
    global.
    """

    provider: str = DEFAULT_PROVIDER
    model: Optional[str] = None
    api_key: str = ""
    temperature: float = DEFAULT_TEMPERATURE
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls, provider: Optional[str] = None, model: Optional[str] = None) -> "OracleConfig":
        """Build a config from ``VIZPILOT_*`` and provider API key variables.

        Explicit arguments win over the environment.
        """
        provider = (provider or os.getenv("VIZPILOT_PROVIDER") or DEFAULT_PROVIDER).lower()
        model = model or os.getenv("VIZPILOT_MODEL") or None
        key_var = API_KEY_ENV_VARS.get(provider)
        api_key = os.getenv(key_var, "") if key_var else ""
        return cls(provider=provider, model=model, api_key=api_key)


def get_llm(provider: str = DEFAULT_PROVIDER, model: str = None, **kwargs) -> BaseChatModel:
    """
    Initialize and return a chat model for the given provider.

    Args:
        provider: "openai" | "gemini"
        model: Model name override. If None, uses the default for the provider.
        **kwargs: Additional keyword arguments passed to the chat model constructor.

    Returns:
        Configured LangChain chat model.

    Raises:
        ValueError: If the provider is not supported.
    """
    provider = provider.lower()

    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(
            f"Unsupported LLM provider: '{provider}'. "
            f"Supported providers: {sorted(SUPPORTED_PROVIDERS)}"
        )

    model_name = model or DEFAULT_MODELS[provider]

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(model=model_name, **kwargs)

    # provider == "gemini"
    from langchain_google_genai import ChatGoogleGenerativeAI

    return ChatGoogleGenerativeAI(model=model_name, **kwargs)


def create_oracle(config: OracleConfig) -> Oracle:
    """Build an :class:`~vizpilot.oracle.Oracle` from a config.

    Raises:
        NoApiKey: If the config carries no API key.
        ValueError: If the provider is not supported.
    """
    if not config.api_key:
        raise NoApiKey()

    kwargs: dict = {"temperature": config.temperature}
    if config.timeout is not None:
        kwargs["timeout"] = config.timeout

    provider = config.provider.lower()
    if provider == "openai":
        kwargs["api_key"] = config.api_key
    elif provider == "gemini":
        kwargs["google_api_key"] = config.api_key

    llm = get_llm(provider=provider, model=config.model, **kwargs)
    return Oracle(llm)
