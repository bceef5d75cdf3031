"""
LLM Provider - the classification service behind skill routing.

Builds a LangChain chat model for the requested model identifier and asks it
a single question. There is no retry and no timeout; the caller decides what
a failure means.
"""

from typing import Any, Dict, Optional, Protocol, Tuple

from langchain_core.messages import HumanMessage
from loguru import logger

from skillshelf.skills.errors import ClassificationError

# Friendly names accepted as routing models -> (provider, model id)
MODEL_ALIASES: Dict[str, Tuple[str, str]] = {
    "gpt-4o": ("openai", "gpt-4o"),
    "gpt-4o-mini": ("openai", "gpt-4o-mini"),
    "gpt-4.1-mini": ("openai", "gpt-4.1-mini"),
    "gpt-4.1-nano": ("openai", "gpt-4.1-nano"),
    "claude-haiku": ("anthropic", "claude-3-5-haiku-latest"),
    "claude-sonnet": ("anthropic", "claude-3-5-sonnet-latest"),
}

PROVIDERS = ("openai", "anthropic")


class ClassificationService(Protocol):
    async def ask(self, prompt: str, *, model: str, deterministic: bool = True) -> str: ...


def resolve_model(model: str) -> Tuple[str, str]:
    """
    Map a routing model identifier to (provider, model id).

    Accepts aliases, explicit "provider:model" and bare model ids; bare ids
    starting with "claude" go to Anthropic, everything else to OpenAI.
    """
    key = (model or "").strip()
    if not key:
        raise ClassificationError("No routing model given")

    if key in MODEL_ALIASES:
        return MODEL_ALIASES[key]

    provider, sep, name = key.partition(":")
    if sep and provider.lower() in PROVIDERS and name:
        return provider.lower(), name

    if key.lower().startswith("claude"):
        return "anthropic", key
    return "openai", key


class LLMProvider:
    """
    One-shot question answering over OpenAI or Anthropic chat models.

    Config keys: openai_api_key, openai_base_url, anthropic_api_key, temperature.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

    def _build_chat_model(self, model: str, temperature: float) -> Any:
        provider, model_name = resolve_model(model)

        try:
            if provider == "anthropic":
                from langchain_anthropic import ChatAnthropic

                kwargs: Dict[str, Any] = {"model": model_name, "temperature": temperature}
                if self.config.get("anthropic_api_key"):
                    kwargs["api_key"] = self.config["anthropic_api_key"]
                return ChatAnthropic(**kwargs)

            from langchain_openai import ChatOpenAI

            kwargs = {"model": model_name, "temperature": temperature}
            if self.config.get("openai_api_key"):
                kwargs["api_key"] = self.config["openai_api_key"]
            if self.config.get("openai_base_url"):
                kwargs["base_url"] = self.config["openai_base_url"]
            return ChatOpenAI(**kwargs)
        except ImportError as e:
            raise ClassificationError(f"{provider} support is not installed: {e}") from e
        except Exception as e:
            raise ClassificationError(f"Could not initialise {provider} model {model_name}: {e}") from e

    async def ask(self, prompt: str, *, model: str, deterministic: bool = True) -> str:
        """Send `prompt` once and return the completion text."""
        temperature = 0.0 if deterministic else float(self.config.get("temperature", 0.7))
        llm = self._build_chat_model(model, temperature)

        logger.debug(f"Asking {model} ({len(prompt)} chars)")
        response = await llm.ainvoke([HumanMessage(content=prompt)])

        content = response.content if hasattr(response, "content") else response
        if isinstance(content, list):
            # Content blocks (Anthropic); keep the text parts only.
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part) for part in content
            )
        return str(content)
