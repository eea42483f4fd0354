import os
from typing import Optional, Sequence

from agents.hooks import AgentHooks
from agents.llm.litellm import LiteLLM
from agents.memory.conversation import ConversationMemory
from agents.react_agent import ReActAgent
from agents.retry import BackoffRetry, NoRetry, RetryPolicy
from agents.tools.base import Tool
from utils.config import Agent as AgentSettings, Config


def _validate_litellm_environment(model: str | None = None) -> None:
    """
    Validate environment variables for LiteLLM based on the model being used.

    LiteLLM supports many providers and this function checks for the appropriate
    API key based on the model prefix or common environment variables.

    Args:
        model: The model string which may indicate the provider

    Raises:
        ValueError: If required environment variables are missing
    """
    # If no model is specified, check for LLM_MODEL env var as per BaseLLM
    if not model:
        model = os.getenv("LLM_MODEL")
        if not model:
            # BaseLLM will handle this error, so we don't need to validate here
            return

    # Not exhaustive; covers the most common providers
    provider_env_vars = {
        "gpt": ["OPENAI_API_KEY"],
        "claude": ["ANTHROPIC_API_KEY"],
        "gemini": ["GEMINI_API_KEY", "GOOGLE_API_KEY"],
        "command": ["COHERE_API_KEY"],
        "mistral": ["MISTRAL_API_KEY"],
        "azure": ["AZURE_API_KEY", "AZURE_API_BASE"],
        "bedrock": ["AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY"],
        "ollama": [],
    }

    model_lower = model.lower()
    required_vars = None
    for provider_prefix, env_vars in provider_env_vars.items():
        if provider_prefix in model_lower:
            required_vars = env_vars
            break

    # Local providers need no key
    if required_vars == []:
        return

    if required_vars is None:
        common_vars = ["OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY"]
        if any(os.getenv(var) for var in common_vars):
            return
        raise ValueError(
            f"No API key found for model '{model}'. "
            f"Please set one of the following environment variables: "
            f"{', '.join(common_vars)}, or other provider-specific API keys. "
            f"See https://docs.litellm.ai/docs/providers for full list of supported providers."
        )

    if not any(os.getenv(var) for var in required_vars):
        raise ValueError(
            f"Missing required environment variables for model '{model}'. "
            f"Please set one of: {', '.join(required_vars)}"
        )


def _retry_policy(settings: AgentSettings) -> RetryPolicy:
    if settings.max_retries <= 0:
        return NoRetry()
    return BackoffRetry(
        max_retries=settings.max_retries,
        strategy=settings.backoff,
        base_delay=settings.base_delay,
    )


class LiteLLMReActAgent(ReActAgent):
    """
    A pre-configured ReActAgent.

    This agent combines:
    - LiteLLM for language model access
    - ConversationMemory replayed before every task
    - the ReAct reasoner with settings, retries and deadline taken from ``Config``
    """

    def __init__(
        self,
        *,
        tools: Sequence[Tool] = (),
        config: Optional[Config] = None,
        model: str | None = None,
        memory: Optional[ConversationMemory] = None,
        hooks: Optional[AgentHooks] = None,
    ):
        """
        Args:
            tools: Tools the model may call.
            config: Loaded configuration; defaults apply when omitted.
            model: Overrides ``config.llm.model`` (and the LLM_MODEL fallback).
            memory: Conversation memory to share across agents.
            hooks: Lifecycle callbacks.

        Raises:
            ValueError: If required environment variables for the LLM provider are missing
        """
        config = config or Config()
        model = model or config.llm.model

        _validate_litellm_environment(model)
        llm = LiteLLM(model=model, temperature=config.llm.temperature, max_tokens=config.llm.max_tokens)

        super().__init__(
            llm,
            tools,
            memory=memory,
            config=config.reasoner,
            retry_policy=_retry_policy(config.agent),
            timeout=config.agent.timeout,
            hooks=hooks,
            detect_thinking_language=config.agent.detect_thinking_language,
            cache=config.agent.cache,
        )
