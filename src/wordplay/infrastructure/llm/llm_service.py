"""
LLM Service for centralized model calls.

Implements LLMProviderProtocol over litellm with model alias resolution,
per-provider routing, model-family parameter mapping, retry logic and token
logging. Every failure surfaces as ModelCallError so callers can fall back.
"""

import asyncio
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import litellm
import structlog
import yaml

from wordplay.core.domain.errors import ModelCallError
from wordplay.core.interfaces.llm import ProviderConfig

TRADITIONAL_PARAMS = ("temperature", "top_p", "max_tokens", "frequency_penalty", "presence_penalty")


@dataclass
class RetryPolicy:
    """Retry policy configuration."""

    max_attempts: int = 3
    backoff_multiplier: float = 2.0
    timeout: int = 30
    retry_on_errors: List[str] = field(default_factory=list)


class LLMService:
    """
    Centralized service for model completions.

    Model selection order: explicit ProviderConfig.model (resolved through the
    alias table), then the configured default alias. A provider named in the
    ProviderConfig other than the litellm default is used as the model prefix
    (e.g. "ollama/llama3").
    """

    def __init__(self, config_path: str = "configs/llm_config.yaml"):
        """
        Initialize LLMService with configuration.

        Args:
            config_path: Path to YAML configuration file

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        self.logger = structlog.get_logger().bind(component="llm_service")
        self._load_config(config_path)
        self._check_api_keys()

        self.logger.info(
            "llm_service_initialized",
            default_model=self.default_model,
            model_aliases=list(self.models.keys()),
        )

    def _load_config(self, config_path: str) -> None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"LLM config not found: {config_path}")

        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        if config is None:
            raise ValueError(f"Config file is empty or invalid: {config_path}")

        self.default_model = config.get("default_model", "main")
        self.models = config.get("models", {})
        self.model_params = config.get("model_params", {})
        self.default_params = config.get("default_params", {})

        if not self.models:
            raise ValueError("Config must define at least one model in 'models' section")

        retry_config = config.get("retry_policy", {})
        self.retry_policy = RetryPolicy(
            max_attempts=retry_config.get("max_attempts", 3),
            backoff_multiplier=retry_config.get("backoff_multiplier", 2.0),
            timeout=retry_config.get("timeout", 30),
            retry_on_errors=retry_config.get("retry_on_errors", []),
        )

        self.logging_config = config.get("logging", {})
        self.provider_config = config.get("providers", {})
        self.default_provider = config.get("default_provider", "openai")

    def _check_api_keys(self) -> None:
        """Warn about providers whose API key variable is unset."""
        for provider, settings in self.provider_config.items():
            api_key_env = (settings or {}).get("api_key_env")
            if api_key_env and not os.getenv(api_key_env):
                self.logger.warning(
                    "api_key_missing",
                    provider=provider,
                    env_var=api_key_env,
                    hint="Set environment variable for API access",
                )

    def _resolve_model(self, provider_config: Optional[ProviderConfig]) -> str:
        """
        Resolve the litellm model string for a call.

        Args:
            provider_config: Per-call selection, or None for the defaults

        Returns:
            Model name understood by litellm
        """
        alias = provider_config.model if provider_config and provider_config.model else None
        model = self.models.get(alias or self.default_model, alias or self.default_model)

        provider = provider_config.provider if provider_config else None
        if provider and provider != self.default_provider and "/" not in model:
            model = f"{provider}/{model}"

        self.logger.debug("model_resolved", model_alias=alias, resolved_model=model, provider=provider)
        return model

    def _get_model_parameters(self, model: str) -> Dict[str, Any]:
        if model in self.model_params:
            return self.model_params[model].copy()

        # Model family match, e.g. "gpt-4" matches "gpt-4-turbo"
        for model_key, params in self.model_params.items():
            if model.startswith(model_key):
                return params.copy()

        return self.default_params.copy()

    def _map_parameters_for_model(self, model: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Map parameters by model family.

        Reasoning models (gpt-5, o-series) take effort instead of temperature;
        everything else takes the traditional sampling parameters.
        """
        name = model.lower().split("/")[-1]
        if "gpt-5" in name or name.startswith(("o1", "o3", "o4")):
            mapped: Dict[str, Any] = {}
            if "max_tokens" in params:
                mapped["max_tokens"] = params["max_tokens"]
            if "temperature" in params and "effort" not in params:
                temp = params["temperature"]
                if temp < 0.3:
                    mapped["effort"] = "low"
                elif temp <= 0.7:
                    mapped["effort"] = "medium"
                else:
                    mapped["effort"] = "high"
                if self.logging_config.get("log_parameter_mapping", True):
                    self.logger.info(
                        "parameter_mapped_reasoning_model",
                        model=model,
                        temperature=temp,
                        mapped_effort=mapped["effort"],
                    )
            if "effort" in params:
                mapped["effort"] = params["effort"]
            return mapped

        return {k: v for k, v in params.items() if k in TRADITIONAL_PARAMS}

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        provider_config: Optional[ProviderConfig] = None,
    ) -> str:
        """
        Perform one completion with retry logic.

        Args:
            system_prompt: System message
            user_prompt: User message
            provider_config: Optional provider/model/temperature/json_mode

        Returns:
            Reply text

        Raises:
            ModelCallError: When every attempt failed or the reply was empty
        """
        actual_model = self._resolve_model(provider_config)
        params = self._get_model_parameters(actual_model)
        if provider_config and provider_config.temperature is not None:
            params["temperature"] = provider_config.temperature
        final_params = self._map_parameters_for_model(actual_model, params)
        if provider_config and provider_config.json_mode:
            final_params["response_format"] = {"type": "json_object"}

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        for attempt in range(self.retry_policy.max_attempts):
            try:
                start_time = time.time()
                self.logger.info(
                    "llm_completion_started",
                    model=actual_model,
                    attempt=attempt + 1,
                )

                response = await litellm.acompletion(
                    model=actual_model,
                    messages=messages,
                    timeout=self.retry_policy.timeout,
                    **final_params,
                )

                content = response.choices[0].message.content
                if not content:
                    raise ModelCallError("Model returned an empty reply", "EmptyReply", actual_model)

                usage = getattr(response, "usage", {})
                if isinstance(usage, dict):
                    token_stats = usage
                else:
                    token_stats = {
                        "total_tokens": getattr(usage, "total_tokens", 0),
                        "prompt_tokens": getattr(usage, "prompt_tokens", 0),
                        "completion_tokens": getattr(usage, "completion_tokens", 0),
                    }

                latency_ms = int((time.time() - start_time) * 1000)
                if self.logging_config.get("log_token_usage", True):
                    self.logger.info(
                        "llm_completion_success",
                        model=actual_model,
                        tokens=token_stats.get("total_tokens", 0),
                        latency_ms=latency_ms,
                    )
                return content

            except Exception as e:
                error_type = (
                    e.error_type if isinstance(e, ModelCallError) else None
                ) or type(e).__name__
                error_msg = str(e)

                # Retry only on configured error types (matched on type or message)
                should_retry = attempt < self.retry_policy.max_attempts - 1 and any(
                    err_type in error_type or err_type in error_msg
                    for err_type in self.retry_policy.retry_on_errors
                )

                if should_retry:
                    backoff_time = self.retry_policy.backoff_multiplier**attempt
                    self.logger.warning(
                        "llm_completion_retry",
                        model=actual_model,
                        error_type=error_type,
                        attempt=attempt + 1,
                        backoff_seconds=backoff_time,
                    )
                    await asyncio.sleep(backoff_time)
                else:
                    self.logger.error(
                        "llm_completion_failed",
                        model=actual_model,
                        error_type=error_type,
                        error=error_msg[:200],
                        attempts=attempt + 1,
                    )
                    raise ModelCallError(error_msg, error_type, actual_model) from e

        raise ModelCallError("Max retries exceeded", "RetryExhausted", actual_model)
