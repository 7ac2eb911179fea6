"""Thin Bedrock client wrapper for scene-generation invocations."""

from __future__ import annotations

import logging
from typing import Any

from fastapi.concurrency import run_in_threadpool

from emoji_rpg.config.settings import AwsConfig, BedrockConfig
from emoji_rpg.services.aws import create_boto3_client

logger = logging.getLogger(__name__)


class LlmInvocationError(RuntimeError):
    """Raised when the Bedrock invocation fails or times out."""


class BedrockLlmClient:
    """Invoke Amazon Bedrock models with a fixed inference configuration."""

    def __init__(
        self,
        aws: AwsConfig,
        bedrock: BedrockConfig,
        *,
        client: Any | None = None,
    ) -> None:
        self._config = bedrock
        self._client = client or create_boto3_client(
            "bedrock-runtime",
            aws,
            timeout_seconds=bedrock.timeout_seconds,
        )

    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Run a Bedrock `converse` call and return the aggregate text output."""

        inference_cfg = {
            "maxTokens": self._config.max_tokens,
            "temperature": self._config.temperature,
            "topP": self._config.top_p,
        }

        def _call() -> str:
            response = self._client.converse(
                modelId=self._config.model_id,
                system=[{"text": system_prompt}],
                messages=[{"role": "user", "content": [{"text": user_prompt}]}],
                inferenceConfig=inference_cfg,
            )
            content_blocks = (
                response.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            texts = [block.get("text", "") for block in content_blocks if block.get("text")]
            return "\n".join(texts).strip()

        # Hung calls are bounded by the botocore connect/read timeouts.
        try:
            result = await run_in_threadpool(_call)
        except Exception as exc:
            logger.warning("Bedrock converse failed model=%s: %s", self._config.model_id, exc)
            raise LlmInvocationError(str(exc)) from exc

        if not result:
            raise LlmInvocationError("Bedrock returned an empty response.")
        return result


__all__ = ["BedrockLlmClient", "LlmInvocationError"]
