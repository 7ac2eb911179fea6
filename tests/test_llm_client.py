from __future__ import annotations

import pytest

from botocore.exceptions import ReadTimeoutError

from emoji_rpg.config.settings import AwsConfig, BedrockConfig
from emoji_rpg.services.llm_client import BedrockLlmClient, LlmInvocationError

AWS = AwsConfig(access_key_id="id", secret_access_key="secret")


class FakeBedrock:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def converse(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def _reply(*texts):
    return {"output": {"message": {"content": [{"text": text} for text in texts]}}}


@pytest.mark.asyncio
async def test_invoke_joins_text_blocks_and_sends_bounded_config():
    bedrock = FakeBedrock(response=_reply('{"a":', "1}"))
    client = BedrockLlmClient(AWS, BedrockConfig(), client=bedrock)

    result = await client.invoke(system_prompt="sys", user_prompt="usr")

    assert result == '{"a":\n1}'
    call = bedrock.calls[0]
    assert call["system"] == [{"text": "sys"}]
    assert call["messages"] == [{"role": "user", "content": [{"text": "usr"}]}]
    assert call["inferenceConfig"] == {"maxTokens": 500, "temperature": 0.8, "topP": 0.9}


@pytest.mark.asyncio
async def test_empty_reply_is_an_error():
    client = BedrockLlmClient(AWS, BedrockConfig(), client=FakeBedrock(response=_reply()))

    with pytest.raises(LlmInvocationError):
        await client.invoke(system_prompt="sys", user_prompt="usr")


@pytest.mark.asyncio
async def test_upstream_exception_is_wrapped():
    client = BedrockLlmClient(AWS, BedrockConfig(), client=FakeBedrock(error=ConnectionError("reset")))

    with pytest.raises(LlmInvocationError, match="reset"):
        await client.invoke(system_prompt="sys", user_prompt="usr")


@pytest.mark.asyncio
async def test_read_timeout_is_wrapped():
    bedrock = FakeBedrock(error=ReadTimeoutError(endpoint_url="https://bedrock-runtime.us-east-1.amazonaws.com"))
    client = BedrockLlmClient(AWS, BedrockConfig(), client=bedrock)

    with pytest.raises(LlmInvocationError, match="Read timeout"):
        await client.invoke(system_prompt="sys", user_prompt="usr")
