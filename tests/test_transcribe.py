"""Transcriber: scoped temp file handling, failure mapping, timeouts."""

from __future__ import annotations

import asyncio
import os
import subprocess
from pathlib import Path

import pytest
from amazon_transcribe.auth import StaticCredentialResolver

import emoji_rpg.services.transcribe as transcribe_module
from emoji_rpg.config.settings import AwsConfig, TranscribeConfig
from emoji_rpg.services.transcribe import (
    TranscribeService,
    TranscriptionFailure,
    audio_suffix,
    scoped_audio_file,
)


def _service(**config) -> TranscribeService:
    aws = AwsConfig(access_key_id="id", secret_access_key="secret")
    return TranscribeService(aws, TranscribeConfig(**config), client=object())


def test_scoped_audio_file_is_removed_after_use():
    with scoped_audio_file(b"abc", ".webm") as path:
        assert path.read_bytes() == b"abc"
        assert path.suffix == ".webm"
    assert not path.exists()
    assert not path.parent.exists()


def test_scoped_audio_file_is_removed_on_error():
    with pytest.raises(RuntimeError):
        with scoped_audio_file(b"abc", ".mp3") as path:
            raise RuntimeError("boom")
    assert not path.exists()


@pytest.mark.parametrize(
    "hint, suffix",
    [(None, ".webm"), ("wav", ".wav"), ("audio/mp3", ".mp3"), ("audio/webm;codecs=opus", ".webm"), ("M4A", ".m4a"), ("flac?", ".webm")],
)
def test_audio_suffix(hint, suffix):
    assert audio_suffix(hint) == suffix


def test_ffmpeg_input_exists_only_during_conversion(monkeypatch):
    seen: list[Path] = []

    def fake_run(cmd, **kwargs):
        path = Path(cmd[cmd.index("-i") + 1])
        assert path.read_bytes() == b"audio"
        seen.append(path)
        return subprocess.CompletedProcess(cmd, 0, stdout=b"\x00\x01", stderr=b"")

    monkeypatch.setattr(subprocess, "run", fake_run)

    pcm = _service()._convert_to_pcm_sync(b"audio", ".wav")

    assert pcm == b"\x00\x01"
    assert seen and seen[0].suffix == ".wav"
    assert not seen[0].exists()


def test_ffmpeg_failure_cleans_up_and_raises(monkeypatch):
    seen: list[Path] = []

    def fake_run(cmd, **kwargs):
        seen.append(Path(cmd[cmd.index("-i") + 1]))
        raise subprocess.CalledProcessError(1, cmd, output=b"", stderr=b"Invalid data found")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(TranscriptionFailure, match="Invalid data found"):
        _service()._convert_to_pcm_sync(b"audio", ".webm")
    assert not seen[0].exists()


@pytest.mark.asyncio
async def test_empty_audio_is_a_failure():
    with pytest.raises(TranscriptionFailure):
        await _service().transcribe(b"", "webm")


@pytest.mark.asyncio
async def test_blank_transcript_is_a_failure(monkeypatch):
    service = _service()

    async def fake_transcribe(audio_bytes, audio_format):
        return "   "

    monkeypatch.setattr(service, "_transcribe", fake_transcribe)

    with pytest.raises(TranscriptionFailure):
        await service.transcribe(b"audio", "webm")


@pytest.mark.asyncio
async def test_transcript_is_trimmed(monkeypatch):
    service = _service()

    async def fake_transcribe(audio_bytes, audio_format):
        return " go to the forest  "

    monkeypatch.setattr(service, "_transcribe", fake_transcribe)

    assert await service.transcribe(b"audio", "webm") == "go to the forest"


@pytest.mark.asyncio
async def test_slow_upstream_times_out(monkeypatch):
    service = _service(timeout_seconds=0.01)

    async def slow_transcribe(audio_bytes, audio_format):
        await asyncio.sleep(1)
        return "too late"

    monkeypatch.setattr(service, "_transcribe", slow_transcribe)

    with pytest.raises(TranscriptionFailure, match="did not finish"):
        await service.transcribe(b"audio", "webm")


@pytest.mark.asyncio
async def test_streaming_error_is_a_failure(monkeypatch):
    class BrokenClient:
        async def start_stream_transcription(self, **kwargs):
            raise ConnectionError("no route to host")

    aws = AwsConfig(access_key_id="id", secret_access_key="secret")
    service = TranscribeService(aws, TranscribeConfig(), client=BrokenClient())
    monkeypatch.setattr(service, "_convert_to_pcm_sync", lambda audio_bytes, suffix: b"\x00" * 32)

    with pytest.raises(TranscriptionFailure, match="no route to host"):
        await service.transcribe(b"audio", "webm")


class _EndlessOutput:
    """Transcript stream that never yields and never ends."""

    def __aiter__(self):
        return self

    async def __anext__(self):
        await asyncio.Event().wait()


class _InputStream:
    def __init__(self, send_error: Exception | None = None, hang: bool = False):
        self._send_error = send_error
        self._hang = hang

    async def send_audio_event(self, audio_chunk):
        if self._hang:
            await asyncio.Event().wait()
        if self._send_error is not None:
            raise self._send_error

    async def end_stream(self):
        return None


class _StreamingClient:
    def __init__(self, input_stream: _InputStream):
        self._input_stream = input_stream

    async def start_stream_transcription(self, **kwargs):
        class _Stream:
            input_stream = self._input_stream
            output_stream = _EndlessOutput()

        return _Stream()


def _streaming_tasks() -> list[asyncio.Task]:
    names = {"write_chunks", "handle_events"}
    return [
        task
        for task in asyncio.all_tasks()
        if not task.done() and task.get_coro().__name__ in names
    ]


def _streaming_service(input_stream: _InputStream, monkeypatch, **config) -> TranscribeService:
    aws = AwsConfig(access_key_id="id", secret_access_key="secret")
    service = TranscribeService(aws, TranscribeConfig(**config), client=_StreamingClient(input_stream))
    monkeypatch.setattr(service, "_convert_to_pcm_sync", lambda audio_bytes, suffix: b"\x00" * 32)
    return service


@pytest.mark.asyncio
async def test_send_failure_cancels_the_result_reader(monkeypatch):
    service = _streaming_service(_InputStream(send_error=ConnectionError("connection reset")), monkeypatch)

    with pytest.raises(TranscriptionFailure, match="connection reset"):
        await service.transcribe(b"audio", "webm")

    await asyncio.sleep(0)
    assert _streaming_tasks() == []


@pytest.mark.asyncio
async def test_timeout_cancels_both_stream_directions(monkeypatch):
    service = _streaming_service(_InputStream(hang=True), monkeypatch, timeout_seconds=0.05)

    with pytest.raises(TranscriptionFailure, match="did not finish"):
        await service.transcribe(b"audio", "webm")

    await asyncio.sleep(0)
    assert _streaming_tasks() == []


def test_default_client_gets_static_credentials(monkeypatch):
    captured: dict = {}

    class RecordingClient:
        def __init__(self, **kwargs):
            captured.update(kwargs)

    monkeypatch.delenv("AWS_ACCESS_KEY_ID", raising=False)
    monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)
    monkeypatch.setattr(transcribe_module, "TranscribeStreamingClient", RecordingClient)

    aws = AwsConfig(access_key_id="key-id", secret_access_key="key-secret", region="eu-west-1")
    TranscribeService(aws, TranscribeConfig())

    resolver = captured["credential_resolver"]
    assert captured["region"] == "eu-west-1"
    assert isinstance(resolver, StaticCredentialResolver)
    assert (resolver.access_key_id, resolver.secret_access_key) == ("key-id", "key-secret")
    assert "AWS_ACCESS_KEY_ID" not in os.environ
    assert "AWS_SECRET_ACCESS_KEY" not in os.environ
