import asyncio
import os
import sys

# Add project root to path so we can import emoji_rpg
sys.path.append(os.getcwd())

from emoji_rpg.config.settings import settings
from emoji_rpg.pipelines.voice import SceneGenerator, GenerationFailure
from emoji_rpg.services import BedrockLlmClient, TranscribeService, TranscriptionFailure


async def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/transcribe_file.py path/to/audio.webm [game_state]")
        return

    file_path = sys.argv[1]
    game_state = sys.argv[2] if len(sys.argv) > 2 else "home_full_health"

    if not os.path.exists(file_path):
        print(f"File '{file_path}' not found.")
        return

    with open(file_path, "rb") as f:
        audio_bytes = f.read()

    service = TranscribeService(settings.aws, settings.transcribe)
    audio_format = os.path.splitext(file_path)[1].lstrip(".") or None

    print(f"Transcribing {len(audio_bytes)} bytes using Amazon Transcribe Streaming...")
    try:
        transcript = await service.transcribe(audio_bytes, audio_format)
    except TranscriptionFailure as e:
        print(f"\nTranscription Error: {e}")
        return

    print("\n--- Transcript Result ---")
    print(transcript)
    print("-------------------------")

    generator = SceneGenerator(BedrockLlmClient(settings.aws, settings.bedrock))
    try:
        scene = await generator.generate(transcript, game_state)
    except GenerationFailure as e:
        print(f"\nScene Error: {e}")
        return

    print(f"\n{scene.emoji_scene}\n{scene.description}")
    for option in scene.options:
        print(f"  - {option}")
    print(f"next state: {scene.new_state_label}")


if __name__ == "__main__":
    asyncio.run(main())
