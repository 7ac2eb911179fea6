from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AwsConfig(BaseSettings):
    """AWS credentials shared by Transcribe, Bedrock and Polly.

    Both keys are required; the process refuses to start without them.
    """

    access_key_id: SecretStr
    secret_access_key: SecretStr
    region: str = "us-east-1"

    model_config = SettingsConfigDict(
        env_prefix="AWS_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class TranscribeConfig(BaseSettings):
    """Amazon Transcribe Streaming configuration."""

    language_code: str = "en-US"
    sample_rate_hz: int = Field(default=16000, ge=8000, le=48000)
    timeout_seconds: float = Field(default=20.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="TRANSCRIBE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class PollyConfig(BaseSettings):
    """Amazon Polly configuration."""

    voice_id: str = "Joanna"
    engine: str = "neural"
    timeout_seconds: float = Field(default=10.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="POLLY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class BedrockConfig(BaseSettings):
    """Amazon Bedrock configuration."""

    model_id: str = Field(
        default="amazon.nova-micro-v1:0",
        validation_alias="BEDROCK_MODEL_ID",
    )
    max_tokens: int = Field(
        default=500,
        validation_alias="BEDROCK_MAX_TOKENS",
        ge=1,
        le=4096,
    )
    temperature: float = Field(
        default=0.8,
        validation_alias="BEDROCK_TEMPERATURE",
        ge=0.0,
        le=1.0,
    )
    top_p: float = Field(
        default=0.9,
        validation_alias="BEDROCK_TOP_P",
        ge=0.0,
        le=1.0,
    )
    timeout_seconds: float = Field(
        default=15.0,
        validation_alias="BEDROCK_TIMEOUT_SECONDS",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class GameConfig(BaseSettings):
    """Gameplay knobs for the voice-action endpoint."""

    max_audio_bytes: int = Field(default=10 * 1024 * 1024, ge=1)
    new_game_label: str = "new_game"

    model_config = SettingsConfigDict(
        env_prefix="GAME_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Emoji RPG Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/voice_pipeline.log"
    transcript_log_file: str = "logs/transcripts.log"

    # AWS credentials (required)
    aws: AwsConfig = Field(default_factory=AwsConfig)

    # Transcribe
    transcribe: TranscribeConfig = Field(default_factory=TranscribeConfig)

    # Polly
    polly: PollyConfig = Field(default_factory=PollyConfig)

    # Bedrock
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)

    # Game
    game: GameConfig = Field(default_factory=GameConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
