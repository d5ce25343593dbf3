"""ExtractorSettings settings model for yt-transcript."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource
from pydantic_settings import YamlConfigSettingsSource

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

# Endpoints tried by the third-party strategy, in order. A "{key}" prefix marks
# endpoints that need third_party_api_key (sent as x-api-key) and are skipped
# without it; "{ms}" marks endpoints reporting offsets in milliseconds.
DEFAULT_THIRD_PARTY_ENDPOINTS = [
    "{key}{ms}https://api.supadata.ai/v1/youtube/transcript?videoId={video_id}&lang={language}",
    "https://www.youtube-transcript-api.com/api/transcript?video_id={video_id}&lang={language}",
    "https://api.streamelements.com/kappa/v2/youtube/transcript/{video_id}",
]


class ExtractorSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="YT_TRANSCRIPT_",
        yaml_file="yt_transcript.yaml",
        yaml_file_encoding="utf-8",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    official_api_key: str | None = None
    third_party_api_key: str | None = None
    speech_to_text_api_key: str | None = None
    default_language: str = "en"
    request_timeout: float = 20.0
    strategy_timeout: float = 45.0
    audio_timeout: float = 300.0
    min_content_length: int = 50
    max_audio_bytes: int = 25 * 1024 * 1024
    backoff_base_delay: float = 1.0
    enrich_metadata: bool = True
    third_party_endpoints: list[str] = DEFAULT_THIRD_PARTY_ENDPOINTS
    speech_to_text_url: str = "https://api.openai.com/v1/audio/transcriptions"
    speech_to_text_model: str = "whisper-1"
    user_agent: str = DEFAULT_USER_AGENT
    verbose: bool = False

    def api_keys(self) -> dict[str, str | None]:
        """Recognized API keys, keyed the way the UI configuration names them."""
        return {
            "officialApiKey": self.official_api_key,
            "thirdPartyApiKey": self.third_party_api_key,
            "speechToTextApiKey": self.speech_to_text_api_key,
        }
