from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from darkvision.services.ranking import ThresholdConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Document + attachment storage
    data_dir: Path = Path("./data")
    max_upload_size_mb: int = 500

    # Admin endpoints (reset, delete, upload) are open when no username is set
    admin_username: str | None = None
    admin_password: str | None = None

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Summary: faces must be seen often AND convincingly
    face_minimum_occurrence: int = 3
    face_minimum_score: float = 0.85
    face_minimum_score_occurrence: int = 2
    face_maximum_count: int | None = None

    # Summary: keywords
    keyword_minimum_occurrence: int = 5
    keyword_minimum_score: float = 0.70
    keyword_minimum_score_occurrence: int = 1
    keyword_maximum_count: int | None = 5

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def auth_enabled(self) -> bool:
        return bool(self.admin_username)

    def face_thresholds(self) -> ThresholdConfig:
        return ThresholdConfig(
            minimum_occurrence=self.face_minimum_occurrence,
            minimum_score=self.face_minimum_score,
            minimum_score_occurrence=self.face_minimum_score_occurrence,
            maximum_occurrence_count=self.face_maximum_count,
        )

    def keyword_thresholds(self) -> ThresholdConfig:
        return ThresholdConfig(
            minimum_occurrence=self.keyword_minimum_occurrence,
            minimum_score=self.keyword_minimum_score,
            minimum_score_occurrence=self.keyword_minimum_score_occurrence,
            maximum_occurrence_count=self.keyword_maximum_count,
        )


settings = Settings()
