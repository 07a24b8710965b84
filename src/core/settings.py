from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrievalSettings(BaseSettings):
    # Bucket cap per entity kind in query results
    max_per_type: int = Field(10, alias="AEC_MAX_PER_TYPE")
    # Locale-prefixed base for entity hrefs, e.g. "/en"
    base_path: str = Field("/en", alias="AEC_BASE_PATH")
    locale: str = Field("en", alias="AEC_LOCALE")
    # Order entity links by evaluator priority weights when a context is given
    use_priority_weights: bool = Field(True, alias="AEC_USE_PRIORITY_WEIGHTS")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    # Accept tolerant boolean env values and trim whitespace (e.g., "false ", "0 ")
    @field_validator("use_priority_weights", mode="before")
    @classmethod
    def _coerce_bool(cls, v):  # type: ignore[no-untyped-def]
        if isinstance(v, str):
            s = v.strip().lower()
            if s in ("1", "true", "yes", "on"):
                return True
            if s in ("0", "false", "no", "off", ""):
                return False
        return v

    @field_validator("max_per_type")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        return max(0, int(v))


class DiagnosticsSettings(BaseSettings):
    # Severe collapse gates (build-time validation)
    severe_entropy_threshold: float = Field(0.12, alias="AUTHORITY_SEVERE_ENTROPY")
    severe_dimensionality_threshold: float = Field(0.15, alias="AUTHORITY_SEVERE_DIMENSIONALITY")
    # Flattening: mean per-signal variance below this is "everyone looks the same"
    flattening_variance_threshold: float = Field(0.01, alias="AUTHORITY_FLATTENING_VARIANCE")
    low_entropy_cluster_size: int = Field(4, alias="AUTHORITY_LOW_ENTROPY_CLUSTER")
    redundancy_cluster_size: int = Field(4, alias="AUTHORITY_REDUNDANCY_CLUSTER")
    # Minimum primary weight sum per entity
    min_entity_density: float = Field(0.2, alias="AUTHORITY_MIN_DENSITY")
    overconcentration_ratio: float = Field(2.5, alias="AUTHORITY_OVERCONCENTRATION_RATIO")
    starvation_ratio: float = Field(0.25, alias="AUTHORITY_STARVATION_RATIO")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )


class ContentSettings(BaseSettings):
    content_dir: Path = Field(Path("content"), alias="AUTHORITY_CONTENT_DIR")
    messages_dir: Path = Field(Path("messages"), alias="AUTHORITY_MESSAGES_DIR")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )


class AppSettings(BaseModel):
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    diagnostics: DiagnosticsSettings = Field(default_factory=DiagnosticsSettings)
    content: ContentSettings = Field(default_factory=ContentSettings)
