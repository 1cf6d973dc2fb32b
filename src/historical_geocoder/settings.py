from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def objects_path(dataset_dir: Path | str, dataset_id: str) -> Path:
    """Location of a dataset's NDJSON objects file."""
    return Path(dataset_dir) / dataset_id / f"{dataset_id}.objects.ndjson"


class GeocoderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HISTORICAL_GEOCODER_",
        env_file=".env",
        extra="ignore",
    )

    dataset_dir:            Optional[Path] = None
    streets_dataset_id:     str = "nyc-streets"
    addresses_dataset_id:   str = "addresses"
    default_borough:        Optional[str] = "Manhattan"

    @field_validator("streets_dataset_id", "addresses_dataset_id")
    @classmethod
    def _require_dataset_id(cls, v: str, info):
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} not set in configuration")
        return v.strip()

    @field_validator("default_borough")
    @classmethod
    def _blank_borough_is_unset(cls, v):
        if v is None or not str(v).strip():
            return None
        return str(v).strip()

    @property
    def streets_path(self) -> Optional[Path]:
        if self.dataset_dir is None:
            return None
        return objects_path(self.dataset_dir, self.streets_dataset_id)

    @property
    def addresses_path(self) -> Optional[Path]:
        if self.dataset_dir is None:
            return None
        return objects_path(self.dataset_dir, self.addresses_dataset_id)
