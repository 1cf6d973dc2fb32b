from pathlib import Path

import pytest
from pydantic import ValidationError

from historical_geocoder.settings import GeocoderSettings, objects_path


def test_defaults():
    settings = GeocoderSettings(dataset_dir=None)
    assert settings.streets_dataset_id == "nyc-streets"
    assert settings.addresses_dataset_id == "addresses"
    assert settings.default_borough == "Manhattan"
    assert settings.streets_path is None


def test_objects_path():
    assert objects_path("data", "addresses") == Path("data/addresses/addresses.objects.ndjson")


def test_derived_paths(tmp_path):
    settings = GeocoderSettings(dataset_dir=tmp_path, streets_dataset_id="streets-1850")
    assert settings.streets_path == tmp_path / "streets-1850" / "streets-1850.objects.ndjson"
    assert settings.addresses_path == tmp_path / "addresses" / "addresses.objects.ndjson"


@pytest.mark.parametrize("field", ["streets_dataset_id", "addresses_dataset_id"])
def test_dataset_ids_must_be_set(field):
    with pytest.raises(ValidationError):
        GeocoderSettings(**{field: "  "})


def test_blank_default_borough_is_unset():
    assert GeocoderSettings(default_borough="").default_borough is None


def test_environment_variables(monkeypatch, tmp_path):
    monkeypatch.setenv("HISTORICAL_GEOCODER_DATASET_DIR", str(tmp_path))
    monkeypatch.setenv("HISTORICAL_GEOCODER_DEFAULT_BOROUGH", "Queens")

    settings = GeocoderSettings()

    assert settings.dataset_dir == tmp_path
    assert settings.default_borough == "Queens"
