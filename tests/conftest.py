from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


from historical_geocoder.index import build_address_table, build_street_index
from historical_geocoder.geocoder import Geocoder


EMPIRE_STATE = {"type": "Point", "coordinates": [-73.9857, 40.7484]}


def street(id, name, borough="Manhattan", since="1850", until="1950"):
    return {
        "id": id,
        "name": name,
        "validSince": since,
        "validUntil": until,
        "data": {"borough": borough},
    }


def address(id, name, borough="Manhattan", geometry=None):
    return {
        "id": id,
        "name": name,
        "validSince": "1900",
        "validUntil": "1920",
        "geometry": geometry or {"type": "Point", "coordinates": [-74.0, 40.7]},
        "data": {"borough": borough},
    }


def write_ndjson(path: Path, rows) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf8") as fh:
        for row in rows:
            fh.write(json.dumps(row) + "\n")
    return path


@pytest.fixture
def street_rows():
    return [
        street("s1", "5th Avenue"),
        street("s2", "Bleecker Street"),
        street("s3", "Broadway"),
        street("s4", "Madison Avenue"),
        street("s5", "Atlantic Avenue", borough="Brooklyn"),
    ]


@pytest.fixture
def address_rows():
    return [
        address("a1", "350 5 AVE", geometry=EMPIRE_STATE),
        address("a2", "100 BLEECKER ST"),
        address("a3", "1 BROADWAY"),
        address("nypl/a4", "20 MADISON AVE"),
        address("a5", "10 ATLANTIC AVE", borough="Brooklyn"),
    ]


@pytest.fixture
def street_index(street_rows):
    return build_street_index(street_rows)


@pytest.fixture
def address_table(address_rows):
    return build_address_table(address_rows)


@pytest.fixture
def geocoder(street_index, address_table):
    return Geocoder(street_index, address_table, default_borough="Manhattan")


@pytest.fixture
def dataset_dir(tmp_path, street_rows, address_rows):
    write_ndjson(tmp_path / "nyc-streets" / "nyc-streets.objects.ndjson", street_rows)
    write_ndjson(tmp_path / "addresses" / "addresses.objects.ndjson", address_rows)
    return tmp_path
