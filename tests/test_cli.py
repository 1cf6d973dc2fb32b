import json
import logging

from historical_geocoder.cli import main


def test_cli_prints_features_and_errors(dataset_dir, capsys):
    code = main(["-d", str(dataset_dir), "-b", "Manhattan", "350 5th Ave.", "Broadway"])

    captured = capsys.readouterr()
    assert code == 0
    assert 'Geocoding "350 5th Ave.":' in captured.out
    assert 'Geocoding "Broadway":' in captured.out

    feature_text = captured.out.split('Geocoding "350 5th Ave.":\n', 1)[1].split('Geocoding "Broadway"')[0]
    feature = json.loads(feature_text)
    assert feature["properties"]["address"]["id"] == "addresses/a1"
    assert "  Error: Address does not start with a number: Broadway" in captured.err


def test_cli_reports_initialization_failure(tmp_path, capsys):
    code = main(["-d", str(tmp_path / "missing"), "350 5th Ave."])

    captured = capsys.readouterr()
    assert code == 1
    assert "Error initializing historical geocoder:" in captured.err
    assert "File does not exist" in captured.err


def test_cli_reports_undecodable_dataset(dataset_dir, capsys):
    with open(dataset_dir / "addresses" / "addresses.objects.ndjson", "ab") as fh:
        fh.write(b"\xff\xfe\n")

    code = main(["-d", str(dataset_dir), "1 Broadway"])

    captured = capsys.readouterr()
    assert code == 1
    assert "Error initializing historical geocoder:" in captured.err


def test_cli_logs_build_counts_by_default(dataset_dir, monkeypatch, caplog, capsys):
    configured = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: configured.update(kwargs))
    caplog.set_level(logging.INFO)

    assert main(["-d", str(dataset_dir), "1 Broadway"]) == 0

    assert configured["level"] == logging.INFO
    assert "Indexed 5 streets" in caplog.text
    assert "Indexed 5 addresses" in caplog.text
