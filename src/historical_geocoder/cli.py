# Geocode addresses given on the command line against a local dataset directory
from argparse import ArgumentParser
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from historical_geocoder.geocoder import initialize
from historical_geocoder.settings import GeocoderSettings
from historical_geocoder.utils.errors import BuildError


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog='historical-geocoder', description='Geocode historical addresses')
    parser.add_argument('addresses', nargs='*')
    parser.add_argument('--borough', '-b', type=str, default=None)
    parser.add_argument('--dataset-dir', '-d', type=Path, default=None)
    parser.add_argument('--streets', '-s', type=str, default=None)
    parser.add_argument('--addresses', '-a', dest='addresses_dataset', type=str, default=None)
    parser.add_argument('--verbose', '-v', action='store_true')
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    # Only pass what was given so environment/.env values still apply
    overrides = {
        'dataset_dir': args.dataset_dir,
        'streets_dataset_id': args.streets,
        'addresses_dataset_id': args.addresses_dataset,
        'default_borough': args.borough,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}

    try:
        settings = GeocoderSettings(**overrides)
        geocoder = initialize(settings, progress=args.verbose)
    except (BuildError, ValidationError) as e:
        print('Error initializing historical geocoder:', file=sys.stderr)
        print(e, file=sys.stderr)
        return 1

    for address in args.addresses:
        print(f'Geocoding "{address}":')
        result = geocoder.geocode(address)
        if result.is_success():
            print(json.dumps(result.feature, indent=2, ensure_ascii=False))
        else:
            print(f'  Error: {result.error}', file=sys.stderr)

    return 0


if __name__ == '__main__':
    sys.exit(main())
