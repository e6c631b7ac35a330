#!/usr/bin/env python3
"""Sample match harness for end-to-end validation.

Runs the full pipeline (file providers -> normalization -> matching) for every
brand in a profile document and prints a summary per brand, without pytest.

Usage:
    # Run against the bundled sample data
    python scripts/run_sample_match.py

    # Custom data files and threshold
    python scripts/run_sample_match.py --profiles data/brand_profiles.json \
        --catalog data/properties.json --min-score 50
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from app.config.loader import load_config
from app.domain.exceptions import MatchingError
from app.logging.config import configure_logging
from app.main import render_table
from app.pipeline import MatchPipeline
from app.providers import FileBrandProfileProvider, FileCatalogProvider, load_document


def print_header(title: str):
    """Print a formatted section header."""
    width = 80
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width + "\n")


def list_brand_ids(profiles_path: Path):
    """Brand ids present in a profile document, in document order."""
    document = load_document(profiles_path) or []
    if isinstance(document, dict):
        document = document.get("profiles", document)
    if isinstance(document, dict):
        return list(document.keys())
    return [
        str(p.get("id") or p.get("brand_id") or p.get("brandId"))
        for p in document
        if isinstance(p, dict)
    ]


def main():
    """Main entry point for the sample match harness."""
    parser = argparse.ArgumentParser(
        description="Run a sample match for every brand in a profile document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to configuration file")
    parser.add_argument(
        "--profiles",
        type=Path,
        default=Path("data/brand_profiles.json"),
        help="Brand profile document (default: data/brand_profiles.json)",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=Path("data/properties.json"),
        help="Property catalog document (default: data/properties.json)",
    )
    parser.add_argument("--min-score", type=float, default=None, help="Threshold override")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: WARNING)",
    )

    args = parser.parse_args()

    load_dotenv()

    print_header("Brand-Fit-Index - Sample Match Harness")
    print(f"Profiles: {args.profiles}")
    print(f"Catalog: {args.catalog}")

    for path in (args.profiles, args.catalog):
        if not path.exists():
            print(f"\n❌ Error: data file not found: {path}")
            return 1

    app_config, env_config = load_config(args.config)
    configure_logging(
        level=args.log_level,
        format_type=app_config.logging.format,
        environment="validation",
    )

    pipeline = MatchPipeline(
        app_config=app_config,
        profile_provider=FileBrandProfileProvider(args.profiles),
        catalog_provider=FileCatalogProvider(args.catalog),
        max_workers=env_config.max_workers,
    )

    failures = 0
    for brand_id in list_brand_ids(args.profiles):
        print_header(f"Brand: {brand_id}")
        try:
            result = pipeline.run(brand_id, min_score_threshold=args.min_score)
        except MatchingError as e:
            failures += 1
            print(f"❌ {type(e).__name__}: {e}")
            continue
        print(render_table(result))

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
