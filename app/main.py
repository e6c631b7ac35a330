"""Main entry point for the Brand-Fit-Index matching CLI."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from app.config.environment import EnvironmentConfig
from app.config.exceptions import ConfigurationError
from app.config.loader import load_config
from app.config.models import AppConfig
from app.domain.exceptions import (
    BrandProfileNotFoundError,
    MatchingError,
    ProviderError,
    ValidationError,
)
from app.logging import get_logger
from app.logging.config import configure_logging
from app.pipeline import MatchPipeline, MatchRunResult
from app.providers import FileBrandProfileProvider, FileCatalogProvider

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID_REQUIREMENT = 2
EXIT_PROFILE_NOT_FOUND = 3


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and prepare runtime configuration.

    Args:
        config_path: Path to configuration file (None to search the defaults)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with the effective log level resolved

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Apply log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        # Environment variable already set
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def render_table(result: MatchRunResult) -> str:
    """Render a run as a plain-text table followed by each result's reasons."""
    lines: List[str] = [
        f"Brand {result.brand_id}: {result.matched} match(es) "
        f"at threshold {result.min_score_threshold:g}",
        f"Candidates: {result.total_candidates}, normalized: {result.normalized}, "
        f"invalid: {len(result.skipped_invalid)}, unavailable: {result.skipped_unavailable}, "
        f"below threshold: {result.below_threshold}",
    ]
    if not result.results:
        lines.append("No qualifying properties.")
        return "\n".join(lines)

    header = f"{'#':>3}  {'property':<20} {'BFI':>4} {'loc':>4} {'bud':>4} {'size':>4} {'cat':>4}"
    lines.extend(["", header, "-" * len(header)])
    for rank, match in enumerate(result.results, start=1):
        b = match.breakdown
        lines.append(
            f"{rank:>3}  {match.property_id:<20} {match.overall_score:>4} "
            f"{b.location:>4.0f} {b.budget:>4.0f} {b.size:>4.0f} {b.category:>4.0f}"
        )
        for reason in match.reasons:
            lines.append(f"       - {reason}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Brand-Fit-Index - rank property listings against a brand's requirements"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument("--brand-id", required=True, help="Brand to match properties for")
    parser.add_argument(
        "--profiles", type=Path, default=None, help="Brand profile document (JSON or YAML)"
    )
    parser.add_argument(
        "--catalog", type=Path, default=None, help="Property catalog document (JSON or YAML)"
    )
    parser.add_argument(
        "--min-score",
        type=float,
        default=None,
        help="Minimum Brand Fit Index to report, 0-100 (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        default="table",
        choices=["json", "table"],
        help="Output format (default: table)",
    )
    return parser


def _resolve_path(cli_value: Optional[Path], configured: Optional[str], name: str) -> Path:
    if cli_value is not None:
        return cli_value
    if configured:
        return Path(configured)
    raise ConfigurationError(
        f"No {name} source configured",
        suggestions=[
            f"Pass --{name} on the command line",
            f"Or set data.{name}_path in config.yaml",
        ],
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Brand-Fit-Index CLI.

    Exit codes: 0 success (including no matches), 1 configuration, provider
    or unexpected error, 2 malformed requirement or threshold, 3 unknown brand.

    Returns:
        Exit code
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        # Step 1: Load configuration early (before logging for format detection)
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        # Step 2: Configure logging
        log_format = app_config.logging.format if app_config.logging else "key-value"
        configure_logging(
            level=env_config.log_level,
            format_type=log_format,
            environment=env_config.environment,
        )

        logger.info(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "log_format": log_format,
            },
        )

        # Step 3: Build providers and pipeline
        profiles_path = _resolve_path(args.profiles, app_config.data.profiles_path, "profiles")
        catalog_path = _resolve_path(args.catalog, app_config.data.catalog_path, "catalog")

        pipeline = MatchPipeline(
            app_config=app_config,
            profile_provider=FileBrandProfileProvider(profiles_path),
            catalog_provider=FileCatalogProvider(catalog_path),
            max_workers=env_config.max_workers,
        )

        # Step 4: Run and print
        result = pipeline.run(args.brand_id, min_score_threshold=args.min_score)

        if args.output_format == "json":
            print(json.dumps(result.to_dict(), indent=2))
        else:
            print(render_table(result))

        logger.info(
            "Brand-Fit-Index run finished",
            extra={
                "event": "cli.completed",
                "elapsed_seconds": round(time.time() - start_time, 3),
                "matched": result.matched,
            },
        )
        return EXIT_OK

    except ConfigurationError as e:
        # Configuration errors are already formatted nicely
        print(f"Configuration Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except BrandProfileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_PROFILE_NOT_FOUND
    except ValidationError as e:
        print(f"Invalid requirement: {e}", file=sys.stderr)
        return EXIT_INVALID_REQUIREMENT
    except ProviderError as e:
        print(f"Data error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except MatchingError as e:
        print(f"Matching error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except Exception as e:
        # Unexpected fatal error
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during run",
            extra={
                "event": "cli.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
