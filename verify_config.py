#!/usr/bin/env python3
"""Verify that config.example.yaml parses and validates against AppConfig."""

import sys
from pathlib import Path

from app.config.loader import validate_config_file


if __name__ == "__main__":
    config_file = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("config.example.yaml")
    sys.exit(0 if validate_config_file(config_file) else 1)
