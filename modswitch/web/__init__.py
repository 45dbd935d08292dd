"""JSON API for modswitch."""

import argparse
import os
from pathlib import Path

from ..config import Settings
from ..logging_config import configure_logging


def create_and_run(settings: Settings, instance_dir: Path, port: int = 5000):
    """Create and run the Flask app."""
    from .app import create_app

    app = create_app(settings=settings, instance_dir=instance_dir)
    app.run(host="127.0.0.1", port=port, debug=False)


def main():
    """Standalone entry point for modswitch-web."""
    parser = argparse.ArgumentParser(description="modswitch web API")
    parser.add_argument("instance_dir", type=Path, help="Instance directory")
    parser.add_argument("--port", type=int, default=5000, help="Port (default 5000)")
    parser.add_argument("--api-key", default=os.environ.get("CURSEFORGE_API_KEY"), help="Catalog API key")
    args = parser.parse_args()

    settings = Settings.from_env(api_key=args.api_key)
    configure_logging(settings.log_level)
    create_and_run(settings, args.instance_dir, port=args.port)
