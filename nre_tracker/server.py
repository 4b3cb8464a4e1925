from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from nre_tracker.api import create_app
from nre_tracker.app_config import AppConfigStore
from nre_tracker.config import TrackerConfig
from nre_tracker.logging_setup import setup_logging
from nre_tracker.network import get_lan_ip


logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="nre-tracker-api", description="Run the NRE task tracker API server.")
    parser.add_argument("--host", default=None, help="bind address (default: NRE_API_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="listen port (default: PORT env, then config.json)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    config = TrackerConfig.from_env()
    setup_logging(config.log_level, config.log_dir)

    app_config = AppConfigStore(config.config_path)
    stored = app_config.ensure_file()
    port = args.port or config.port_override or stored.port
    host = args.host or config.api_host

    logger.info("Storage location: %s (%s backend)", config.data_dir, config.backend)
    app = create_app(config, app_config=app_config)

    ip = get_lan_ip()
    logger.info("Server running on port %d", port)
    logger.info("  Local:   http://localhost:%d", port)
    logger.info("  Network: http://%s:%d", ip, port)

    uvicorn.run(app, host=host, port=port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
