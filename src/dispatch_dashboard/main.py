"""Command-line entry point: run the dashboard headless and export snapshots."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .config import settings
from .persistence.filesystem import FileStorage
from .services.api.client import BackendClient
from .services.orchestrator import Orchestrator
from .services.presentation.image import ImagePresenter

logger = logging.getLogger(__name__)


def create_orchestrator(base_url: str | None = None, presenter: ImagePresenter | None = None) -> Orchestrator:
    client = BackendClient(base_url=base_url)
    return Orchestrator(client, presenter or ImagePresenter())


async def run_dashboard(
    duration_seconds: float,
    restaurant_id: str | None = None,
    base_url: str | None = None,
    output_root: Path | None = None,
) -> Path:
    presenter = ImagePresenter()
    orchestrator = create_orchestrator(base_url, presenter)
    try:
        await orchestrator.bootstrap()
        if restaurant_id:
            orchestrator.select_restaurant(restaurant_id)
            orchestrator.select_live_restaurant(restaurant_id)
        orchestrator.start()
        await asyncio.sleep(duration_seconds)
    finally:
        await orchestrator.stop()
        await orchestrator.client.aclose()

    return presenter.save_snapshots(FileStorage(root=output_root), prefix="dashboard")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=settings.app_name)
    parser.add_argument("--duration", type=float, default=5.0, help="Seconds to keep the poller running.")
    parser.add_argument("--restaurant", default=None, help="Restaurant id selected on both views.")
    parser.add_argument("--base-url", default=None, help=f"Backend URL (default {settings.api_base_url}).")
    parser.add_argument("--output", type=Path, default=None, help="Directory for exported snapshots.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_dir = asyncio.run(
        run_dashboard(args.duration, restaurant_id=args.restaurant, base_url=args.base_url, output_root=args.output)
    )
    logger.info(f"Snapshots written to {run_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
