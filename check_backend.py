#!/usr/bin/env python3
"""Script to verify the dispatch backend is reachable and its payloads decode."""

import asyncio
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from dispatch_dashboard.config import settings
from dispatch_dashboard.errors import DashboardError
from dispatch_dashboard.services.api.client import BackendClient


async def _check() -> int:
    print("=" * 60)
    print("Dispatch Backend Connection Test")
    print("=" * 60)
    print()
    print(f"   Base URL: {settings.api_base_url}")
    print(f"   Grid: {settings.grid_width}x{settings.grid_height}")
    print()

    failures = 0
    async with BackendClient() as client:
        checks = [
            ("restaurants", client.list_restaurants),
            ("city layout", client.get_city_layout),
            ("orders", client.list_orders),
            ("couriers", client.list_couriers),
        ]
        for step, (label, call) in enumerate(checks, start=1):
            print(f"{step}. Fetching {label}...")
            try:
                items = await call()
                print(f"   [OK] {len(items)} {label}")
            except DashboardError as e:
                failures += 1
                print(f"   [ERROR] {type(e).__name__}: {e}")
            print()

    if failures:
        print(f"{failures} check(s) failed")
        return 1
    print("All checks passed")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(_check()))
