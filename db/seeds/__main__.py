from __future__ import annotations

import os
import sys

from db.seeds.base import SeedError
from db.seeds.manager import SeedManager
from services.api.app.context import build_context
from services.api.app.logging import logger


def main(names: list[str] | None = None) -> int:
    names = sys.argv[1:] if names is None else names
    ctx = build_context(os.getenv("CONFIG_PATH") or None)
    manager = SeedManager.from_context(ctx)
    logger.info("seeders_available", seeders=manager.list_available_seeders())
    try:
        if names:
            manager.run_specific(names)
        else:
            manager.run()
    except SeedError as e:
        logger.error("seeding_failed", error=str(e))
        return 1
    finally:
        ctx.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
