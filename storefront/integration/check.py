import asyncio
import sys

import structlog
from termcolor import colored

from storefront.shared.config import load_settings
from storefront.shared.observability import configure_logging
from storefront.storage import open_storage

from .invariants import check_invariants

logger = structlog.get_logger(__name__)


async def main(storage_factory=None) -> bool:
    """Prints one line per invariant and returns True when all of them hold."""
    async with (storage_factory or open_storage)() as storage:
        reports = await check_invariants(storage)

    for report in reports:
        if report.ok:
            print(f"   ✅ {colored('PASS', 'green')} | {report.name}")
        else:
            print(f"   ❌ {colored('FAIL', 'red')} | {report.name}: {', '.join(report.offending_ids)}")

    return all(report.ok for report in reports)


def run():
    configure_logging(load_settings().log_level)
    try:
        ok = asyncio.run(main())
    except Exception as e:
        logger.exception("invariant_check_failed", error=str(e))
        sys.exit(1)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    run()
