import asyncio
import sys

import structlog
from termcolor import colored

from storefront.shared.config import load_settings
from storefront.shared.observability import configure_logging
from storefront.storage import open_storage

from .fixtures import create_test_data

logger = structlog.get_logger(__name__)


async def main(storage_factory=None):
    """Rebuilds the reference data; ``storage_factory`` yields a Storage and releases it."""
    print(colored("Seeding test data...", "cyan"))
    async with (storage_factory or open_storage)() as storage:
        fixtures = await create_test_data(storage)
    print(colored("Seeding completed.", "green"))
    return fixtures


def run():
    configure_logging(load_settings().log_level)
    try:
        asyncio.run(main())
    except Exception as e:
        logger.exception("seed_failed", error=str(e))
        print(colored(f"Seeding failed: {e}", "red"), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
