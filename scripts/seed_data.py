import argparse
import asyncio
import logging

from stockcount.core.errors import StockCountError
from stockcount.core.logging import setup_logging
from stockcount.services.app_state import ViewStateController
from stockcount.services.remote_store import RemoteStoreGateway

logger = logging.getLogger(__name__)

SAMPLE_CATEGORIES = ("Drinks", "Dairy", "Cleaning")
SAMPLE_LOCATIONS = ("Aisle 1", "Aisle 2", "Back store")
SAMPLE_PRODUCTS = (
    ("Cola 33cl", "Drinks"),
    ("Orange juice 1L", "Drinks"),
    ("Milk", "Dairy"),
    ("Greek yogurt", "Dairy"),
    ("Bleach 2L", "Cleaning"),
)


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample catalog data into the remote store.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear the whole count history before seeding.",
    )
    return parser.parse_args()


async def seed(reset=False):
    async with RemoteStoreGateway.from_settings() as gateway:
        controller = ViewStateController(gateway)
        if not await controller.reload_all():
            print("Seed skipped: remote store is unreachable or not configured.")
            return

        if reset:
            removed = await controller.clear_all_inventory()
            print("Removed {} inventory records.".format(removed))

        if len(controller.state.categories):
            print("Seed skipped: categories already exist.")
            return

        for name in SAMPLE_CATEGORIES:
            await controller.add_category(name)
        for name in SAMPLE_LOCATIONS:
            await controller.add_location(name)
        for name, category in SAMPLE_PRODUCTS:
            await controller.add_product(name, category)
        print("Seed data created.")


def main():
    setup_logging()
    args = parse_args()
    try:
        asyncio.run(seed(reset=args.reset))
    except StockCountError as exc:
        logger.error("Seeding failed: %s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
