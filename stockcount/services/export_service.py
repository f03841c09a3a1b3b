import csv
import io
from datetime import date, datetime, tzinfo
from typing import Iterable, Optional

from stockcount.config import get_settings
from stockcount.core.constants import BACKUP_VERSION, CSV_HEADERS
from stockcount.core.dates import to_epoch_ms, utc_now
from stockcount.schemas.inventory import InventoryRecord
from stockcount.services.dashboard_service import sorted_records


def format_recorded_at(value: datetime, date_format: Optional[str] = None, tz: Optional[tzinfo] = None) -> str:
    date_format = date_format or get_settings().EXPORT_DATE_FORMAT
    # astimezone(None) converts to the server's local zone.
    return value.astimezone(tz).strftime(date_format)


def inventory_csv(
    records: Iterable[InventoryRecord],
    *,
    date_format: Optional[str] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    """Render records as CSV; text cells are quoted with embedded quotes doubled."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for record in sorted_records(records):
        writer.writerow(
            [
                record.id,
                record.category,
                record.product_name,
                record.location,
                record.quantity,
                format_recorded_at(record.recorded_at, date_format, tz),
            ]
        )
    return output.getvalue()


def csv_filename(today: Optional[date] = None) -> str:
    today = today or utc_now().date()
    return "inventory_{}.csv".format(today.isoformat())


def backup_filename(today: Optional[date] = None) -> str:
    today = today or utc_now().date()
    return "inventory_backup_{}.json".format(today.isoformat())


def _inventory_backup_row(record: InventoryRecord) -> dict:
    return {
        "id": record.id,
        "productName": record.product_name,
        "category": record.category,
        "location": record.location,
        "quantity": record.quantity,
        "timestamp": to_epoch_ms(record.recorded_at),
    }


def build_backup(state, *, now: Optional[datetime] = None) -> dict:
    now = now or utc_now()
    return {
        "version": BACKUP_VERSION,
        "timestamp": to_epoch_ms(now),
        "locations": [item.model_dump(by_alias=True) for item in state.locations],
        "categories": [item.model_dump(by_alias=True) for item in state.categories],
        "products": [item.model_dump(by_alias=True) for item in state.products],
        "inventory": [_inventory_backup_row(record) for record in state.inventory],
    }


__all__ = [
    "backup_filename",
    "build_backup",
    "csv_filename",
    "format_recorded_at",
    "inventory_csv",
]
