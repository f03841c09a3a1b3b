from enum import Enum
from pathlib import Path


APP_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = APP_DIR.parent

TEMPLATES_DIR = APP_DIR / "templates"


class EntityKind(str, Enum):
    CATEGORY = "categories"
    LOCATION = "locations"
    PRODUCT = "products"
    INVENTORY = "inventory"


VIEW_STATES = ("home", "entry", "results", "products", "settings")
DEFAULT_VIEW = "home"

# PostgREST refuses an unfiltered DELETE; no row ever carries this id.
DELETE_ALL_SENTINEL_ID = "00000000-0000-0000-0000-000000000000"

CSV_HEADERS = ("ID", "Category", "Product", "Location", "Quantity", "Date")
BACKUP_VERSION = 1
