"""
Storefront configuration.

Values come from the environment; a ``.env`` file at the project root is
loaded first when present. Everything has a default so the engine runs
with an in-memory storage slot and no analytics collector.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
if _ENV_PATH.exists():
    load_dotenv(_ENV_PATH)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


# Product source (static JSON list, fetched without cache)
PRODUCTS_URL = os.environ.get("STOREFRONT_PRODUCTS_URL", "data/products.json")

# Durable key/value file; empty means in-memory storage
STORAGE_PATH = os.environ.get("STOREFRONT_STORAGE_PATH", "")

# Storage slot names
CART_KEY = os.environ.get("STOREFRONT_CART_KEY", "ec_cart_v1")
ORDER_KEY = os.environ.get("STOREFRONT_ORDER_KEY", "ec_last_order_v1")
USER_ID_KEY = "ec_user_id_v1"
SESSION_ID_KEY = "ec_session_id_v1"

# Optional HTTP collector for analytics events
ANALYTICS_URL = os.environ.get("STOREFRONT_ANALYTICS_URL", "")
ANALYTICS_TIMEOUT = float(os.environ.get("STOREFRONT_ANALYTICS_TIMEOUT", "3.0"))

# Debug mode logs every tracked event
DEBUG = _env_flag("STOREFRONT_DEBUG")

DEFAULT_CURRENCY = "XOF"
CATALOG_LIST_NAME = "Catalogue"
RELATED_LIST_NAME = "Produits similaires"
FEATURED_LIST_NAME = "Sélection du moment"

# Header search submitted with an empty box
EMPTY_SEARCH_TERM = "(vide)"

# Events kept in Tracker.data_layer (oldest dropped first)
DATA_LAYER_LIMIT = int(os.environ.get("STOREFRONT_DATA_LAYER_LIMIT", "500"))
