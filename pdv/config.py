"""Runtime configuration defaults for persistence, printing and reports."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("PDV_DB_PATH", "data/pdv.db")
DEBUG_LOG_PATH = os.environ.get("PDV_DEBUG_LOG", "/tmp/pdv-debug.log")
RECEIPTS_DIR = os.environ.get("PDV_RECEIPTS_DIR", "data/receipts")

# Fixed storage slots, one JSON document per key.
PRODUCTS_STORAGE_KEY = "products-storage"
ORDERS_STORAGE_KEY = "orders"
SALES_STORAGE_KEY = "sales-storage"
CART_STORAGE_KEY = "cart-items"
AUTH_STORAGE_KEY = "auth"

SHOP_NAME = "MUNDO GELADO"
DIRECT_SALE_CUSTOMER = "Venda Direta"

REPORT_PASSWORD = os.environ.get("PDV_REPORT_PASSWORD", "21011996")
LOGIN_DELAY_SECONDS = 0.5

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 28
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_FONT_ENV = "PDV_PRINTER_FONT_PATH"
PRINTER_LEFT_INDENT_PX = 8
PRINTER_TAIL_SPACER_PX = 70
