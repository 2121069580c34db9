import enum
from typing import Iterable

# Response header listing the views a client should refresh
INVALIDATE_HEADER = "X-Invalidate-Views"


# Logical views whose cached data depends on products and movements
class View(str, enum.Enum):
    MOVEMENTS = "movements"
    DASHBOARD = "dashboard"
    PRODUCTS = "products"
    ALERTS = "alerts"


AFTER_MOVEMENT = (View.MOVEMENTS, View.DASHBOARD, View.PRODUCTS, View.ALERTS)
AFTER_PRODUCT_CHANGE = (View.PRODUCTS, View.DASHBOARD, View.ALERTS)
AFTER_COMPANY_CHANGE = (View.DASHBOARD,)


def header_value(views: Iterable[View]) -> str:
    return ",".join(v.value for v in views)
