# Importing any model registers all of them, so string-based
# relationships ("Company", "StockMovement", ...) always resolve.
from models import company, users, product, stock, log  # noqa: F401
