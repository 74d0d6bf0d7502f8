from .setup import setup_observability, configure_logging
from .metrics import (
    storefront_orders_created_total,
    storefront_order_amount,
    storefront_invariant_violations_total,
)
