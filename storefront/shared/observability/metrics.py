from prometheus_client import Counter, Histogram

# Business Metrics
storefront_orders_created_total = Counter(
    "storefront_orders_created_total",
    "Total orders created through the API",
)

storefront_order_amount = Histogram(
    "storefront_order_amount",
    "Order total amount",
    buckets=(10, 25, 50, 100, 250, 500, 1000, 2500, 5000),
)

storefront_invariant_violations_total = Counter(
    "storefront_invariant_violations_total",
    "Data invariant violations detected by the checker",
    ["invariant"]  # Labels: 'no_negative_stock', 'category_references', 'order_totals'
)
