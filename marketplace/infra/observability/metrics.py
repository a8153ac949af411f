from prometheus_client import Counter, Histogram


# Order Metrics
orders_placed_total = Counter("marketplace_orders_placed_total", "Total orders placed", ["status"])
order_value = Histogram(
    "marketplace_order_value",
    "Order amount distribution",
    buckets=[5, 25, 50, 100, 250, 500, 1000, 2500, float("inf")],
)
order_transitions_total = Counter(
    "marketplace_order_transitions_total", "Order lifecycle transition attempts", ["action", "outcome"]
)

# Review Metrics
reviews_posted_total = Counter("marketplace_reviews_posted_total", "Reviews created", ["rating"])
rating_recompute_failures_total = Counter(
    "marketplace_rating_recompute_failures_total", "Seller rating recomputations that raised"
)

# Catalog Metrics
gigs_created_total = Counter("marketplace_gigs_created_total", "Gigs created", ["category"])
