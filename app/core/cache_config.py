"""Cache key namespace. Keys must stay bit-exact across deployments."""

CACHE_KEYS = {
    "latest_products": "latest-products",
    "categories": "categories",
    "all_products": "all-products",
    "product": "product-{}",

    "all_orders": "all-orders",
    "my_orders": "my-orders-{}",
    "order": "orders-{}",

    "reviews": "reviews-{}",

    "admin_stats": "admin-stats",
    "admin_pie_charts": "admin-pie-charts",
    "admin_bar_charts": "admin-bar-charts",
    "admin_line_charts": "admin-line-charts",
}

# Group-wide keys evicted whenever the group is flagged
PRODUCT_GROUP_KEYS = [
    CACHE_KEYS["latest_products"],
    CACHE_KEYS["categories"],
    CACHE_KEYS["all_products"],
]

ADMIN_GROUP_KEYS = [
    CACHE_KEYS["admin_stats"],
    CACHE_KEYS["admin_pie_charts"],
    CACHE_KEYS["admin_bar_charts"],
    CACHE_KEYS["admin_line_charts"],
]
