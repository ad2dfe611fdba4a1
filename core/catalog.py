from datetime import datetime

SORT_MODES = ("featured", "price-asc", "price-desc", "newest", "rating")


def effective_price(product):
    return product.discounted_price or product.price


def filter_and_sort_products(products, category_ids=None, min_price=None, max_price=None, sort="featured"):
    """Apply the shop filters to an already fetched product list."""
    results = list(products)

    if category_ids:
        wanted = set(category_ids)
        results = [p for p in results if p.category_id in wanted]

    if min_price is not None:
        results = [p for p in results if effective_price(p) >= min_price]
    if max_price is not None:
        results = [p for p in results if effective_price(p) <= max_price]

    if sort == "price-asc":
        results.sort(key=effective_price)
    elif sort == "price-desc":
        results.sort(key=effective_price, reverse=True)
    elif sort == "newest":
        results.sort(key=lambda p: p.date_added or datetime.min, reverse=True)
    elif sort == "rating":
        results.sort(key=lambda p: p.rating or 0, reverse=True)
    else:
        # stable, so non-featured products keep their fetch order
        results.sort(key=lambda p: 1 if p.featured else 0, reverse=True)

    return results


def highest_price(products):
    return max((p.price for p in products), default=0)
