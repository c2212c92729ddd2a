PAGE_SIZE = 100


def fetch_all(query) -> list:
    """Drain a Protean queryset page by page instead of stopping at its default limit."""
    items: list = []
    offset = 0
    while True:
        page = query.offset(offset).limit(PAGE_SIZE).all()
        items.extend(page.items)
        offset += len(page.items)
        if not page.items or offset >= page.total:
            return items
