from django.core.paginator import Paginator

PAGE_SIZE_OPTIONS = [10, 25, 50, 100]


def page_window(page_obj, radius=2, edges=2):
    """
    Build a compact pagination window like:
    1 2 … 8 9 10 11 12 … 29 30
    Returns a list of ints and '…' strings.
    """
    total = page_obj.paginator.num_pages
    current = page_obj.number
    pages = set()

    # edges
    for p in range(1, min(edges, total) + 1):
        pages.add(p)
    for p in range(max(1, total - edges + 1), total + 1):
        pages.add(p)

    # window around current
    for p in range(current - radius, current + radius + 1):
        if 1 <= p <= total:
            pages.add(p)

    window = []
    prev = 0
    for p in sorted(pages):
        if prev and p != prev + 1:
            window.append("…")
        window.append(p)
        prev = p
    return window


def paginate(request, queryset, default_per_page=10):
    """
    Paginate ``queryset`` from the request's ``page`` and ``per_page`` params.

    Returns a dict ready to merge into a template context.
    """
    try:
        per_page = int(request.GET.get("per_page", default_per_page))
    except ValueError:
        per_page = default_per_page
    if per_page not in PAGE_SIZE_OPTIONS:
        per_page = default_per_page

    paginator = Paginator(queryset, per_page)
    page_obj = paginator.get_page(request.GET.get("page") or 1)
    return {
        "page_obj": page_obj,
        "per_page": per_page,
        "page_size_options": PAGE_SIZE_OPTIONS,
        "page_links": page_window(page_obj),
    }
