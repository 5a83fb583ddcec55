from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """
    Project-wide page size, overridable per request with ?page_size=.
    """

    page_size = 25
    page_size_query_param = 'page_size'
    max_page_size = 100
