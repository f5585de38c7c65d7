from rest_framework.pagination import PageNumberPagination


class AdminListPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = 'limit'  # allows ?limit=<int>
    max_page_size = 100
