import math

from django.core.paginator import EmptyPage, Page
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardPagination(PageNumberPagination):
    """`?page=&limit=` pagination used by the admin list screens."""
    page_size = 10
    page_size_query_param = 'limit'
    max_page_size = 100

    def paginate_queryset(self, queryset, request, view=None):
        page_size = self.get_page_size(request)
        if not page_size:
            return None

        self.request = request
        paginator = self.django_paginator_class(queryset, page_size)
        try:
            number = max(int(request.query_params.get(self.page_query_param, 1)), 1)
        except (TypeError, ValueError):
            number = 1

        # Past the last page: empty data, real totals
        try:
            self.page = paginator.page(number)
        except EmptyPage:
            self.page = Page([], number, paginator)
        return list(self.page)

    def get_paginated_response(self, data):
        limit = self.get_page_size(self.request)
        total = self.page.paginator.count
        return Response({
            'success': True,
            'data': data,
            'pagination': {
                'page': self.page.number,
                'limit': limit,
                'total': total,
                'totalPages': math.ceil(total / limit) if limit else 0,
            }
        })
