"""
Common utility functions for API responses
"""
from rest_framework.response import Response
from rest_framework import status


def success_response(data=None, message="Success", status_code=status.HTTP_200_OK):
    """
    Standard success response format
    """
    response_data = {
        "code": status_code,
        "msg": message,
        "data": data
    }
    return Response(response_data, status=status_code)


def error_response(message="Error", errors=None, status_code=status.HTTP_400_BAD_REQUEST):
    """
    Standard error response format
    """
    response_data = {
        "code": status_code,
        "msg": message
    }
    if errors:
        response_data["errors"] = errors
    return Response(response_data, status=status_code)


def paginated_response(queryset, serializer_class, request, message="Success", page_size=20):
    """
    Standard paginated response format. ``page`` and ``limit`` come from the query string.
    """
    from rest_framework.pagination import PageNumberPagination

    paginator = PageNumberPagination()
    paginator.page_size = page_size
    paginator.page_size_query_param = 'limit'
    paginator.max_page_size = 100
    page = paginator.paginate_queryset(queryset, request)

    serializer = serializer_class(page, many=True)
    return success_response({
        "list": serializer.data,
        "page": {
            "pageNum": paginator.page.number,
            "pageSize": paginator.get_page_size(request),
            "total": paginator.page.paginator.count,
            "totalPages": paginator.page.paginator.num_pages
        }
    }, message)
