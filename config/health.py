from django.db import connection
from django.db.utils import DatabaseError
from drf_spectacular.utils import extend_schema, inline_serializer
from rest_framework import serializers, status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from restaurant.selectors import get_restaurant_settings


@extend_schema(
    tags=["Health Endpoint"],
    summary="Health check",
    responses={
        200: inline_serializer(
            name="HealthResponse",
            fields={
                "status": serializers.CharField(),
                "database": serializers.CharField(),
                "restaurant_configured": serializers.BooleanField(),
            },
        )
    },
)
@api_view(["GET"])
def health(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError:
        return Response(
            {"status": "degraded", "database": "unavailable", "restaurant_configured": False},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    # Orders cannot be placed until charges are configured
    configured = get_restaurant_settings() is not None
    return Response({"status": "ok", "database": "ok", "restaurant_configured": configured})
