"""
Liveness and database connectivity.
"""
import logging

from django.db import DatabaseError, connection
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView
from rest_framework.response import Response

from ..serializers import HealthCheckSerializer

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


class HealthCheckView(APIView):
    """
    System health check endpoint.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(responses={200: HealthCheckSerializer}, description="Check system health status")
    def get(self, request):
        db_status = "healthy"
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except DatabaseError as e:
            logger.error(f"Health check database failure: {e}")
            db_status = f"unhealthy: {e}"

        return Response({
            "success": db_status == "healthy",
            "status": "healthy" if db_status == "healthy" else "degraded",
            "version": API_VERSION,
            "database": db_status,
            "timestamp": timezone.now().isoformat(),
        })
