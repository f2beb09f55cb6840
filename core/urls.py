"""
URL configuration for the analytics project.

REST endpoints live under /api/v1/, a health check under /health/, read-only GraphQL queries under /graphql/
and the OpenAPI schema and docs under /api/schema/ and /api/docs/.
"""

import logging

from django.contrib import admin
from django.urls import path
from django.urls import include
from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from strawberry.django.views import GraphQLView
from core.graphql.schema import schema
from django.views.decorators.csrf import csrf_exempt
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView

logger = logging.getLogger(__name__)


def home_view(request):
    return JsonResponse({
        "message": "Customer & Campaign Analytics API",
        "status": "running",
        "endpoints": {
            "admin": "/admin/",
            "api": "/api/v1/",
            "analytics": "/api/v1/analytics/",
            "import": "/api/v1/import/",
            "health": "/health/",
            "graphql": "/graphql/",
            "docs": "/api/docs/",
            "schema": "/api/schema/"
        }
    })


def health_view(request):
    """Liveness plus a round trip to the database and the cache."""
    checks = {}
    try:
        connection.ensure_connection()
        checks["database"] = "ok"
    except DatabaseError as e:
        logger.error(f"Health check: database unavailable: {e}")
        checks["database"] = "unavailable"

    try:
        cache.set("health:ping", "pong", 5)
        checks["cache"] = "ok" if cache.get("health:ping") == "pong" else "unavailable"
    except Exception as e:
        logger.error(f"Health check: cache unavailable: {e}")
        checks["cache"] = "unavailable"

    healthy = all(value == "ok" for value in checks.values())
    return JsonResponse(
        {"status": "ok" if healthy else "degraded", **checks},
        status=200 if healthy else 503,
    )


urlpatterns = [
    path("", home_view, name="home"),
    path("health/", health_view, name="health"),
    path("admin/", admin.site.urls),
    path("api/v1/auth/", include("apps.authentication.urls")),
    path("api/v1/analytics/", include("apps.analytics.urls")),
    path("api/v1/import/", include("apps.imports.urls")),
    path("api/v1/", include("apps.customers.urls")),
    path("api/v1/", include("apps.campaigns.urls")),
    path('graphql/', csrf_exempt(GraphQLView.as_view(schema=schema, graphql_ide="graphiql"))),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]
