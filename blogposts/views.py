import json
import logging

from django.db import DEFAULT_DB_ALIAS, connections, transaction
from django.http import Http404, HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from blogposts.conf import settings
from blogposts.encoder import QueryResultJSONEncoder

logger = logging.getLogger(f"{settings.BLOGPOSTS_LOGGER}.proxy")


def dictfetchall(cursor):
    """Return all rows from a cursor as a list of dicts."""
    if cursor.description is None:
        return []
    columns = [col[0] for col in cursor.description]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]


@method_decorator(csrf_exempt, name="dispatch")
class QueryProxyView(View):
    """
    Development endpoint that executes raw SQL posted as
    ``{"query": ..., "params": [...]}`` and answers with the rows as JSON.

    Only served when ``BLOGPOSTS_QUERY_ENDPOINT_ENABLED`` is set.
    """

    http_method_names = ["get", "post", "options"]
    database = DEFAULT_DB_ALIAS
    cors_headers = {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }

    def dispatch(self, request, *args, **kwargs):
        if not settings.BLOGPOSTS_QUERY_ENDPOINT_ENABLED:
            raise Http404("Query endpoint is disabled.")
        response = super().dispatch(request, *args, **kwargs)
        for header, value in self.cors_headers.items():
            response[header] = value
        return response

    def options(self, request, *args, **kwargs):
        return HttpResponse()

    def get(self, request, *args, **kwargs):
        return JsonResponse(
            {
                "status": "running",
                "message": "Query endpoint is running. Use POST to execute queries.",
            }
        )

    def post(self, request, *args, **kwargs):
        try:
            body = json.loads(request.body)
            query = body["query"]
            params = body.get("params") or None
            logger.debug(
                "Executing query: %s%s", query[:100], "..." if len(query) > 100 else ""
            )
            connection = connections[self.database]
            with transaction.atomic(using=self.database), connection.cursor() as cursor:
                cursor.execute(query, params)
                rows = dictfetchall(cursor)
        except Exception as e:
            logger.error("Error executing query: %s", e)
            return JsonResponse({"error": str(e)}, status=500)

        return JsonResponse(rows, safe=False, encoder=QueryResultJSONEncoder)
