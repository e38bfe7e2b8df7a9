import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from blogposts.conf import settings

logger = logging.getLogger(f"{settings.BLOGPOSTS_LOGGER}.executor")


class QueryError(Exception):
    """Base class for failures while executing a query through the endpoint."""


class QueryTransportError(QueryError):
    """The query endpoint could not be reached."""


class QueryExecutionError(QueryError):
    """The query endpoint reported a failure."""


class QueryExecutor:
    """
    Sends parameterized SQL to a query-execution endpoint over HTTP.

    The endpoint accepts ``{"query": ..., "params": [...]}`` and answers with a
    JSON list of row objects, or with ``{"error": message}``.
    """

    def __init__(self, endpoint: str, session: Optional[requests.Session] = None):
        self.endpoint = endpoint
        self.session = session if session is not None else requests.Session()

    def execute(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """
        Execute a query and return its rows.

        :param query: The SQL statement, using ``%s`` placeholders.
        :param params: The positional parameters.
        :return: The result rows as dicts.
        :raises QueryTransportError: The endpoint was unreachable.
        :raises QueryExecutionError: The endpoint answered with an error.
        """
        payload = {"query": query, "params": list(params)}
        try:
            response = self.session.post(self.endpoint, json=payload)
        except requests.RequestException as e:
            raise QueryTransportError(str(e)) from e

        if not response.ok:
            raise QueryExecutionError(f"Query failed: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise QueryExecutionError(f"Invalid response: {e}") from e
        if isinstance(data, dict):
            if data.get("error"):
                raise QueryExecutionError(data["error"])
            raise QueryExecutionError(f"Unexpected response: {response.text}")

        logger.debug("Query returned %d rows", len(data))
        return data
