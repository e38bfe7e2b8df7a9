import datetime

from django.core.serializers.json import DjangoJSONEncoder


class QueryResultJSONEncoder(DjangoJSONEncoder):
    """
    JSON encoder for raw query results. Datetimes keep their full microsecond
    precision, unlike :py:class:`DjangoJSONEncoder` which truncates to
    milliseconds.
    """

    def default(self, obj):
        if isinstance(obj, datetime.datetime):
            return obj.isoformat()
        return super().default(obj)
