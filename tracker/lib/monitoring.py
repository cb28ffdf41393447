from http import HTTPStatus

from django.db import OperationalError, connections
from django.http import HttpRequest, HttpResponse, JsonResponse


def check_database() -> bool:
    """Check if we can run a trivial query on every configured database."""
    try:
        for alias in connections:
            with connections[alias].cursor() as c:
                c.execute("SELECT 1")
                c.fetchone()
    except OperationalError:
        return False
    return True


def heartbeat(request: HttpRequest) -> HttpResponse:
    return HttpResponse("OK", content_type="text/plain")


def health_check(request: HttpRequest) -> JsonResponse:
    """Check if we can connect to the services we depend on."""
    is_database_up = check_database()

    status = HTTPStatus.OK
    if not is_database_up:
        status = HTTPStatus.INTERNAL_SERVER_ERROR

    return JsonResponse(
        {"is_database_up": is_database_up},
        status=status,
    )
