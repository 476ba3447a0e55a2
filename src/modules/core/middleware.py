"""Request correlation for structured logs."""

import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

REQUEST_ID_HEADER = "X-Request-ID"

logger = structlog.get_logger(__name__)


class CorrelationIdMiddleware:
    """Tag every log line of a request with its correlation ID.

    The ID comes from the ``X-Request-ID`` header, or a fresh UUID4 when
    the client sends none.  It is bound into ``structlog.contextvars`` for
    the duration of the request (so service-layer logs such as
    ``order.created`` carry it too) and echoed back in the response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)
        log = logger.bind(method=request.method, path=request.get_full_path())

        log.info("request.started")
        response = self.get_response(request)
        log.info("request.finished", status_code=response.status_code)

        response[REQUEST_ID_HEADER] = cid
        return response
