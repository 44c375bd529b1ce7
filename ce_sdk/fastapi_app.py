"""FastAPI adapter for receiving events (install with the ``http`` extra)."""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .schema import EnvelopeError
from .transport_http import EventHandler, HTTPReceiver

logger = logging.getLogger(__name__)


def create_fastapi_app(handler: EventHandler, *, path: str = "/", receiver: HTTPReceiver | None = None) -> FastAPI:
    """Build an app that accepts events on ``POST path``.

    ``handler`` is synchronous and runs in the threadpool, off the event loop.
    """
    active_receiver = receiver or HTTPReceiver()
    app = FastAPI()

    @app.post(path)
    async def cloudevents_endpoint(request: Request) -> Response:
        body = await request.body()
        try:
            event = active_receiver.accept(dict(request.headers.items()), body)
        except EnvelopeError as exc:
            logger.warning("rejected inbound event: %s", exc)
            return JSONResponse(status_code=400, content=exc.to_dict())

        await run_in_threadpool(handler, event)
        return Response(status_code=202)

    return app
