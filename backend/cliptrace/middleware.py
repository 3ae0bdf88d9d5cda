import logging

from fastapi.responses import JSONResponse

from . import config
from .errors import PayloadTooLargeError

logger = logging.getLogger(__name__)

TOO_LARGE_MESSAGE = "Video exceeds the 100MB limit"


class UploadSizeLimit:
    """Cap request bodies on upload paths at ``config.MAX_UPLOAD_BYTES``.

    A declared ``Content-Length`` over the limit is refused up front. Bodies
    without one (chunked transfer) are counted as they arrive; once the limit
    is crossed reading the body fails, the route never runs, and whatever
    the app answers is replaced by a 413.
    """

    def __init__(self, app, path_suffix: str = "/upload-video"):
        self.app = app
        self.path_suffix = path_suffix

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or not scope["path"].endswith(self.path_suffix):
            await self.app(scope, receive, send)
            return

        limit = config.MAX_UPLOAD_BYTES
        headers = dict(scope.get("headers") or [])
        length = headers.get(b"content-length", b"").decode("latin-1")
        if length.isdigit() and int(length) > limit:
            await self._reject(scope, receive, send)
            return

        received = 0
        exceeded = False

        async def limited_receive():
            nonlocal received, exceeded
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    exceeded = True
                    logger.info("Upload body passed %d bytes; cutting it off", limit)
                    raise PayloadTooLargeError(TOO_LARGE_MESSAGE)
            return message

        response_started = False

        async def guarded_send(message):
            nonlocal response_started
            if not exceeded:
                await send(message)
                return
            # the app answered a body it could not read; replace that answer
            if message["type"] == "http.response.start" and not response_started:
                response_started = True
                await self._reject(scope, receive, send)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except PayloadTooLargeError:
            if response_started:
                raise
            response_started = True
            await self._reject(scope, receive, send)

    @staticmethod
    async def _reject(scope, receive, send):
        response = JSONResponse(status_code=413, content={"message": TOO_LARGE_MESSAGE})
        await response(scope, receive, send)
