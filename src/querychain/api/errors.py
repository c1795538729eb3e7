# src/querychain/api/errors.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from rich.markup import escape

from querychain.core.errors import ModelError
from querychain.core.logging import log


def register_error_handlers(app: FastAPI) -> None:
    """
    Turn ModelError (and subclasses) raised inside route handlers into
    JSON responses carrying the error's status code.
    """

    @app.exception_handler(ModelError)
    async def model_error_handler(request: Request, exc: ModelError):
        # driver messages echo user-supplied values
        message = f"{exc.name} on {escape(request.url.path)}: {escape(exc.message)}"
        if exc.status_code >= 500:
            log.error(message)
        else:
            log.debug(message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    log.debug("Registered ModelError handler")
