"""
Middleware for filestore
"""

import logging
import time
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .models import MessageResponse
from .utils import format_duration

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """Best-effort client address for logging"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "-"


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Access logging middleware"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        client_ip = get_client_ip(request)

        try:
            response = await call_next(request)

            duration = time.time() - start_time
            self._log_access(
                request=request,
                response=response,
                duration=duration,
                client_ip=client_ip,
            )
            return response

        except Exception as e:
            duration = time.time() - start_time
            self._log_access(
                request=request,
                response=None,
                duration=duration,
                client_ip=client_ip,
                error=str(e)
            )
            raise

    def _log_access(
        self,
        request: Request,
        response: Optional[Response],
        duration: float,
        client_ip: str,
        error: Optional[str] = None
    ):
        """Log access information"""

        status_code = response.status_code if response else 500
        content_length = response.headers.get("content-length", "-") if response else "-"

        log_data = {
            "method": request.method,
            "path": str(request.url.path),
            "status": status_code,
            "size": content_length,
            "duration": format_duration(duration),
            "ip": client_ip,
            "user_agent": request.headers.get("user-agent", "-"),
        }

        if error:
            log_data["error"] = error

        if status_code >= 500:
            logger.error(f"ACCESS {log_data}")
        elif status_code >= 400:
            logger.warning(f"ACCESS {log_data}")
        else:
            logger.info(f"ACCESS {log_data}")


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Turns faults escaping a handler (I/O errors included) into a 500"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except HTTPException:
            raise

        except Exception as e:
            logger.exception(f"Unhandled exception: {e}")
            return JSONResponse(
                status_code=500,
                content=MessageResponse(message=f"Internal server error: {e}").to_dict()
            )


def setup_middleware(app: FastAPI):
    """Setup all middleware for the application"""

    # Access logging (inner, sees the original exception)
    app.add_middleware(AccessLogMiddleware)

    # Exception handling (outer)
    app.add_middleware(ExceptionHandlerMiddleware)

    logger.info("Middleware setup complete")
