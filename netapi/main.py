"""netapi - container network management API.

HTTP surface over the network services:
- List / inspect networks
- Create / delete networks
- Connect / disconnect containers
- Health and Prometheus metrics

Directory calls block (docker SDK), so handlers run services through
asyncio.to_thread().
"""

from __future__ import annotations

import asyncio
import logging
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from docker.errors import APIError
from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from netapi.config import settings
from netapi.directory import Directories, get_directories
from netapi.errors import InvalidRequest, NetworkAPIError
from netapi.logging_config import correlation_id_var, generate_correlation_id, setup_logging
from netapi.metrics import get_metrics, track_operation
from netapi.schemas import (
    NetworkConnect,
    NetworkCreate,
    NetworkCreateResponse,
    NetworkDisconnect,
    NetworkResource,
)
from netapi.services import EndpointAttachmentService, NetworkLifecycleService, NetworkQueryService
from netapi.version import __version__, get_commit

setup_logging()

logger = logging.getLogger(__name__)

STARTED_AT = datetime.now(timezone.utc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting netapi {__version__} ({settings.instance_name})")
    directories = get_directories()
    logger.info(f"Directory backend: {directories.backend}")
    yield
    logger.info("netapi shutting down")


app = FastAPI(
    title="netapi",
    version=__version__,
    lifespan=lifespan,
)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Propagate X-Correlation-ID into log records and the response."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or generate_correlation_id()
        token = correlation_id_var.set(correlation_id)
        try:
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            correlation_id_var.reset(token)


app.add_middleware(CorrelationIdMiddleware)


# --- Error mapping ---

def _error_response(status_code: int, message: str) -> JSONResponse:
    correlation_id = correlation_id_var.get()
    return JSONResponse(
        status_code=status_code,
        content={"message": message},
        headers={"X-Correlation-ID": correlation_id} if correlation_id else {},
    )


@app.exception_handler(NetworkAPIError)
async def network_error_handler(request: Request, exc: NetworkAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc}")
    return _error_response(exc.status_code, str(exc))


@app.exception_handler(APIError)
async def docker_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Docker daemon errors pass through with the daemon's status code."""
    status_code = exc.status_code or 500
    message = exc.explanation or str(exc)
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")
    logger.warning(f"{request.method} {request.url.path} -> docker {status_code}: {message}")
    return _error_response(status_code, message)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(
        f"Unhandled exception in {request.method} {request.url.path}: "
        f"{type(exc).__name__}: {exc}\n{tb_str}"
    )
    return _error_response(500, "Internal server error")


# --- Dependencies ---

def get_query_service(directories: Directories = Depends(get_directories)) -> NetworkQueryService:
    return NetworkQueryService(directories.networks)


def get_lifecycle_service(directories: Directories = Depends(get_directories)) -> NetworkLifecycleService:
    return NetworkLifecycleService(directories.networks)


def get_attachment_service(directories: Directories = Depends(get_directories)) -> EndpointAttachmentService:
    return EndpointAttachmentService(directories.networks, directories.containers)


def require_json(request: Request) -> None:
    """Reject POST bodies that are not declared as JSON."""
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != "application/json" and not media_type.endswith("+json"):
        raise InvalidRequest(f"Content-Type specified ({content_type}) must be 'application/json'")


# --- Health Endpoints ---

@app.get("/health")
def health():
    """Basic health check."""
    return {
        "status": "ok",
        "version": __version__,
        "commit": get_commit(),
        "backend": settings.directory_backend,
        "started_at": STARTED_AT.isoformat(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/metrics")
def metrics() -> Response:
    if not settings.enable_metrics:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    body, content_type = get_metrics()
    return Response(content=body, media_type=content_type)


# --- Network Endpoints ---

@app.get("/networks", response_model=list[NetworkResource])
async def list_networks(
    filters: str = Query(default=""),
    service: NetworkQueryService = Depends(get_query_service),
) -> list[NetworkResource]:
    with track_operation("list"):
        return await asyncio.to_thread(service.list, filters)


@app.post(
    "/networks/create",
    response_model=NetworkCreateResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_json)],
)
async def create_network(
    payload: NetworkCreate,
    service: NetworkLifecycleService = Depends(get_lifecycle_service),
) -> NetworkCreateResponse:
    logger.info(f"Creating network {payload.name} (driver={payload.driver or 'default'})")
    with track_operation("create"):
        result = await asyncio.to_thread(
            service.create,
            payload.name,
            payload.driver,
            payload.options,
            payload.check_duplicate,
        )
    return NetworkCreateResponse(id=result.id, warning=result.warning)


@app.get("/networks/{network_id}", response_model=NetworkResource)
async def get_network(
    network_id: str,
    service: NetworkQueryService = Depends(get_query_service),
) -> NetworkResource:
    with track_operation("get"):
        return await asyncio.to_thread(service.get, network_id)


@app.post("/networks/{network_id}/connect", dependencies=[Depends(require_json)])
async def connect_network(
    network_id: str,
    payload: NetworkConnect,
    service: EndpointAttachmentService = Depends(get_attachment_service),
) -> Response:
    with track_operation("connect"):
        await asyncio.to_thread(service.connect, network_id, payload.container)
    return Response(status_code=status.HTTP_200_OK)


@app.post("/networks/{network_id}/disconnect", dependencies=[Depends(require_json)])
async def disconnect_network(
    network_id: str,
    payload: NetworkDisconnect,
    service: EndpointAttachmentService = Depends(get_attachment_service),
) -> Response:
    with track_operation("disconnect"):
        await asyncio.to_thread(service.disconnect, network_id, payload.container)
    return Response(status_code=status.HTTP_200_OK)


@app.delete("/networks/{network_id}")
async def delete_network(
    network_id: str,
    service: NetworkLifecycleService = Depends(get_lifecycle_service),
) -> Response:
    with track_operation("delete"):
        await asyncio.to_thread(service.delete, network_id)
    return Response(status_code=status.HTTP_200_OK)


# --- Entry point ---

def run() -> None:
    import uvicorn

    uvicorn.run(
        "netapi.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    run()
