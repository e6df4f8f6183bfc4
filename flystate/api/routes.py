"""Route handlers for the flystate REST API.

Endpoints:
    GET  /api/v1/health
    POST /api/v1/resources/{type_name}/{operation}
    POST /api/v1/data/{kind}
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import asdict
from enum import StrEnum
from typing import Any

import structlog
from fastapi import APIRouter, Request
from pydantic import BaseModel

from flystate import datasources
from flystate.api.codec import CODECS, ResourceCodec, encode_diagnostics
from flystate.api.schemas import (
    AppLookup,
    CertificateLookup,
    DataSourceResponse,
    HealthResponse,
    IPAddressLookup,
    OperationRequest,
    OperationResponse,
    VolumeLookup,
)
from flystate.client.api import FlyAPI
from flystate.resources.base import OperationResult

_log = structlog.get_logger(component="api.routes")

router = APIRouter()


class Operation(StrEnum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    IMPORT = "import"
    PLAN = "plan"


class APIError(Exception):
    """Raised by handlers; rendered as the ``{error, detail}`` envelope."""

    def __init__(self, status_code: int, error: str, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.error = error
        self.detail = detail


def _require(body: OperationRequest, *fields: str) -> None:
    missing = [f for f in fields if getattr(body, f) is None]
    if missing:
        raise APIError(400, "INVALID_REQUEST", f"missing required field(s): {', '.join(missing)}")


def _response(result: OperationResult[Any], encode: Callable[[Any], dict[str, Any]]) -> OperationResponse:
    return OperationResponse(
        state=encode(result.state) if result.state is not None else None,
        lifecycle=result.lifecycle.value,
        diagnostics=encode_diagnostics(result.diagnostics),
    )


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    from flystate import __version__

    return HealthResponse(version=__version__, resource_types=sorted(request.app.state.registry))


@router.post("/resources/{type_name}/{operation}", response_model=OperationResponse)
async def run_operation(
    type_name: str,
    operation: Operation,
    body: OperationRequest,
    request: Request,
) -> OperationResponse:
    registry = request.app.state.registry
    resource = registry.get(type_name)
    codec: ResourceCodec | None = CODECS.get(type_name)
    if resource is None or codec is None:
        raise APIError(404, "UNKNOWN_RESOURCE_TYPE", f"unknown resource type {type_name!r}")

    _log.info("resource_operation_requested", resource=type_name, operation=operation.value)

    if operation == Operation.CREATE:
        _require(body, "config")
        result = await resource.create(codec.decode_config(body.config))
    elif operation == Operation.READ:
        _require(body, "state")
        result = await resource.read(codec.decode_state(body.state))
    elif operation == Operation.UPDATE:
        _require(body, "state", "config")
        result = await resource.update(codec.decode_state(body.state), codec.decode_config(body.config))
    elif operation == Operation.DELETE:
        _require(body, "state")
        result = await resource.delete(codec.decode_state(body.state))
    elif operation == Operation.IMPORT:
        _require(body, "id")
        result = await resource.import_state(body.id)
    else:
        if codec.encode_plan is None or not hasattr(resource, "plan"):
            raise APIError(400, "INVALID_REQUEST", f"resource type {type_name!r} does not support plan")
        _require(body, "config")
        state = codec.decode_state(body.state) if body.state is not None else None
        result = await resource.plan(state, codec.decode_config(body.config))
        return _response(result, codec.encode_plan)

    return _response(result, codec.encode_state)


# ---------------------------------------------------------------------------
# Data sources
# ---------------------------------------------------------------------------


async def _lookup_app(api: FlyAPI, q: AppLookup) -> datasources.DataSourceResult[Any]:
    return await datasources.read_app(api, q.name)


async def _lookup_certificate(api: FlyAPI, q: CertificateLookup) -> datasources.DataSourceResult[Any]:
    return await datasources.read_certificate(api, q.app, q.hostname)


async def _lookup_ip_address(api: FlyAPI, q: IPAddressLookup) -> datasources.DataSourceResult[Any]:
    return await datasources.read_ip_address(api, q.app, q.address)


async def _lookup_volume(api: FlyAPI, q: VolumeLookup) -> datasources.DataSourceResult[Any]:
    return await datasources.read_volume(api, q.app, q.internal_id)


_Lookup = Callable[[FlyAPI, Any], Awaitable[datasources.DataSourceResult[Any]]]

_DATA_SOURCES: dict[str, tuple[type[BaseModel], _Lookup]] = {
    "app": (AppLookup, _lookup_app),
    "certificate": (CertificateLookup, _lookup_certificate),
    "ip_address": (IPAddressLookup, _lookup_ip_address),
    "volume": (VolumeLookup, _lookup_volume),
}


@router.post("/data/{kind}", response_model=DataSourceResponse)
async def read_data_source(kind: str, body: dict[str, Any], request: Request) -> DataSourceResponse:
    entry = _DATA_SOURCES.get(kind)
    if entry is None:
        raise APIError(404, "UNKNOWN_DATA_SOURCE", f"unknown data source {kind!r}")
    model, lookup = entry
    result = await lookup(request.app.state.api, model.model_validate(body))
    return DataSourceResponse(
        data=asdict(result.data) if result.data is not None else None,
        diagnostics=encode_diagnostics(result.diagnostics),
    )
