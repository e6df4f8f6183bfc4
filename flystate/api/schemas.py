"""Pydantic request/response schemas for the flystate REST API.

Lifecycle payloads (``config``/``state``) stay untyped at this layer; each
resource type's codec validates them (see ``flystate.api.codec``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error envelope returned for every non-2xx response."""

    error: str
    detail: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    resource_types: list[str] = Field(default_factory=list)


class DiagnosticModel(BaseModel):
    severity: str
    summary: str
    detail: str = ""


class OperationRequest(BaseModel):
    """Body for ``POST /resources/{type}/{operation}``.

    Which fields are required depends on the operation:

        create  config
        read    state
        update  state, config
        delete  state
        import  id
        plan    config (state optional)
    """

    config: dict[str, Any] | None = None
    state: dict[str, Any] | None = None
    id: str | None = None


class OperationResponse(BaseModel):
    """Outcome of one lifecycle operation. ``state: null`` means the resource is gone."""

    state: dict[str, Any] | None
    lifecycle: str
    diagnostics: list[DiagnosticModel] = Field(default_factory=list)


class DataSourceResponse(BaseModel):
    data: dict[str, Any] | None
    diagnostics: list[DiagnosticModel] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Data source lookups
# ---------------------------------------------------------------------------


class AppLookup(BaseModel):
    name: str = Field(min_length=1)


class CertificateLookup(BaseModel):
    app: str = Field(min_length=1)
    hostname: str = Field(min_length=1)


class IPAddressLookup(BaseModel):
    app: str = Field(min_length=1)
    address: str = Field(min_length=1)


class VolumeLookup(BaseModel):
    app: str = Field(min_length=1)
    internal_id: str = Field(min_length=1)
