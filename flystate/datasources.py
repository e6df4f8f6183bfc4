"""Read-only lookups of existing remote objects.

Data sources never mutate remote state and never track lifecycle; a missing
object is reported as an error diagnostic rather than an empty result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

import structlog

from flystate.client.api import FlyAPI
from flystate.errors import FlyStateError, RemoteNotFound
from flystate.models.diagnostics import Diagnostics
from flystate.models.remote import CertificateInfo, FullAppInfo, IPAddressInfo, VolumeInfo
from flystate.resources.base import diagnostics_from_error

_log = structlog.get_logger(component="datasources")

D = TypeVar("D")


@dataclass
class DataSourceResult(Generic[D]):
    data: D | None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


def _failure(kind: str, exc: FlyStateError, what: str) -> DataSourceResult[D]:
    if isinstance(exc, RemoteNotFound):
        diags = Diagnostics()
        diags.add_error(f"{kind} not found", f"No {kind} matches {what}")
    else:
        diags = diagnostics_from_error(exc, f"Query for {kind} failed")
    _log.warning("datasource_read_failed", kind=kind, target=what)
    return DataSourceResult(data=None, diagnostics=diags)


async def read_app(api: FlyAPI, name: str) -> DataSourceResult[FullAppInfo]:
    try:
        return DataSourceResult(await api.get_full_app(name))
    except FlyStateError as exc:
        return _failure("app", exc, name)


async def read_certificate(api: FlyAPI, app: str, hostname: str) -> DataSourceResult[CertificateInfo]:
    try:
        return DataSourceResult(await api.get_certificate(app, hostname))
    except FlyStateError as exc:
        return _failure("cert", exc, f"{app}/{hostname}")


async def read_ip_address(api: FlyAPI, app: str, address: str) -> DataSourceResult[IPAddressInfo]:
    try:
        return DataSourceResult(await api.get_ip_address(app, address))
    except FlyStateError as exc:
        return _failure("ip address", exc, f"{app}/{address}")


async def read_volume(api: FlyAPI, app: str, internal_id: str) -> DataSourceResult[VolumeInfo]:
    try:
        return DataSourceResult(await api.get_volume(app, internal_id))
    except FlyStateError as exc:
        return _failure("volume", exc, f"{app}/{internal_id}")
