"""Lifecycle controller for the ``certificate`` resource. Certificates cannot be updated."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from flystate.client.api import FlyAPI
from flystate.errors import FlyStateError, RemoteNotFound, ValidationError
from flystate.models.remote import CertificateInfo
from flystate.models.resources import CertificateConfig, CertificateState
from flystate.resources.base import (
    Lifecycle,
    LifecycleState,
    OperationResult,
    parse_import_id,
    reject_update,
)


def _state(app: str, info: CertificateInfo) -> CertificateState:
    return CertificateState(
        app=app,
        hostname=info.hostname,
        id=info.id,
        dns_validation_instructions=info.dns_validation_instructions,
        dns_validation_hostname=info.dns_validation_hostname,
        dns_validation_target=info.dns_validation_target,
        check=info.check,
    )


@dataclass(frozen=True)
class CertificateResource:
    api: FlyAPI
    type_name: ClassVar[str] = "certificate"

    async def create(self, config: CertificateConfig) -> OperationResult[CertificateState]:
        lc = Lifecycle(self.type_name, "create", LifecycleState.ABSENT)
        try:
            info = await self.api.add_certificate(config.app, config.hostname)
        except FlyStateError as exc:
            return lc.fail(None, exc, summary="Failed to create cert")
        lc.advance(LifecycleState.CREATED)
        return lc.result(_state(config.app, info))

    async def read(self, state: CertificateState) -> OperationResult[CertificateState]:
        lc = Lifecycle(self.type_name, "read", LifecycleState.CREATED)
        lc.advance(LifecycleState.REFRESHING)
        try:
            info = await self.api.get_certificate(state.app, state.hostname)
        except RemoteNotFound:
            lc.advance(LifecycleState.ABSENT)
            return lc.result(None)
        except FlyStateError as exc:
            return lc.fail(state, exc, summary="Read: query failed")
        lc.advance(LifecycleState.CREATED)
        return lc.result(_state(state.app, info))

    async def update(
        self, state: CertificateState, config: CertificateConfig
    ) -> OperationResult[CertificateState]:
        lc = Lifecycle(self.type_name, "update", LifecycleState.CREATED)
        if (config.app, config.hostname) == (state.app, state.hostname):
            return lc.result(state)
        return lc.fail(state, reject_update("cert"))

    async def delete(self, state: CertificateState) -> OperationResult[CertificateState]:
        lc = Lifecycle(self.type_name, "delete", LifecycleState.CREATED)
        lc.advance(LifecycleState.DELETED)
        try:
            await self.api.delete_certificate(state.app, state.hostname)
        except RemoteNotFound:
            pass
        except FlyStateError as exc:
            return lc.fail(state, exc, summary="Delete cert failed")
        return lc.result(None)

    async def import_state(self, identifier: str) -> OperationResult[CertificateState]:
        lc = Lifecycle(self.type_name, "import", LifecycleState.ABSENT)
        try:
            app, hostname = parse_import_id(identifier, ("app_id", "hostname"))
        except ValidationError as exc:
            return lc.fail(None, exc)
        lc.advance(LifecycleState.REFRESHING)
        try:
            info = await self.api.get_certificate(app, hostname)
        except FlyStateError as exc:
            return lc.fail(None, exc, summary="Import: query failed")
        lc.advance(LifecycleState.CREATED)
        return lc.result(_state(app, info))
