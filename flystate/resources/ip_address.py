"""Lifecycle controller for the ``ip_address`` resource. Addresses cannot be updated."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from flystate.client.api import FlyAPI
from flystate.errors import FlyStateError, RemoteNotFound, ValidationError
from flystate.models.remote import IPAddressInfo
from flystate.models.resources import IPAddressConfig, IPAddressState
from flystate.resources.base import (
    Lifecycle,
    LifecycleState,
    OperationResult,
    parse_import_id,
    reject_update,
)

ADDRESS_TYPES = frozenset({"v4", "v6"})


def _state(app: str, info: IPAddressInfo) -> IPAddressState:
    return IPAddressState(app=app, type=info.type, region=info.region, id=info.id, address=info.address)


@dataclass(frozen=True)
class IPAddressResource:
    api: FlyAPI
    type_name: ClassVar[str] = "ip_address"

    async def create(self, config: IPAddressConfig) -> OperationResult[IPAddressState]:
        lc = Lifecycle(self.type_name, "create", LifecycleState.ABSENT)
        if config.type not in ADDRESS_TYPES:
            return lc.fail(
                None, ValidationError("Invalid address type", f"type must be v4 or v6, got {config.type!r}")
            )
        try:
            info = await self.api.allocate_ip_address(config.app, config.region or "global", config.type)
        except FlyStateError as exc:
            return lc.fail(None, exc, summary="Failed to create ip addr")
        lc.advance(LifecycleState.CREATED)
        return lc.result(_state(config.app, info))

    async def read(self, state: IPAddressState) -> OperationResult[IPAddressState]:
        lc = Lifecycle(self.type_name, "read", LifecycleState.CREATED)
        lc.advance(LifecycleState.REFRESHING)
        try:
            info = await self.api.get_ip_address(state.app, state.address)
        except RemoteNotFound:
            lc.advance(LifecycleState.ABSENT)
            return lc.result(None)
        except FlyStateError as exc:
            return lc.fail(state, exc, summary="Read: query failed")
        lc.advance(LifecycleState.CREATED)
        return lc.result(_state(state.app, info))

    async def update(
        self, state: IPAddressState, config: IPAddressConfig
    ) -> OperationResult[IPAddressState]:
        lc = Lifecycle(self.type_name, "update", LifecycleState.CREATED)
        if (config.app, config.type, config.region) == (state.app, state.type, state.region):
            return lc.result(state)
        return lc.fail(state, reject_update("ip"))

    async def delete(self, state: IPAddressState) -> OperationResult[IPAddressState]:
        lc = Lifecycle(self.type_name, "delete", LifecycleState.CREATED)
        lc.advance(LifecycleState.DELETED)
        if state.id:
            try:
                await self.api.release_ip_address(state.id)
            except RemoteNotFound:
                pass
            except FlyStateError as exc:
                return lc.fail(state, exc, summary="Release ip failed")
        return lc.result(None)

    async def import_state(self, identifier: str) -> OperationResult[IPAddressState]:
        lc = Lifecycle(self.type_name, "import", LifecycleState.ABSENT)
        try:
            app, address = parse_import_id(identifier, ("app_id", "address"))
        except ValidationError as exc:
            return lc.fail(None, exc)
        lc.advance(LifecycleState.REFRESHING)
        try:
            info = await self.api.get_ip_address(app, address)
        except FlyStateError as exc:
            return lc.fail(None, exc, summary="Import: query failed")
        lc.advance(LifecycleState.CREATED)
        return lc.result(_state(app, info))
