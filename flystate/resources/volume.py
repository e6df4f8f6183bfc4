"""Lifecycle controller for the ``volume`` resource. Volumes cannot be updated."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from flystate.client.api import FlyAPI
from flystate.errors import FlyStateError, RemoteNotFound, ValidationError
from flystate.models.remote import VolumeInfo
from flystate.models.resources import VolumeConfig, VolumeState
from flystate.resources.base import (
    Lifecycle,
    LifecycleState,
    OperationResult,
    parse_import_id,
    reject_update,
)


def _state(app: str, info: VolumeInfo) -> VolumeState:
    return VolumeState(
        app=app,
        name=info.name,
        region=info.region,
        size_gb=info.size_gb,
        id=info.id,
        internal_id=info.internal_id,
    )


@dataclass(frozen=True)
class VolumeResource:
    api: FlyAPI
    type_name: ClassVar[str] = "volume"

    async def create(self, config: VolumeConfig) -> OperationResult[VolumeState]:
        lc = Lifecycle(self.type_name, "create", LifecycleState.ABSENT)
        if config.size_gb <= 0:
            return lc.fail(
                None, ValidationError("Invalid volume size", f"size_gb must be positive, got {config.size_gb}")
            )
        try:
            info = await self.api.create_volume(config.app, config.name, config.region, config.size_gb)
        except FlyStateError as exc:
            return lc.fail(None, exc, summary="Failed to create volume")
        lc.advance(LifecycleState.CREATED)
        return lc.result(_state(config.app, info))

    async def read(self, state: VolumeState) -> OperationResult[VolumeState]:
        lc = Lifecycle(self.type_name, "read", LifecycleState.CREATED)
        lc.advance(LifecycleState.REFRESHING)
        try:
            info = await self.api.get_volume(state.app, state.internal_id)
        except RemoteNotFound:
            lc.advance(LifecycleState.ABSENT)
            return lc.result(None)
        except FlyStateError as exc:
            return lc.fail(state, exc, summary="Read: query failed")
        lc.advance(LifecycleState.CREATED)
        return lc.result(_state(state.app, info))

    async def update(self, state: VolumeState, config: VolumeConfig) -> OperationResult[VolumeState]:
        lc = Lifecycle(self.type_name, "update", LifecycleState.CREATED)
        declared = (config.app, config.name, config.region, config.size_gb)
        if declared == (state.app, state.name, state.region, state.size_gb):
            return lc.result(state)
        return lc.fail(state, reject_update("volume"))

    async def delete(self, state: VolumeState) -> OperationResult[VolumeState]:
        lc = Lifecycle(self.type_name, "delete", LifecycleState.CREATED)
        lc.advance(LifecycleState.DELETED)
        if state.id:
            try:
                await self.api.delete_volume(state.id)
            except RemoteNotFound:
                pass
            except FlyStateError as exc:
                return lc.fail(state, exc, summary="Delete volume failed")
        return lc.result(None)

    async def import_state(self, identifier: str) -> OperationResult[VolumeState]:
        lc = Lifecycle(self.type_name, "import", LifecycleState.ABSENT)
        try:
            app, internal_id = parse_import_id(identifier, ("app_id", "internal_id"))
        except ValidationError as exc:
            return lc.fail(None, exc)
        lc.advance(LifecycleState.REFRESHING)
        try:
            info = await self.api.get_volume(app, internal_id)
        except FlyStateError as exc:
            return lc.fail(None, exc, summary="Import: query failed")
        lc.advance(LifecycleState.CREATED)
        return lc.result(_state(app, info))
