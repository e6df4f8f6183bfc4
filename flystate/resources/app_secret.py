"""Lifecycle controller for the standalone ``app_secret`` resource.

Manages exactly one secret entry of an app. The computed ``id``, ``digest``
and ``created_at`` attributes are frozen at plan time while the declared
value is unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import structlog

from flystate.client.api import FlyAPI
from flystate.errors import FlyStateError, RemoteNotFound, ValidationError
from flystate.models.diagnostics import Diagnostics
from flystate.models.remote import RemoteSecret
from flystate.models.resources import AppSecretConfig, AppSecretState, PlannedAppSecret
from flystate.models.secrets import SecretEntry
from flystate.models.values import UNRESOLVED, Known, Value
from flystate.reconcile.drift import refresh
from flystate.reconcile.freeze import freeze
from flystate.reconcile.secrets import SecretReconciler
from flystate.resources.base import Lifecycle, LifecycleState, OperationResult, parse_import_id

_log = structlog.get_logger(component="resources.app_secret")


@dataclass(frozen=True)
class AppSecretResource:
    api: FlyAPI
    type_name: ClassVar[str] = "app_secret"

    async def create(self, config: AppSecretConfig) -> OperationResult[AppSecretState]:
        lc = Lifecycle(self.type_name, "create", LifecycleState.ABSENT)
        return await self._set(lc, config)

    async def read(self, state: AppSecretState) -> OperationResult[AppSecretState]:
        lc = Lifecycle(self.type_name, "read", LifecycleState.CREATED)
        lc.advance(LifecycleState.REFRESHING)
        try:
            snapshot = await self.api.get_secrets(state.app_id)
        except RemoteNotFound:
            # The app is gone, and its secrets with it.
            lc.advance(LifecycleState.ABSENT)
            return lc.result(None)
        except FlyStateError as exc:
            return lc.fail(state, exc, summary="Refreshing failed")

        refreshed = self._refresh(state, snapshot)
        if refreshed is None:
            lc.advance(LifecycleState.ABSENT)
        else:
            lc.advance(LifecycleState.CREATED)
        return lc.result(refreshed)

    async def update(
        self, state: AppSecretState, config: AppSecretConfig
    ) -> OperationResult[AppSecretState]:
        lc = Lifecycle(self.type_name, "update", LifecycleState.CREATED)
        violations = []
        if config.app_id != state.app_id:
            violations.append(
                ValidationError("Can't mutate app_id of existing secret", f"{state.app_id} -> {config.app_id}")
            )
        if config.name != state.name:
            violations.append(
                ValidationError("Can't mutate name of existing secret", f"{state.name} -> {config.name}")
            )
        if violations:
            return lc.fail(state, *violations)
        if state.value == Known(config.value):
            return lc.result(state)
        return await self._set(lc, config, prior=state)

    async def delete(self, state: AppSecretState) -> OperationResult[AppSecretState]:
        lc = Lifecycle(self.type_name, "delete", LifecycleState.CREATED)
        lc.advance(LifecycleState.DELETED)
        try:
            await SecretReconciler(self.api).apply_unset(state.app_id, [state.name])
        except RemoteNotFound:
            _log.info("secret_already_gone", app=state.app_id, secret=state.name)
        except FlyStateError as exc:
            return lc.fail(state, exc, summary="Delete secret failed")
        return lc.result(None)

    async def import_state(self, identifier: str) -> OperationResult[AppSecretState]:
        lc = Lifecycle(self.type_name, "import", LifecycleState.ABSENT)
        try:
            app_id, name = parse_import_id(identifier, ("app_id", "name"))
        except ValidationError as exc:
            return lc.fail(None, exc)
        lc.advance(LifecycleState.REFRESHING)
        try:
            snapshot = await self.api.get_secrets(app_id)
        except FlyStateError as exc:
            return lc.fail(None, exc, summary="Import: query failed")

        stub = AppSecretState(app_id=app_id, name=name, value=UNRESOLVED, id="", digest="", created_at="")
        imported = self._refresh(stub, snapshot)
        if imported is None:
            return lc.fail(
                None,
                ValidationError("Cannot import non-existent remote object", f"secret {name!r} not found in {app_id!r}"),
            )
        lc.advance(LifecycleState.CREATED)
        return lc.result(imported)

    async def plan(
        self, state: AppSecretState | None, config: AppSecretConfig
    ) -> OperationResult[PlannedAppSecret]:
        lc = Lifecycle(self.type_name, "plan", LifecycleState.ABSENT if state is None else LifecycleState.CREATED)
        planned_value = Known(config.value)
        prior_value = state.value if state is not None else None

        def _computed(attr: str) -> Value:
            prior = Known(getattr(state, attr)) if state is not None else None
            return freeze(prior, UNRESOLVED, prior_value, planned_value)

        planned = PlannedAppSecret(
            app_id=config.app_id,
            name=config.name,
            value=planned_value,
            id=_computed("id"),
            digest=_computed("digest"),
            created_at=_computed("created_at"),
        )
        return lc.result(planned)

    async def _set(
        self,
        lc: Lifecycle,
        config: AppSecretConfig,
        prior: AppSecretState | None = None,
    ) -> OperationResult[AppSecretState]:
        if not config.app_id or not config.name:
            return lc.fail(prior, ValidationError("Missing required attribute", "app_id and name are required"))
        lc.advance(LifecycleState.UPDATING if prior is not None else LifecycleState.CREATED)
        try:
            outcome = await SecretReconciler(self.api).apply_set(config.app_id, {config.name: config.value})
        except FlyStateError as exc:
            return lc.fail(prior, exc, summary="SetSecrets failed")

        entry = outcome.entries[config.name]
        state = AppSecretState(
            app_id=config.app_id,
            name=config.name,
            value=entry.value,
            id=outcome.secret_ids.get(config.name, ""),
            digest=entry.digest,
            created_at=entry.created_at,
        )
        diags = Diagnostics()
        diags.extend(outcome.warnings)
        return lc.result(state, diags)

    @staticmethod
    def _refresh(state: AppSecretState, snapshot: tuple[RemoteSecret, ...]) -> AppSecretState | None:
        entry = SecretEntry(name=state.name, value=state.value, digest=state.digest, created_at=state.created_at)
        refreshed = refresh({state.name: entry}, snapshot).get(state.name)
        if refreshed is None:
            return None
        remote_id = next((s.id for s in snapshot if s.name == state.name), state.id)
        value = refreshed.value if remote_id == state.id else UNRESOLVED
        return AppSecretState(
            app_id=state.app_id,
            name=state.name,
            value=value,
            id=remote_id,
            digest=refreshed.digest,
            created_at=refreshed.created_at,
        )
