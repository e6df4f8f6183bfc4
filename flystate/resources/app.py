"""Lifecycle controller for the ``app`` resource and its managed secrets.

Create/Read/Update/Delete/Import compose the differ, drift detector, freeze
modifier and secret reconciler around the remote API:

    create  absent -> created      create app, then one set batch
    read    created -> refreshing  fetch app snapshot, fold secret drift
    update  * -> updating          diff, unset batch, then set batch
    delete  * -> deleted           delete app; secrets go with it
    import  absent -> refreshing   bind name, then read
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar

import structlog

from flystate.client.api import FlyAPI
from flystate.errors import FlyStateError, RemoteNotFound, ValidationError
from flystate.models.diagnostics import Diagnostics
from flystate.models.remote import AppInfo, OrgInfo
from flystate.models.resources import AppConfig, AppState, PlannedApp
from flystate.models.secrets import PlannedSecret
from flystate.models.values import UNRESOLVED, Known, Value
from flystate.reconcile.differ import diff
from flystate.reconcile.drift import refresh
from flystate.reconcile.freeze import freeze
from flystate.reconcile.secrets import SecretReconciler
from flystate.resources.base import Lifecycle, LifecycleState, OperationResult

_log = structlog.get_logger(component="resources.app")


def _immutable_violations(state: AppState, config: AppConfig) -> list[ValidationError]:
    violations: list[ValidationError] = []
    if config.org is not None and config.org != state.org:
        violations.append(
            ValidationError(
                "Can't mutate org of existing app",
                f"Can't switch org {state.org} to {config.org}",
            )
        )
    if config.name != state.name:
        violations.append(
            ValidationError(
                "Can't mutate name of existing app",
                f"Can't switch name {state.name} to {config.name}",
            )
        )
    return violations


def _known_or_unresolved(state: AppState | None, attr: str) -> Value:
    if state is None:
        return UNRESOLVED
    return Known(getattr(state, attr))


@dataclass(frozen=True)
class AppResource:
    """The ``app`` resource. Holds only the shared, read-only API handle."""

    api: FlyAPI
    type_name: ClassVar[str] = "app"

    async def create(self, config: AppConfig) -> OperationResult[AppState]:
        lc = Lifecycle(self.type_name, "create", LifecycleState.ABSENT)
        if not config.name:
            return lc.fail(None, ValidationError("Missing required attribute", "name"))

        try:
            org = await self._resolve_org(config.org)
            info = await self.api.create_app(config.name, org.id)
        except FlyStateError as exc:
            return lc.fail(None, exc, summary="Create app failed")

        lc.advance(LifecycleState.CREATED)
        state = AppState(
            name=info.name or config.name,
            org=info.org_slug or org.slug,
            org_id=info.org_id or org.id,
            app_url=info.app_url,
            id=info.id,
        )
        _log.info("app_created", app=state.name, org=state.org)

        diags = Diagnostics()
        if config.secrets:
            try:
                outcome = await SecretReconciler(self.api).apply_set(state.name, config.secrets)
            except FlyStateError as exc:
                # The app exists remotely: keep tracking it so the next apply converges.
                return lc.fail(state, exc, summary="SetSecrets errored")
            diags.extend(outcome.warnings)
            state = replace(state, secrets=outcome.entries)
        return lc.result(state, diags)

    async def read(self, state: AppState) -> OperationResult[AppState]:
        lc = Lifecycle(self.type_name, "read", LifecycleState.CREATED)
        lc.advance(LifecycleState.REFRESHING)
        try:
            info = await self.api.get_app(state.name)
        except RemoteNotFound:
            _log.info("app_missing_remotely", app=state.name)
            lc.advance(LifecycleState.ABSENT)
            return lc.result(None)
        except FlyStateError as exc:
            return lc.fail(state, exc, summary="Read: query failed")
        lc.advance(LifecycleState.CREATED)
        return lc.result(self._from_snapshot(state, info))

    async def update(self, state: AppState, config: AppConfig) -> OperationResult[AppState]:
        lc = Lifecycle(self.type_name, "update", LifecycleState.CREATED)
        violations = _immutable_violations(state, config)
        if violations:
            return lc.fail(state, *violations)

        lc.advance(LifecycleState.UPDATING)
        changes = diff(config.secrets, state.secrets)
        if changes.is_empty:
            return lc.result(state)

        reconciler = SecretReconciler(self.api)
        secrets = dict(state.secrets)
        diags = Diagnostics()
        # Removals go first so rename-like changes never collide transiently.
        try:
            await reconciler.apply_unset(state.name, changes.to_remove)
        except FlyStateError as exc:
            return lc.fail(state, exc, summary="UnsetSecrets failed")
        for name in changes.to_remove:
            del secrets[name]

        try:
            outcome = await reconciler.apply_set(
                state.name, {name: config.secrets[name] for name in changes.to_set}
            )
        except FlyStateError as exc:
            # Confirmed removals stay applied; the next pass converges.
            return lc.fail(replace(state, secrets=secrets), exc, summary="SetSecrets errored")
        diags.extend(outcome.warnings)
        secrets.update(outcome.entries)
        _log.info(
            "app_secrets_reconciled",
            app=state.name,
            added=sorted(changes.to_add),
            changed=sorted(changes.to_change),
            removed=sorted(changes.to_remove),
        )
        return lc.result(replace(state, secrets=secrets), diags)

    async def delete(self, state: AppState) -> OperationResult[AppState]:
        lc = Lifecycle(self.type_name, "delete", LifecycleState.CREATED)
        lc.advance(LifecycleState.DELETED)
        try:
            await self.api.delete_app(state.name)
        except RemoteNotFound:
            _log.info("app_already_deleted", app=state.name)
        except FlyStateError as exc:
            return lc.fail(state, exc, summary="Delete app failed")
        return lc.result(None)

    async def import_state(self, identifier: str) -> OperationResult[AppState]:
        lc = Lifecycle(self.type_name, "import", LifecycleState.ABSENT)
        if not identifier:
            return lc.fail(None, ValidationError("Unexpected Import Identifier", "app name must not be empty"))
        lc.advance(LifecycleState.REFRESHING)
        try:
            info = await self.api.get_app(identifier)
        except RemoteNotFound:
            return lc.fail(
                None,
                ValidationError("Cannot import non-existent remote object", f"app {identifier!r} not found"),
            )
        except FlyStateError as exc:
            return lc.fail(None, exc, summary="Import: query failed")
        lc.advance(LifecycleState.CREATED)
        stub = AppState(name=identifier, org="", org_id="", app_url="", id="")
        return lc.result(self._from_snapshot(stub, info))

    async def plan(self, state: AppState | None, config: AppConfig) -> OperationResult[PlannedApp]:
        """Planned state for *config*; computed secret attributes are frozen when possible."""
        lc = Lifecycle(self.type_name, "plan", LifecycleState.ABSENT if state is None else LifecycleState.CREATED)
        diags = Diagnostics()
        if state is not None:
            for violation in _immutable_violations(state, config):
                diags.add_error(violation.summary, violation.detail)

        prior_secrets = state.secrets if state is not None else {}
        planned_secrets: dict[str, PlannedSecret] = {}
        for name, value in config.secrets.items():
            prior = prior_secrets.get(name)
            correlated_prior = prior.value if prior is not None else None
            correlated_planned = Known(value)
            planned_secrets[name] = PlannedSecret(
                name=name,
                value=correlated_planned,
                digest=freeze(
                    Known(prior.digest) if prior is not None else None,
                    UNRESOLVED,
                    correlated_prior,
                    correlated_planned,
                ),
                created_at=freeze(
                    Known(prior.created_at) if prior is not None else None,
                    UNRESOLVED,
                    correlated_prior,
                    correlated_planned,
                ),
            )

        if config.org is not None:
            org: Value = Known(config.org)
        else:
            org = _known_or_unresolved(state, "org")
        planned = PlannedApp(
            name=config.name,
            org=org,
            org_id=_known_or_unresolved(state, "org_id"),
            app_url=_known_or_unresolved(state, "app_url"),
            id=_known_or_unresolved(state, "id"),
            secrets=planned_secrets,
            changes=diff(config.secrets, prior_secrets),
        )
        return lc.result(planned, diags)

    async def _resolve_org(self, slug: str | None) -> OrgInfo:
        if slug is None:
            return await self.api.default_org()
        return await self.api.resolve_org(slug)

    @staticmethod
    def _from_snapshot(state: AppState, info: AppInfo) -> AppState:
        return AppState(
            name=info.name or state.name,
            org=info.org_slug,
            org_id=info.org_id,
            app_url=info.app_url,
            id=info.id,
            secrets=refresh(state.secrets, info.secrets),
        )
