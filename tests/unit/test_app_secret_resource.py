"""Lifecycle tests for the standalone app_secret resource."""

from __future__ import annotations

from flystate.models.resources import AppSecretConfig
from flystate.models.values import UNRESOLVED, Known
from flystate.reconcile.secrets import NO_OP_SUMMARY
from flystate.resources import AppSecretResource, LifecycleState

from ..conftest import FakeFlyAPI


def _config(value: str = "s3cret", name: str = "DATABASE_URL") -> AppSecretConfig:
    return AppSecretConfig(app_id="web", name=name, value=value)


class TestAppSecretLifecycle:
    async def test_create_sets_single_entry(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web")
        result = await AppSecretResource(fake_api).create(_config())

        assert result.ok
        assert fake_api.mutation_calls() == ["set_secrets"]
        stored = fake_api.apps["web"].secrets["DATABASE_URL"]
        assert result.state.value == Known("s3cret")
        assert result.state.id == stored.id
        assert result.state.digest == stored.digest

    async def test_update_with_same_value_makes_no_call(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web")
        state = (await AppSecretResource(fake_api).create(_config())).state
        fake_api.reset_calls()
        result = await AppSecretResource(fake_api).update(state, _config())
        assert fake_api.calls == []
        assert result.state == state

    async def test_update_new_value(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web")
        state = (await AppSecretResource(fake_api).create(_config())).state
        result = await AppSecretResource(fake_api).update(state, _config("rotated"))
        assert result.state.value == Known("rotated")
        assert result.state.digest != state.digest
        assert result.state.id == state.id
        assert result.lifecycle == LifecycleState.CREATED

    async def test_rename_is_rejected(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web")
        state = (await AppSecretResource(fake_api).create(_config())).state
        fake_api.reset_calls()
        result = await AppSecretResource(fake_api).update(state, _config(name="OTHER"))
        assert not result.ok
        assert fake_api.calls == []

    async def test_no_op_warns(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web", secrets={"DATABASE_URL": "s3cret"})
        fake_api.detect_no_op = True
        result = await AppSecretResource(fake_api).create(_config())
        assert result.ok
        assert result.diagnostics.warnings[0].summary == NO_OP_SUMMARY
        assert result.state.digest == fake_api.apps["web"].secrets["DATABASE_URL"].digest

    async def test_read_detects_drift(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web")
        state = (await AppSecretResource(fake_api).create(_config())).state
        fake_api.tamper("web", "DATABASE_URL", "other")
        result = await AppSecretResource(fake_api).read(state)
        assert result.state.value is UNRESOLVED

    async def test_read_missing_entry_removes_resource(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web")
        state = (await AppSecretResource(fake_api).create(_config())).state
        fake_api.remove_out_of_band("web", "DATABASE_URL")
        result = await AppSecretResource(fake_api).read(state)
        assert result.removed
        assert result.ok

    async def test_read_missing_app_removes_resource(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web")
        state = (await AppSecretResource(fake_api).create(_config())).state
        del fake_api.apps["web"]
        result = await AppSecretResource(fake_api).read(state)
        assert result.removed

    async def test_delete_unsets_only_its_entry(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web", secrets={"OTHER": "x"})
        state = (await AppSecretResource(fake_api).create(_config())).state
        fake_api.reset_calls()
        result = await AppSecretResource(fake_api).delete(state)
        assert result.removed
        assert fake_api.calls == [("unset_secrets", ("web", ["DATABASE_URL"]))]
        assert fake_api.stored_value("web", "OTHER") == "x"

    async def test_import_by_app_and_name(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web", secrets={"DATABASE_URL": "s3cret"})
        result = await AppSecretResource(fake_api).import_state("web,DATABASE_URL")
        assert result.ok
        assert result.state.value is UNRESOLVED
        assert result.state.digest == fake_api.apps["web"].secrets["DATABASE_URL"].digest

    async def test_import_malformed_identifier(self, fake_api: FakeFlyAPI) -> None:
        result = await AppSecretResource(fake_api).import_state("web")
        assert result.diagnostics.errors[0].summary == "Unexpected Import Identifier"
        assert fake_api.calls == []

    async def test_import_unknown_secret(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web")
        result = await AppSecretResource(fake_api).import_state("web,NOPE")
        assert result.diagnostics.errors[0].summary == "Cannot import non-existent remote object"


class TestAppSecretPlan:
    async def test_unchanged_value_freezes_id_digest_and_timestamp(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web")
        state = (await AppSecretResource(fake_api).create(_config())).state
        result = await AppSecretResource(fake_api).plan(state, _config())
        assert result.state.id == Known(state.id)
        assert result.state.digest == Known(state.digest)
        assert result.state.created_at == Known(state.created_at)

    async def test_changed_value_leaves_computed_unresolved(self, fake_api: FakeFlyAPI) -> None:
        fake_api.seed_app("web")
        state = (await AppSecretResource(fake_api).create(_config())).state
        result = await AppSecretResource(fake_api).plan(state, _config("rotated"))
        assert result.state.digest is UNRESOLVED
        assert result.state.id is UNRESOLVED
