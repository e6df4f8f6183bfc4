"""Conversion between JSON payloads and the engine's frozen dataclasses.

Payloads are validated with pydantic models; the engine itself never sees
pydantic types. Unresolved values travel as JSON ``null`` and Known values as
their raw string, in both directions.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any, Literal

from pydantic import BaseModel, Field

from flystate.models.diagnostics import Diagnostics
from flystate.models.resources import (
    AppConfig,
    AppSecretConfig,
    AppSecretState,
    AppState,
    CertificateConfig,
    CertificateState,
    IPAddressConfig,
    IPAddressState,
    PlannedApp,
    PlannedAppSecret,
    VolumeConfig,
    VolumeState,
)
from flystate.models.secrets import SecretDiff, SecretEntry
from flystate.models.values import decode_value, encode_value

# ---------------------------------------------------------------------------
# Payload models
# ---------------------------------------------------------------------------


class _AppConfigPayload(BaseModel):
    name: str = Field(min_length=1)
    org: str | None = None
    secrets: dict[str, str] = Field(default_factory=dict)


class _SecretEntryPayload(BaseModel):
    value: str | None = None
    digest: str
    created_at: str


class _AppStatePayload(BaseModel):
    name: str = Field(min_length=1)
    org: str
    org_id: str
    app_url: str = ""
    id: str
    secrets: dict[str, _SecretEntryPayload] = Field(default_factory=dict)


class _AppSecretConfigPayload(BaseModel):
    app_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    value: str


class _AppSecretStatePayload(BaseModel):
    app_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    value: str | None = None
    id: str = ""
    digest: str = ""
    created_at: str = ""


class _CertificateConfigPayload(BaseModel):
    app: str = Field(min_length=1)
    hostname: str = Field(min_length=1)


class _CertificateStatePayload(_CertificateConfigPayload):
    id: str
    dns_validation_instructions: str = ""
    dns_validation_hostname: str = ""
    dns_validation_target: str = ""
    check: bool = False


class _VolumeConfigPayload(BaseModel):
    app: str = Field(min_length=1)
    name: str = Field(min_length=1)
    region: str = Field(min_length=1)
    size_gb: int = Field(gt=0)


class _VolumeStatePayload(_VolumeConfigPayload):
    id: str
    internal_id: str


class _IPAddressConfigPayload(BaseModel):
    app: str = Field(min_length=1)
    type: Literal["v4", "v6"]
    region: str = "global"


class _IPAddressStatePayload(_IPAddressConfigPayload):
    id: str
    address: str


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


def _app_config(payload: dict[str, Any]) -> AppConfig:
    p = _AppConfigPayload.model_validate(payload)
    return AppConfig(name=p.name, org=p.org, secrets=dict(p.secrets))


def _app_state(payload: dict[str, Any]) -> AppState:
    p = _AppStatePayload.model_validate(payload)
    secrets = {
        name: SecretEntry(
            name=name,
            value=decode_value(entry.value),
            digest=entry.digest,
            created_at=entry.created_at,
        )
        for name, entry in p.secrets.items()
    }
    return AppState(name=p.name, org=p.org, org_id=p.org_id, app_url=p.app_url, id=p.id, secrets=secrets)


def _encode_app_state(state: AppState) -> dict[str, Any]:
    return {
        "name": state.name,
        "org": state.org,
        "org_id": state.org_id,
        "app_url": state.app_url,
        "id": state.id,
        "secrets": {
            name: {
                "value": encode_value(entry.value),
                "digest": entry.digest,
                "created_at": entry.created_at,
            }
            for name, entry in sorted(state.secrets.items())
        },
    }


def _encode_diff(changes: SecretDiff) -> dict[str, list[str]]:
    return {
        "to_add": sorted(changes.to_add),
        "to_remove": sorted(changes.to_remove),
        "to_change": sorted(changes.to_change),
    }


def _encode_planned_app(planned: PlannedApp) -> dict[str, Any]:
    return {
        "name": planned.name,
        "org": encode_value(planned.org),
        "org_id": encode_value(planned.org_id),
        "app_url": encode_value(planned.app_url),
        "id": encode_value(planned.id),
        "secrets": {
            name: {
                "value": encode_value(secret.value),
                "digest": encode_value(secret.digest),
                "created_at": encode_value(secret.created_at),
            }
            for name, secret in sorted(planned.secrets.items())
        },
        "changes": _encode_diff(planned.changes),
    }


# ---------------------------------------------------------------------------
# Standalone secret
# ---------------------------------------------------------------------------


def _app_secret_config(payload: dict[str, Any]) -> AppSecretConfig:
    p = _AppSecretConfigPayload.model_validate(payload)
    return AppSecretConfig(app_id=p.app_id, name=p.name, value=p.value)


def _app_secret_state(payload: dict[str, Any]) -> AppSecretState:
    p = _AppSecretStatePayload.model_validate(payload)
    return AppSecretState(
        app_id=p.app_id,
        name=p.name,
        value=decode_value(p.value),
        id=p.id,
        digest=p.digest,
        created_at=p.created_at,
    )


def _encode_app_secret_state(state: AppSecretState) -> dict[str, Any]:
    return {
        "app_id": state.app_id,
        "name": state.name,
        "value": encode_value(state.value),
        "id": state.id,
        "digest": state.digest,
        "created_at": state.created_at,
    }


def _encode_planned_app_secret(planned: PlannedAppSecret) -> dict[str, Any]:
    return {
        "app_id": planned.app_id,
        "name": planned.name,
        "value": encode_value(planned.value),
        "id": encode_value(planned.id),
        "digest": encode_value(planned.digest),
        "created_at": encode_value(planned.created_at),
    }


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def _flat(model: type[BaseModel], target: type[Any]) -> Callable[[dict[str, Any]], Any]:
    """Decoder for sub-resources whose payload fields map 1:1 onto the dataclass."""

    def decode(payload: dict[str, Any]) -> Any:
        return target(**model.model_validate(payload).model_dump())

    return decode


@dataclass(frozen=True)
class ResourceCodec:
    decode_config: Callable[[dict[str, Any]], Any]
    decode_state: Callable[[dict[str, Any]], Any]
    encode_state: Callable[[Any], dict[str, Any]]
    encode_plan: Callable[[Any], dict[str, Any]] | None = None


CODECS: dict[str, ResourceCodec] = {
    "app": ResourceCodec(_app_config, _app_state, _encode_app_state, _encode_planned_app),
    "app_secret": ResourceCodec(
        _app_secret_config, _app_secret_state, _encode_app_secret_state, _encode_planned_app_secret
    ),
    "certificate": ResourceCodec(
        _flat(_CertificateConfigPayload, CertificateConfig),
        _flat(_CertificateStatePayload, CertificateState),
        asdict,
    ),
    "volume": ResourceCodec(
        _flat(_VolumeConfigPayload, VolumeConfig),
        _flat(_VolumeStatePayload, VolumeState),
        asdict,
    ),
    "ip_address": ResourceCodec(
        _flat(_IPAddressConfigPayload, IPAddressConfig),
        _flat(_IPAddressStatePayload, IPAddressState),
        asdict,
    ),
}


def encode_diagnostics(diagnostics: Diagnostics) -> list[dict[str, str]]:
    return [{"severity": d.severity.value, "summary": d.summary, "detail": d.detail} for d in diagnostics]
