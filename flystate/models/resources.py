"""Declared configuration, tracked state and planned state for each resource type.

Config objects are what the caller declares; State objects are what the
engine tracks between operations; Planned objects are the output of plan().
All are immutable: operations return new instances instead of mutating.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flystate.models.secrets import PlannedSecret, SecretDiff, SecretEntry
from flystate.models.values import Value

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AppConfig:
    """Declared app. ``org`` is optional and resolved to the default org on create."""

    name: str
    org: str | None = None
    secrets: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class AppState:
    """Tracked app state. Only secrets declared by the caller appear here."""

    name: str
    org: str
    org_id: str
    app_url: str
    id: str
    secrets: dict[str, SecretEntry] = field(default_factory=dict)


@dataclass(frozen=True)
class PlannedApp:
    name: str
    org: Value
    org_id: Value
    app_url: Value
    id: Value
    secrets: dict[str, PlannedSecret] = field(default_factory=dict)
    changes: SecretDiff = field(default_factory=SecretDiff)


# ---------------------------------------------------------------------------
# Standalone secret
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AppSecretConfig:
    app_id: str
    name: str
    value: str


@dataclass(frozen=True)
class AppSecretState:
    app_id: str
    name: str
    value: Value
    id: str
    digest: str
    created_at: str


@dataclass(frozen=True)
class PlannedAppSecret:
    app_id: str
    name: str
    value: Value
    id: Value
    digest: Value
    created_at: Value


# ---------------------------------------------------------------------------
# Attached sub-resources (immutable once created)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CertificateConfig:
    app: str
    hostname: str


@dataclass(frozen=True)
class CertificateState:
    app: str
    hostname: str
    id: str
    dns_validation_instructions: str = ""
    dns_validation_hostname: str = ""
    dns_validation_target: str = ""
    check: bool = False


@dataclass(frozen=True)
class VolumeConfig:
    app: str
    name: str
    region: str
    size_gb: int


@dataclass(frozen=True)
class VolumeState:
    app: str
    name: str
    region: str
    size_gb: int
    id: str
    internal_id: str


@dataclass(frozen=True)
class IPAddressConfig:
    app: str
    type: str  # "v4" or "v6"
    region: str = "global"


@dataclass(frozen=True)
class IPAddressState:
    app: str
    type: str
    region: str
    id: str
    address: str
