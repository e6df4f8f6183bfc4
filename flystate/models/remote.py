"""Payloads returned by the Fly GraphQL API, decoded into frozen records."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RemoteSecret:
    """A secret as listed by the remote store. Never carries plaintext."""

    id: str
    name: str
    digest: str
    created_at: str  # RFC 3339 UTC


@dataclass(frozen=True)
class OrgInfo:
    id: str
    slug: str
    name: str = ""


@dataclass(frozen=True)
class AppInfo:
    id: str
    name: str
    app_url: str
    org_id: str
    org_slug: str
    secrets: tuple[RemoteSecret, ...] = ()


@dataclass(frozen=True)
class FullAppInfo:
    """Extended app view used by the app data source."""

    id: str
    name: str
    app_url: str
    hostname: str
    status: str
    deployed: bool
    current_release: str
    health_checks: list[str] = field(default_factory=list)
    ip_addresses: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CertificateInfo:
    id: str
    hostname: str
    dns_validation_instructions: str
    dns_validation_hostname: str
    dns_validation_target: str
    check: bool


@dataclass(frozen=True)
class VolumeInfo:
    id: str
    name: str
    size_gb: int
    region: str
    internal_id: str


@dataclass(frozen=True)
class IPAddressInfo:
    id: str
    address: str
    type: str
    region: str
