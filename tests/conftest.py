"""Shared fixtures for flystate tests.

Provides an in-memory stand-in for the remote Fly API. It assigns digests
with a private salted hash (so tests can never predict them, just like the
real store), stamps every write with a fresh timestamp, and records every
call so tests can assert on exactly which remote operations happened.
"""

from __future__ import annotations

import hashlib
import itertools
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import pytest

from flystate.errors import FlyStateError, RemoteErrorEntry, RemoteNoOp, RemoteNotFound
from flystate.models.remote import (
    AppInfo,
    CertificateInfo,
    FullAppInfo,
    IPAddressInfo,
    OrgInfo,
    RemoteSecret,
    VolumeInfo,
)

MUTATIONS = frozenset(
    {
        "create_app",
        "delete_app",
        "set_secrets",
        "unset_secrets",
        "add_certificate",
        "delete_certificate",
        "create_volume",
        "delete_volume",
        "allocate_ip_address",
        "release_ip_address",
    }
)


def _not_found(operation: str, what: str) -> RemoteNotFound:
    return RemoteNotFound(operation, [RemoteErrorEntry(message=f"Could not resolve {what}")])


@dataclass
class _StoredApp:
    id: str
    name: str
    org: OrgInfo
    secrets: dict[str, RemoteSecret] = field(default_factory=dict)
    values: dict[str, str] = field(default_factory=dict)


class FakeFlyAPI:
    """In-memory remote store implementing the FlyAPI surface used by the resources."""

    def __init__(self) -> None:
        self.orgs = {
            "personal": OrgInfo(id="org-personal", slug="personal", name="Personal"),
            "acme": OrgInfo(id="org-acme", slug="acme", name="Acme"),
        }
        self.apps: dict[str, _StoredApp] = {}
        self.certificates: dict[tuple[str, str], CertificateInfo] = {}
        self.volumes: dict[tuple[str, str], VolumeInfo] = {}
        self.ip_addresses: dict[tuple[str, str], IPAddressInfo] = {}
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        # Operation name -> exception raised (once) on the next call to it.
        self.fail_next: dict[str, FlyStateError] = {}
        # When set, set_secrets answers "no change" if every value is already stored.
        self.detect_no_op = False
        # Names dropped from the set_secrets answer, to simulate an inconsistent store.
        self.hide_after_set: set[str] = set()
        self._seq = itertools.count(1)
        self._salt = "fake-store-private-salt"

    # ------------------------------------------------------------------
    # Test helpers
    # ------------------------------------------------------------------

    def _record(self, operation: str, *args: object) -> None:
        self.calls.append((operation, args))
        exc = self.fail_next.pop(operation, None)
        if exc is not None:
            raise exc

    def mutation_calls(self) -> list[str]:
        return [op for op, _ in self.calls if op in MUTATIONS]

    def call_names(self) -> list[str]:
        return [op for op, _ in self.calls]

    def reset_calls(self) -> None:
        self.calls.clear()

    def _stamp(self) -> str:
        n = next(self._seq)
        return f"2024-01-01T{n // 3600:02d}:{n // 60 % 60:02d}:{n % 60:02d}Z"

    def _write(self, app: _StoredApp, name: str, value: str) -> None:
        n = next(self._seq)
        digest = hashlib.sha256(f"{self._salt}:{n}:{value}".encode()).hexdigest()[:16]
        previous = app.secrets.get(name)
        app.secrets[name] = RemoteSecret(
            id=previous.id if previous is not None else f"sec-{n}",
            name=name,
            digest=digest,
            created_at=self._stamp(),
        )
        app.values[name] = value

    def tamper(self, app: str, name: str, value: str) -> None:
        """Out-of-band write: not recorded as a call."""
        self._write(self.apps[app], name, value)

    def remove_out_of_band(self, app: str, name: str) -> None:
        self.apps[app].secrets.pop(name, None)
        self.apps[app].values.pop(name, None)

    def seed_app(self, name: str, org: str = "personal", secrets: Mapping[str, str] | None = None) -> None:
        stored = _StoredApp(id=f"app-{next(self._seq)}", name=name, org=self.orgs[org])
        self.apps[name] = stored
        for key, value in (secrets or {}).items():
            self._write(stored, key, value)

    def stored_value(self, app: str, name: str) -> str | None:
        return self.apps[app].values.get(name)

    def _get(self, operation: str, name: str) -> _StoredApp:
        stored = self.apps.get(name)
        if stored is None:
            raise _not_found(operation, f"App {name}")
        return stored

    def _info(self, stored: _StoredApp) -> AppInfo:
        return AppInfo(
            id=stored.id,
            name=stored.name,
            app_url=f"https://{stored.name}.fly.dev",
            org_id=stored.org.id,
            org_slug=stored.org.slug,
            secrets=tuple(stored.secrets.values()),
        )

    # ------------------------------------------------------------------
    # Orgs and apps
    # ------------------------------------------------------------------

    async def resolve_org(self, slug: str) -> OrgInfo:
        self._record("resolve_org", slug)
        if slug not in self.orgs:
            raise _not_found("ResolveOrg", f"Organization {slug}")
        return self.orgs[slug]

    async def default_org(self) -> OrgInfo:
        self._record("default_org")
        return self.orgs["personal"]

    async def create_app(self, name: str, org_id: str) -> AppInfo:
        self._record("create_app", name, org_id)
        org = next(o for o in self.orgs.values() if o.id == org_id)
        self.apps[name] = _StoredApp(id=f"app-{next(self._seq)}", name=name, org=org)
        return self._info(self.apps[name])

    async def get_app(self, name: str) -> AppInfo:
        self._record("get_app", name)
        return self._info(self._get("GetApp", name))

    async def get_full_app(self, name: str) -> FullAppInfo:
        self._record("get_full_app", name)
        stored = self._get("GetFullApp", name)
        return FullAppInfo(
            id=stored.id,
            name=stored.name,
            app_url=f"https://{stored.name}.fly.dev",
            hostname=f"{stored.name}.fly.dev",
            status="running",
            deployed=True,
            current_release="rel-1",
            health_checks=["http: passing"],
            ip_addresses=[ip.address for (app, _), ip in self.ip_addresses.items() if app == name],
        )

    async def delete_app(self, name: str) -> None:
        self._record("delete_app", name)
        self._get("DeleteApp", name)
        del self.apps[name]

    # ------------------------------------------------------------------
    # Secrets
    # ------------------------------------------------------------------

    async def set_secrets(self, app: str, batch: Mapping[str, str]) -> tuple[RemoteSecret, ...]:
        self._record("set_secrets", app, dict(batch))
        stored = self._get("SetSecrets", app)
        if self.detect_no_op and all(stored.values.get(k) == v for k, v in batch.items()):
            raise RemoteNoOp("SetSecrets", [RemoteErrorEntry(message="No change detected to secrets")])
        for key, value in batch.items():
            self._write(stored, key, value)
        return tuple(s for s in stored.secrets.values() if s.name not in self.hide_after_set)

    async def unset_secrets(self, app: str, names: Iterable[str]) -> None:
        keys = list(names)
        self._record("unset_secrets", app, keys)
        stored = self._get("UnsetSecrets", app)
        for key in keys:
            stored.secrets.pop(key, None)
            stored.values.pop(key, None)

    async def get_secrets(self, app: str) -> tuple[RemoteSecret, ...]:
        self._record("get_secrets", app)
        return tuple(self._get("GetSecrets", app).secrets.values())

    # ------------------------------------------------------------------
    # Certificates, volumes, IP addresses
    # ------------------------------------------------------------------

    async def add_certificate(self, app: str, hostname: str) -> CertificateInfo:
        self._record("add_certificate", app, hostname)
        self._get("AddCertificate", app)
        cert = CertificateInfo(
            id=f"cert-{next(self._seq)}",
            hostname=hostname,
            dns_validation_instructions=f"CNAME _acme-challenge.{hostname}",
            dns_validation_hostname=f"_acme-challenge.{hostname}",
            dns_validation_target=f"{hostname}.flydns.net",
            check=False,
        )
        self.certificates[(app, hostname)] = cert
        return cert

    async def get_certificate(self, app: str, hostname: str) -> CertificateInfo:
        self._record("get_certificate", app, hostname)
        cert = self.certificates.get((app, hostname))
        if cert is None:
            raise _not_found("GetCertificate", f"Certificate {hostname}")
        return cert

    async def delete_certificate(self, app: str, hostname: str) -> None:
        self._record("delete_certificate", app, hostname)
        if self.certificates.pop((app, hostname), None) is None:
            raise _not_found("DeleteCertificate", f"Certificate {hostname}")

    async def create_volume(self, app: str, name: str, region: str, size_gb: int) -> VolumeInfo:
        self._record("create_volume", app, name, region, size_gb)
        n = next(self._seq)
        vol = VolumeInfo(id=f"vol_{n}", name=name, size_gb=size_gb, region=region, internal_id=f"int{n}")
        self.volumes[(app, vol.internal_id)] = vol
        return vol

    async def get_volume(self, app: str, internal_id: str) -> VolumeInfo:
        self._record("get_volume", app, internal_id)
        vol = self.volumes.get((app, internal_id))
        if vol is None:
            raise _not_found("GetVolume", f"Volume {internal_id}")
        return vol

    async def delete_volume(self, volume_id: str) -> None:
        self._record("delete_volume", volume_id)
        key = next((k for k, v in self.volumes.items() if v.id == volume_id), None)
        if key is None:
            raise _not_found("DeleteVolume", f"Volume {volume_id}")
        del self.volumes[key]

    async def allocate_ip_address(self, app: str, region: str, address_type: str) -> IPAddressInfo:
        self._record("allocate_ip_address", app, region, address_type)
        n = next(self._seq)
        address = f"10.0.0.{n}" if address_type == "v4" else f"2a09:8280::{n}"
        ip = IPAddressInfo(id=f"ip-{n}", address=address, type=address_type, region=region)
        self.ip_addresses[(app, address)] = ip
        return ip

    async def get_ip_address(self, app: str, address: str) -> IPAddressInfo:
        self._record("get_ip_address", app, address)
        ip = self.ip_addresses.get((app, address))
        if ip is None:
            raise _not_found("GetIpAddress", f"IPAddress {address}")
        return ip

    async def release_ip_address(self, ip_address_id: str) -> None:
        self._record("release_ip_address", ip_address_id)
        key = next((k for k, v in self.ip_addresses.items() if v.id == ip_address_id), None)
        if key is None:
            raise _not_found("ReleaseIpAddress", f"IPAddress {ip_address_id}")
        del self.ip_addresses[key]

    async def close(self) -> None:
        self._record("close")


@pytest.fixture()
def fake_api() -> FakeFlyAPI:
    return FakeFlyAPI()
