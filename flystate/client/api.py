"""Typed Fly API operations on top of GraphQLClient.

FlyAPI is the remote client capability consumed by the lifecycle
controllers. It holds no per-resource state and may be shared read-only
between concurrently reconciling resource instances.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from flystate.client import queries
from flystate.client.graphql import GraphQLClient
from flystate.errors import RemoteErrorEntry, RemoteNotFound, TransportError
from flystate.models.remote import (
    AppInfo,
    CertificateInfo,
    FullAppInfo,
    IPAddressInfo,
    OrgInfo,
    RemoteSecret,
    VolumeInfo,
)


def _rfc3339(raw: str) -> str:
    """Normalize an ISO-8601 timestamp to second-precision RFC 3339 UTC."""
    if not raw:
        return ""
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def _secrets(raw: Iterable[Mapping[str, Any]] | None) -> tuple[RemoteSecret, ...]:
    return tuple(
        RemoteSecret(
            id=str(s.get("id", "")),
            name=str(s["name"]),
            digest=str(s.get("digest", "")),
            created_at=_rfc3339(str(s.get("createdAt") or "")),
        )
        for s in raw or ()
    )


def _app(raw: Mapping[str, Any]) -> AppInfo:
    org = raw.get("organization") or {}
    return AppInfo(
        id=str(raw.get("id", "")),
        name=str(raw.get("name", "")),
        app_url=str(raw.get("appUrl") or ""),
        org_id=str(org.get("id", "")),
        org_slug=str(org.get("slug", "")),
        secrets=_secrets(raw.get("secrets")),
    )


def _certificate(raw: Mapping[str, Any]) -> CertificateInfo:
    return CertificateInfo(
        id=str(raw.get("id", "")),
        hostname=str(raw.get("hostname", "")),
        dns_validation_instructions=str(raw.get("dnsValidationInstructions") or ""),
        dns_validation_hostname=str(raw.get("dnsValidationHostname") or ""),
        dns_validation_target=str(raw.get("dnsValidationTarget") or ""),
        check=bool(raw.get("check", False)),
    )


def _volume(raw: Mapping[str, Any]) -> VolumeInfo:
    return VolumeInfo(
        id=str(raw.get("id", "")),
        name=str(raw.get("name", "")),
        size_gb=int(raw.get("sizeGb") or 0),
        region=str(raw.get("region", "")),
        internal_id=str(raw.get("internalId", "")),
    )


def _ip_address(raw: Mapping[str, Any]) -> IPAddressInfo:
    return IPAddressInfo(
        id=str(raw.get("id", "")),
        address=str(raw.get("address", "")),
        type=str(raw.get("type", "")).lower(),
        region=str(raw.get("region", "")),
    )


def _require(operation: str, obj: Any, what: str) -> Mapping[str, Any]:
    """GraphQL may answer a missing object with ``null`` instead of an error."""
    if not obj:
        raise RemoteNotFound(operation, [RemoteErrorEntry(message=f"Could not resolve {what}")])
    return obj


@contextmanager
def _decoding(operation: str) -> Iterator[None]:
    """Surface a payload that does not match the expected shape as a TransportError."""
    try:
        yield
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise TransportError(operation, f"malformed response: {exc!r}") from exc


class FlyAPI:
    """Remote client collaborator: one method per conceptual remote operation."""

    def __init__(self, client: GraphQLClient) -> None:
        self._client = client

    # ------------------------------------------------------------------
    # Organizations
    # ------------------------------------------------------------------

    async def resolve_org(self, slug: str) -> OrgInfo:
        data = await self._client.execute("Organization", queries.RESOLVE_ORG, {"slug": slug})
        with _decoding("Organization"):
            org = _require("Organization", data.get("organization"), f"organization {slug}")
            return OrgInfo(id=str(org["id"]), slug=str(org.get("slug", slug)), name=str(org.get("name", "")))

    async def default_org(self) -> OrgInfo:
        data = await self._client.execute("DefaultOrganization", queries.DEFAULT_ORG)
        with _decoding("DefaultOrganization"):
            org = _require("DefaultOrganization", data.get("personalOrganization"), "personal organization")
            return OrgInfo(id=str(org["id"]), slug=str(org.get("slug", "")), name=str(org.get("name", "")))

    # ------------------------------------------------------------------
    # Apps
    # ------------------------------------------------------------------

    async def create_app(self, name: str, org_id: str) -> AppInfo:
        data = await self._client.execute(
            "CreateApp", queries.CREATE_APP, {"name": name, "organizationId": org_id}
        )
        with _decoding("CreateApp"):
            return _app(data["createApp"]["app"])

    async def get_app(self, name: str) -> AppInfo:
        data = await self._client.execute("GetApp", queries.GET_APP, {"name": name})
        with _decoding("GetApp"):
            return _app(_require("GetApp", data.get("app"), f"app {name}"))

    async def get_full_app(self, name: str) -> FullAppInfo:
        data = await self._client.execute("GetFullApp", queries.GET_FULL_APP, {"name": name})
        with _decoding("GetFullApp"):
            raw = _require("GetFullApp", data.get("app"), f"app {name}")
            health = (raw.get("healthChecks") or {}).get("nodes") or []
            ips = (raw.get("ipAddresses") or {}).get("nodes") or []
            return FullAppInfo(
                id=str(raw.get("id", "")),
                name=str(raw.get("name", name)),
                app_url=str(raw.get("appUrl") or ""),
                hostname=str(raw.get("hostname") or ""),
                status=str(raw.get("status") or ""),
                deployed=bool(raw.get("deployed", False)),
                current_release=str((raw.get("currentRelease") or {}).get("id", "")),
                health_checks=[f"{h['name']}: {h['status']}" for h in health],
                ip_addresses=[str(ip["address"]) for ip in ips],
            )

    async def delete_app(self, name: str) -> None:
        await self._client.execute("DeleteApp", queries.DELETE_APP, {"appId": name})

    # ------------------------------------------------------------------
    # Secrets
    # ------------------------------------------------------------------

    async def set_secrets(self, app: str, batch: Mapping[str, str]) -> tuple[RemoteSecret, ...]:
        """Set every entry of *batch* atomically; returns the app's complete secret list."""
        variables = {
            "input": {
                "appId": app,
                "secrets": [{"key": key, "value": value} for key, value in batch.items()],
                "replaceAll": False,
            }
        }
        data = await self._client.execute("SetSecrets", queries.SET_SECRETS, variables)
        with _decoding("SetSecrets"):
            return _secrets(data["setSecrets"]["app"]["secrets"])

    async def unset_secrets(self, app: str, names: Iterable[str]) -> None:
        await self._client.execute(
            "UnsetSecrets", queries.UNSET_SECRETS, {"appId": app, "keys": sorted(names)}
        )

    async def get_secrets(self, app: str) -> tuple[RemoteSecret, ...]:
        data = await self._client.execute("GetSecrets", queries.GET_SECRETS, {"name": app})
        with _decoding("GetSecrets"):
            return _secrets(_require("GetSecrets", data.get("app"), f"app {app}").get("secrets"))

    # ------------------------------------------------------------------
    # Certificates
    # ------------------------------------------------------------------

    async def add_certificate(self, app: str, hostname: str) -> CertificateInfo:
        data = await self._client.execute(
            "AddCertificate", queries.ADD_CERTIFICATE, {"appId": app, "hostname": hostname}
        )
        with _decoding("AddCertificate"):
            return _certificate(data["addCertificate"]["certificate"])

    async def get_certificate(self, app: str, hostname: str) -> CertificateInfo:
        data = await self._client.execute(
            "GetCertificate", queries.GET_CERTIFICATE, {"app": app, "hostname": hostname}
        )
        with _decoding("GetCertificate"):
            raw_app = _require("GetCertificate", data.get("app"), f"app {app}")
            return _certificate(_require("GetCertificate", raw_app.get("certificate"), f"certificate {hostname}"))

    async def delete_certificate(self, app: str, hostname: str) -> None:
        await self._client.execute(
            "DeleteCertificate", queries.DELETE_CERTIFICATE, {"appId": app, "hostname": hostname}
        )

    # ------------------------------------------------------------------
    # Volumes
    # ------------------------------------------------------------------

    async def create_volume(self, app: str, name: str, region: str, size_gb: int) -> VolumeInfo:
        data = await self._client.execute(
            "CreateVolume",
            queries.CREATE_VOLUME,
            {"appId": app, "name": name, "region": region, "sizeGb": size_gb},
        )
        with _decoding("CreateVolume"):
            return _volume(data["createVolume"]["volume"])

    async def get_volume(self, app: str, internal_id: str) -> VolumeInfo:
        data = await self._client.execute(
            "GetVolume", queries.GET_VOLUME, {"app": app, "internalId": internal_id}
        )
        with _decoding("GetVolume"):
            raw_app = _require("GetVolume", data.get("app"), f"app {app}")
            return _volume(_require("GetVolume", raw_app.get("volume"), f"volume {internal_id}"))

    async def delete_volume(self, volume_id: str) -> None:
        await self._client.execute("DeleteVolume", queries.DELETE_VOLUME, {"volumeId": volume_id})

    # ------------------------------------------------------------------
    # IP addresses
    # ------------------------------------------------------------------

    async def allocate_ip_address(self, app: str, region: str, address_type: str) -> IPAddressInfo:
        data = await self._client.execute(
            "AllocateIpAddress",
            queries.ALLOCATE_IP_ADDRESS,
            {"appId": app, "region": region, "type": address_type.lower()},
        )
        with _decoding("AllocateIpAddress"):
            return _ip_address(data["allocateIpAddress"]["ipAddress"])

    async def get_ip_address(self, app: str, address: str) -> IPAddressInfo:
        data = await self._client.execute(
            "GetIpAddress", queries.GET_IP_ADDRESS, {"app": app, "address": address}
        )
        with _decoding("GetIpAddress"):
            raw_app = _require("GetIpAddress", data.get("app"), f"app {app}")
            return _ip_address(_require("GetIpAddress", raw_app.get("ipAddress"), f"ip address {address}"))

    async def release_ip_address(self, ip_address_id: str) -> None:
        await self._client.execute(
            "ReleaseIpAddress", queries.RELEASE_IP_ADDRESS, {"ipAddressId": ip_address_id}
        )

    async def close(self) -> None:
        await self._client.close()
