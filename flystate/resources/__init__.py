"""Lifecycle controllers, one per resource type.

Exposes:
    AppResource, AppSecretResource, CertificateResource, VolumeResource,
    IPAddressResource -- value types implementing the Resource protocol.
    build_registry    -- maps resource type names to controllers sharing one API handle.
"""

from __future__ import annotations

from typing import Any

from flystate.client.api import FlyAPI
from flystate.resources.app import AppResource
from flystate.resources.app_secret import AppSecretResource
from flystate.resources.base import (
    LifecycleState,
    OperationResult,
    PlanningResource,
    Resource,
    advance,
    diagnostics_from_error,
)
from flystate.resources.certificate import CertificateResource
from flystate.resources.ip_address import IPAddressResource
from flystate.resources.volume import VolumeResource

__all__ = [
    "AppResource",
    "AppSecretResource",
    "CertificateResource",
    "IPAddressResource",
    "LifecycleState",
    "OperationResult",
    "PlanningResource",
    "Resource",
    "VolumeResource",
    "advance",
    "build_registry",
    "diagnostics_from_error",
]


def build_registry(api: FlyAPI) -> dict[str, Resource[Any, Any]]:
    """Instantiate every resource type around the shared *api* handle."""
    resources: list[Resource[Any, Any]] = [
        AppResource(api),
        AppSecretResource(api),
        CertificateResource(api),
        VolumeResource(api),
        IPAddressResource(api),
    ]
    return {resource.type_name: resource for resource in resources}
