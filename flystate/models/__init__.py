"""Core data structures for flystate."""

from flystate.models.config import FlyStateConfig
from flystate.models.diagnostics import Diagnostic, Diagnostics, Severity
from flystate.models.remote import (
    AppInfo,
    CertificateInfo,
    FullAppInfo,
    IPAddressInfo,
    OrgInfo,
    RemoteSecret,
    VolumeInfo,
)
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
from flystate.models.secrets import PlannedSecret, SecretDiff, SecretEntry
from flystate.models.values import UNRESOLVED, Known, Unresolved, Value

__all__ = [
    "UNRESOLVED",
    "AppConfig",
    "AppInfo",
    "AppSecretConfig",
    "AppSecretState",
    "AppState",
    "CertificateConfig",
    "CertificateInfo",
    "CertificateState",
    "Diagnostic",
    "Diagnostics",
    "FlyStateConfig",
    "FullAppInfo",
    "IPAddressConfig",
    "IPAddressInfo",
    "IPAddressState",
    "Known",
    "OrgInfo",
    "PlannedApp",
    "PlannedAppSecret",
    "PlannedSecret",
    "RemoteSecret",
    "SecretDiff",
    "SecretEntry",
    "Severity",
    "Unresolved",
    "Value",
    "VolumeConfig",
    "VolumeInfo",
    "VolumeState",
]
