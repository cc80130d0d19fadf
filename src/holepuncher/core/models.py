"""Domain models for holepuncher.

All models are **frozen** dataclasses: immutable value objects with no
behaviour beyond data access.  Provider-agnostic types
(:class:`TunnelInstance`, :class:`TunnelCreationParams`,
:class:`SessionRecord`) may be persisted; the Linode catalog records are
built only for display and never written to disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class ProviderType(StrEnum):
    """Cloud providers known to the holepuncher server."""

    LINODE = "linode"
    DIGITAL_OCEAN = "digital_ocean"


# ---------------------------------------------------------------------------
# Provider-agnostic tunnel state
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TunnelInstance:
    """Normalized view of a running tunnel instance."""

    provider: ProviderType
    label: str
    ipv4: tuple[str, ...]
    ipv6: tuple[str, ...]
    created_at: datetime
    """Timezone-aware creation time; the Unix epoch when unknown."""


@dataclass(frozen=True, slots=True)
class TunnelCreationParams:
    """Circumvention-method configuration used to create a tunnel.

    Disabled methods keep empty strings and zero ports.
    """

    wireguard_enabled: bool = False
    wireguard_server_key: str = ""
    wireguard_peer_keys: tuple[str, ...] = ()
    wireguard_port: int = 0

    obfsproxy4_enabled: bool = False
    obfsproxy4_secret: str = ""
    obfsproxy4_port: int = 0

    obfsproxy6_enabled: bool = False
    obfsproxy6_secret: str = ""
    obfsproxy6_port: int = 0


@dataclass(frozen=True, slots=True)
class TunnelLaunch:
    """Outcome of a successful create or rebuild."""

    creation_params: TunnelCreationParams
    instance: TunnelInstance


@dataclass(frozen=True, slots=True)
class SessionRecord:
    """The tunnel this session owns, as persisted in the runtime dir."""

    instance_info: TunnelInstance
    creation_params: TunnelCreationParams

    @classmethod
    def from_launch(cls, launch: TunnelLaunch) -> SessionRecord:
        return cls(
            instance_info=launch.instance,
            creation_params=launch.creation_params,
        )


# ---------------------------------------------------------------------------
# Linode catalog records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LinodeInstanceInfo:
    """One Linode instance as listed by the server."""

    id: int
    label: str
    group: str
    region: str
    plan: str
    image: str
    status: str
    ipv4: tuple[str, ...]
    ipv6: tuple[str, ...]
    created_at: datetime
    updated_at: datetime
    hypervisor: str
    disk: int
    memory: int
    vcpus: int
    transfer: int


@dataclass(frozen=True, slots=True)
class LinodePlan:
    id: str
    label: str
    plan_class: str
    price_hourly: float
    price_monthly: float
    memory: int
    bandwidth: int
    transfer: int
    vcpus: int


@dataclass(frozen=True, slots=True)
class LinodeRegion:
    id: str
    country: str


@dataclass(frozen=True, slots=True)
class LinodeImage:
    id: str
    label: str
    size: int
    created_by: str
    created_at: datetime
    vendor: str


@dataclass(frozen=True, slots=True)
class LinodeStackScript:
    id: int
    label: str
    description: str
    body: str
