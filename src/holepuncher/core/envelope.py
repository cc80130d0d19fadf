"""Request and reply envelopes exchanged with the holepuncher server.

Both envelopes are tagged unions.  Each command and each result is a
pydantic model carrying a literal ``kind`` discriminator; the envelope
holds exactly one of them in a single field, so an envelope with zero
or several variants cannot be constructed.

The reply side is decoded from untrusted bytes and therefore tolerates
unknown fields, while the request side forbids them.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class WireMessage(BaseModel):
    """Base for every message that travels inside an envelope."""

    model_config = ConfigDict(frozen=True, extra="ignore")


# ---------------------------------------------------------------------------
# Shared request payloads
# ---------------------------------------------------------------------------

class LinodeAuth(WireMessage):
    access_token: str


class WireguardOptions(WireMessage):
    port: int
    server_key: str
    peer_keys: list[str] = Field(default_factory=list)


class ObfsproxyOptions(WireMessage):
    port: int
    secret: str


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class LinodeCreateTunnelRequest(WireMessage):
    kind: Literal["linode_create_tunnel"] = "linode_create_tunnel"
    auth: LinodeAuth
    region: str
    plan: str
    root_password: str = ""
    regular_account_name: str = ""
    regular_account_password: str = ""
    ssh_keys: list[str] = Field(default_factory=list)
    wireguard_options: WireguardOptions | None = None
    obfsproxy4_options: ObfsproxyOptions | None = None
    obfsproxy6_options: ObfsproxyOptions | None = None


class LinodeRebuildTunnelRequest(WireMessage):
    kind: Literal["linode_rebuild_tunnel"] = "linode_rebuild_tunnel"
    auth: LinodeAuth
    root_password: str = ""
    regular_account_name: str = ""
    regular_account_password: str = ""
    ssh_keys: list[str] = Field(default_factory=list)
    wireguard_options: WireguardOptions | None = None
    obfsproxy4_options: ObfsproxyOptions | None = None
    obfsproxy6_options: ObfsproxyOptions | None = None


class LinodeDestroyTunnelRequest(WireMessage):
    kind: Literal["linode_destroy_tunnel"] = "linode_destroy_tunnel"
    auth: LinodeAuth


class LinodeTunnelStatusRequest(WireMessage):
    kind: Literal["linode_tunnel_status"] = "linode_tunnel_status"
    auth: LinodeAuth


class LinodeListInstancesRequest(WireMessage):
    kind: Literal["linode_list_instances"] = "linode_list_instances"
    auth: LinodeAuth


class LinodeListPlansRequest(WireMessage):
    kind: Literal["linode_list_plans"] = "linode_list_plans"


class LinodeListRegionsRequest(WireMessage):
    kind: Literal["linode_list_regions"] = "linode_list_regions"


class LinodeListImagesRequest(WireMessage):
    kind: Literal["linode_list_images"] = "linode_list_images"
    auth: LinodeAuth


class LinodeListStackScriptsRequest(WireMessage):
    kind: Literal["linode_list_stackscripts"] = "linode_list_stackscripts"
    auth: LinodeAuth


RequestCommand = Annotated[
    Union[
        LinodeCreateTunnelRequest,
        LinodeRebuildTunnelRequest,
        LinodeDestroyTunnelRequest,
        LinodeTunnelStatusRequest,
        LinodeListInstancesRequest,
        LinodeListPlansRequest,
        LinodeListRegionsRequest,
        LinodeListImagesRequest,
        LinodeListStackScriptsRequest,
    ],
    Field(discriminator="kind"),
]


class Request(BaseModel):
    """Outgoing envelope: exactly one command."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    command: RequestCommand

    @property
    def rpc_name(self) -> str:
        """Name of the carried command, used in logs and errors."""
        return self.command.kind


# ---------------------------------------------------------------------------
# Result payloads
# ---------------------------------------------------------------------------

class ServerError(WireMessage):
    message: str = ""


class ErrorDetail(WireMessage):
    field: str = ""
    reason: str = ""


class LinodeError(WireMessage):
    """Provider error as reported by the server."""

    error: ServerError | None = None
    details: list[ErrorDetail] = Field(default_factory=list)


class LinodeInstance(WireMessage):
    id: int = 0
    label: str = ""
    group: str = ""
    region: str = ""
    plan: str = ""
    image: str = ""
    status: str = ""
    ipv4: list[str] = Field(default_factory=list)
    ipv6: list[str] = Field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""
    hypervisor: str = ""
    disk: int = 0
    memory: int = 0
    vcpus: int = 0
    transfer: int = 0


class LinodePlanEntry(WireMessage):
    id: str = ""
    label: str = ""
    plan_class: str = Field(default="", alias="class")
    price_hourly: float = 0.0
    price_monthly: float = 0.0
    memory: int = 0
    network_out: int = 0
    transfer: int = 0
    vcpus: int = 0

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class LinodeRegionEntry(WireMessage):
    id: str = ""
    country: str = ""


class LinodeImageEntry(WireMessage):
    id: str = ""
    label: str = ""
    size: int = 0
    created_by: str = ""
    created_at: str = ""
    vendor: str = ""


class LinodeStackScriptEntry(WireMessage):
    id: int = 0
    label: str = ""
    description: str = ""
    body: str = ""


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class LinodeCreateTunnelResult(WireMessage):
    kind: Literal["linode_create_tunnel"] = "linode_create_tunnel"
    instance: LinodeInstance | None = None
    error: LinodeError | None = None


class LinodeRebuildTunnelResult(WireMessage):
    kind: Literal["linode_rebuild_tunnel"] = "linode_rebuild_tunnel"
    instance: LinodeInstance | None = None
    error: LinodeError | None = None


class LinodeDestroyTunnelResult(WireMessage):
    kind: Literal["linode_destroy_tunnel"] = "linode_destroy_tunnel"
    error: LinodeError | None = None


class LinodeTunnelStatusResult(WireMessage):
    kind: Literal["linode_tunnel_status"] = "linode_tunnel_status"
    instance: LinodeInstance | None = None
    error: LinodeError | None = None


class LinodeListInstancesResult(WireMessage):
    kind: Literal["linode_list_instances"] = "linode_list_instances"
    instances: list[LinodeInstance] | None = None
    error: LinodeError | None = None


class LinodeListPlansResult(WireMessage):
    kind: Literal["linode_list_plans"] = "linode_list_plans"
    plans: list[LinodePlanEntry] | None = None
    error: LinodeError | None = None


class LinodeListRegionsResult(WireMessage):
    kind: Literal["linode_list_regions"] = "linode_list_regions"
    regions: list[LinodeRegionEntry] | None = None
    error: LinodeError | None = None


class LinodeListImagesResult(WireMessage):
    kind: Literal["linode_list_images"] = "linode_list_images"
    images: list[LinodeImageEntry] | None = None
    error: LinodeError | None = None


class LinodeListStackScriptsResult(WireMessage):
    kind: Literal["linode_list_stackscripts"] = "linode_list_stackscripts"
    stackscripts: list[LinodeStackScriptEntry] | None = None
    error: LinodeError | None = None


ReplyResult = Annotated[
    Union[
        LinodeCreateTunnelResult,
        LinodeRebuildTunnelResult,
        LinodeDestroyTunnelResult,
        LinodeTunnelStatusResult,
        LinodeListInstancesResult,
        LinodeListPlansResult,
        LinodeListRegionsResult,
        LinodeListImagesResult,
        LinodeListStackScriptsResult,
    ],
    Field(discriminator="kind"),
]


class Reply(BaseModel):
    """Incoming envelope.

    ``result`` is ``None`` only when the server broke the contract; the
    provider layer reports that as a protocol bug.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    result: ReplyResult | None = None
