"""Linode provider — builds Linode requests and maps replies to domain types.

Every operation follows the same discipline:

1. Build the operation-specific :class:`~holepuncher.core.envelope.Request`.
2. Send it through the injected :class:`~holepuncher.core.protocols.RpcClient`.
3. Unwrap the reply:

   * wrong or missing result variant → :class:`ProtocolBugError`
   * populated error payload → :class:`RpcMethodError`
   * neither payload nor error → :class:`ProtocolBugError`

4. Map the payload into domain models.

Guarantees
----------
* No I/O of its own; all network traffic goes through the client.
* No logging; errors carry structured data for the CLI boundary.
* Only :class:`~holepuncher.exceptions.HolepuncherError` subclasses escape.
"""

from __future__ import annotations

from typing import Any

from holepuncher.config import Settings, validate_general_settings
from holepuncher.core.envelope import (
    LinodeAuth,
    LinodeCreateTunnelRequest,
    LinodeCreateTunnelResult,
    LinodeDestroyTunnelRequest,
    LinodeDestroyTunnelResult,
    LinodeImageEntry,
    LinodeInstance,
    LinodeListImagesRequest,
    LinodeListImagesResult,
    LinodeListInstancesRequest,
    LinodeListInstancesResult,
    LinodeListPlansRequest,
    LinodeListPlansResult,
    LinodeListRegionsRequest,
    LinodeListRegionsResult,
    LinodeListStackScriptsRequest,
    LinodeListStackScriptsResult,
    LinodePlanEntry,
    LinodeRebuildTunnelRequest,
    LinodeRebuildTunnelResult,
    LinodeRegionEntry,
    LinodeStackScriptEntry,
    LinodeTunnelStatusRequest,
    LinodeTunnelStatusResult,
    ObfsproxyOptions,
    Reply,
    Request,
    WireguardOptions,
)
from holepuncher.core.models import (
    LinodeImage,
    LinodeInstanceInfo,
    LinodePlan,
    LinodeRegion,
    LinodeStackScript,
    ProviderType,
    TunnelInstance,
    TunnelLaunch,
)
from holepuncher.core.protocols import RpcClient
from holepuncher.core.provider import creation_params_from_settings
from holepuncher.core.provider_errors import normalize_provider_error
from holepuncher.core.timestamps import parse_timestamp
from holepuncher.exceptions import (
    ConfigurationError,
    HolepuncherError,
    ProtocolBugError,
    RpcMethodError,
    TransportError,
)


class LinodeProvider:
    """Linode implementation of :class:`~holepuncher.core.protocols.CloudProvider`.

    Parameters
    ----------
    client:
        Any object satisfying the :class:`RpcClient` protocol.
    settings:
        Loaded program settings; validated here.

    Raises
    ------
    ConfigurationError
        If general settings are invalid or the Linode access token, plan,
        or region is missing.
    """

    provider_type = ProviderType.LINODE

    def __init__(self, client: RpcClient, settings: Settings) -> None:
        validate_general_settings(settings)

        linode = settings.provider_linode
        if not linode.access_token:
            raise ConfigurationError("linode: access token is empty or missing.")
        if not linode.plan:
            raise ConfigurationError("linode: plan is empty or missing.")
        if not linode.region:
            raise ConfigurationError("linode: region is empty or missing.")

        self._client: RpcClient = client
        self._settings: Settings = settings
        self._auth = LinodeAuth(access_token=linode.access_token)

    # ------------------------------------------------------------------
    # Lifecycle operations
    # ------------------------------------------------------------------

    def create_tunnel(self) -> TunnelLaunch:
        """Create the tunnel instance and return it with its parameters."""
        reply = self._call(self.build_create_tunnel_request())
        instance = self._unwrap(reply, LinodeCreateTunnelResult, "instance")
        return TunnelLaunch(
            creation_params=creation_params_from_settings(self._settings),
            instance=self._to_tunnel_instance(instance),
        )

    def rebuild_tunnel(self) -> TunnelLaunch:
        """Rebuild the existing tunnel instance with current settings."""
        reply = self._call(self.build_rebuild_tunnel_request())
        instance = self._unwrap(reply, LinodeRebuildTunnelResult, "instance")
        return TunnelLaunch(
            creation_params=creation_params_from_settings(self._settings),
            instance=self._to_tunnel_instance(instance),
        )

    def destroy_tunnel(self) -> None:
        reply = self._call(self.build_destroy_tunnel_request())
        self._unwrap(reply, LinodeDestroyTunnelResult, None)

    def tunnel_status(self) -> TunnelInstance:
        reply = self._call(self.build_tunnel_status_request())
        instance = self._unwrap(reply, LinodeTunnelStatusResult, "instance")
        return self._to_tunnel_instance(instance)

    # ------------------------------------------------------------------
    # Catalog queries
    # ------------------------------------------------------------------

    def list_instances(self) -> list[LinodeInstanceInfo]:
        reply = self._call(Request(command=LinodeListInstancesRequest(auth=self._auth)))
        entries = self._unwrap(reply, LinodeListInstancesResult, "instances")
        return [self._to_instance_info(entry) for entry in entries]

    def list_plans(self) -> list[LinodePlan]:
        reply = self._call(Request(command=LinodeListPlansRequest()))
        entries = self._unwrap(reply, LinodeListPlansResult, "plans")
        return [self._to_plan(entry) for entry in entries]

    def list_regions(self) -> list[LinodeRegion]:
        reply = self._call(Request(command=LinodeListRegionsRequest()))
        entries = self._unwrap(reply, LinodeListRegionsResult, "regions")
        return [self._to_region(entry) for entry in entries]

    def list_images(self) -> list[LinodeImage]:
        reply = self._call(Request(command=LinodeListImagesRequest(auth=self._auth)))
        entries = self._unwrap(reply, LinodeListImagesResult, "images")
        return [self._to_image(entry) for entry in entries]

    def list_stackscripts(self) -> list[LinodeStackScript]:
        reply = self._call(
            Request(command=LinodeListStackScriptsRequest(auth=self._auth)),
        )
        entries = self._unwrap(reply, LinodeListStackScriptsResult, "stackscripts")
        return [self._to_stackscript(entry) for entry in entries]

    # ------------------------------------------------------------------
    # Request builders
    # ------------------------------------------------------------------

    def build_create_tunnel_request(self) -> Request:
        s = self._settings
        return Request(
            command=LinodeCreateTunnelRequest(
                auth=self._auth,
                region=s.provider_linode.region,
                plan=s.provider_linode.plan,
                root_password=s.user_root.password,
                regular_account_name=s.user_unpriv.username,
                regular_account_password=s.user_unpriv.password,
                ssh_keys=list(s.user_common.ssh_keys),
                **self._net_services_options(),
            ),
        )

    def build_rebuild_tunnel_request(self) -> Request:
        s = self._settings
        return Request(
            command=LinodeRebuildTunnelRequest(
                auth=self._auth,
                root_password=s.user_root.password,
                regular_account_name=s.user_unpriv.username,
                regular_account_password=s.user_unpriv.password,
                ssh_keys=list(s.user_common.ssh_keys),
                **self._net_services_options(),
            ),
        )

    def build_destroy_tunnel_request(self) -> Request:
        return Request(command=LinodeDestroyTunnelRequest(auth=self._auth))

    def build_tunnel_status_request(self) -> Request:
        return Request(command=LinodeTunnelStatusRequest(auth=self._auth))

    def _net_services_options(self) -> dict[str, Any]:
        """Options for the enabled circumvention methods; ``None`` otherwise."""
        s = self._settings
        wireguard = None
        obfs4 = None
        obfs6 = None
        if s.wireguard.enable:
            wireguard = WireguardOptions(
                port=s.wireguard.port,
                server_key=s.wireguard.server_key,
                peer_keys=list(s.wireguard.peer_keys),
            )
        if s.obfsproxy_ipv4.enable:
            obfs4 = ObfsproxyOptions(
                port=s.obfsproxy_ipv4.port,
                secret=s.obfsproxy_ipv4.secret,
            )
        if s.obfsproxy_ipv6.enable:
            obfs6 = ObfsproxyOptions(
                port=s.obfsproxy_ipv6.port,
                secret=s.obfsproxy_ipv6.secret,
            )
        return {
            "wireguard_options": wireguard,
            "obfsproxy4_options": obfs4,
            "obfsproxy6_options": obfs6,
        }

    # ------------------------------------------------------------------
    # Client delegation (safe boundary)
    # ------------------------------------------------------------------

    def _call(self, request: Request) -> Reply:
        """Call the client and ensure only our exceptions escape."""
        try:
            return self._client.do_request(request)
        except HolepuncherError:
            raise
        except Exception as exc:
            raise TransportError(
                f"Fundamental RPC failure in {request.rpc_name}: {exc}",
            ) from exc

    @staticmethod
    def _unwrap(reply: Reply, result_type: type[Any], payload_field: str | None) -> Any:
        """Return the success payload of *reply* or raise.

        *payload_field* is ``None`` for results without a success
        payload (destroy), where the absence of an error is success.
        """
        rpc = result_type.model_fields["kind"].default
        result = reply.result
        if not isinstance(result, result_type):
            got = result.kind if result is not None else "nothing"
            raise ProtocolBugError(
                f"Expected {result_type.__name__}, got {got} (BUG)",
                rpc=rpc,
            )
        if result.error is not None:
            raise RpcMethodError(
                "RPC method returned an error",
                rpc=rpc,
                error=normalize_provider_error(result.error),
            )
        if payload_field is None:
            return None
        payload = getattr(result, payload_field)
        if payload is None:
            raise ProtocolBugError(
                f"Both result and error objects are empty in {result_type.__name__} (BUG)",
                rpc=rpc,
            )
        return payload

    # ------------------------------------------------------------------
    # Wire → domain mappers (pure)
    # ------------------------------------------------------------------

    @classmethod
    def _to_tunnel_instance(cls, instance: LinodeInstance) -> TunnelInstance:
        return TunnelInstance(
            provider=cls.provider_type,
            label=instance.label,
            ipv4=tuple(instance.ipv4),
            ipv6=tuple(instance.ipv6),
            created_at=parse_timestamp(instance.created_at),
        )

    @staticmethod
    def _to_instance_info(entry: LinodeInstance) -> LinodeInstanceInfo:
        return LinodeInstanceInfo(
            id=entry.id,
            label=entry.label,
            group=entry.group,
            region=entry.region,
            plan=entry.plan,
            image=entry.image,
            status=entry.status.lower(),
            ipv4=tuple(entry.ipv4),
            ipv6=tuple(entry.ipv6),
            created_at=parse_timestamp(entry.created_at),
            updated_at=parse_timestamp(entry.updated_at),
            hypervisor=entry.hypervisor,
            disk=entry.disk,
            memory=entry.memory,
            vcpus=entry.vcpus,
            transfer=entry.transfer,
        )

    @staticmethod
    def _to_plan(entry: LinodePlanEntry) -> LinodePlan:
        return LinodePlan(
            id=entry.id,
            label=entry.label,
            plan_class=entry.plan_class,
            price_hourly=entry.price_hourly,
            price_monthly=entry.price_monthly,
            memory=entry.memory,
            bandwidth=entry.network_out,
            transfer=entry.transfer,
            vcpus=entry.vcpus,
        )

    @staticmethod
    def _to_region(entry: LinodeRegionEntry) -> LinodeRegion:
        return LinodeRegion(id=entry.id, country=entry.country)

    @staticmethod
    def _to_image(entry: LinodeImageEntry) -> LinodeImage:
        return LinodeImage(
            id=entry.id,
            label=entry.label,
            size=entry.size,
            created_by=entry.created_by,
            created_at=parse_timestamp(entry.created_at),
            vendor=entry.vendor,
        )

    @staticmethod
    def _to_stackscript(entry: LinodeStackScriptEntry) -> LinodeStackScript:
        return LinodeStackScript(
            id=entry.id,
            label=entry.label,
            description=entry.description,
            body=entry.body,
        )
