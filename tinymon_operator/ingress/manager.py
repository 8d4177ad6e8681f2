from typing import List

from injector import inject, singleton

from tinymon_operator.common.annotations import ResourceConfig
from tinymon_operator.common.identity import ResourceIdentity, ResourceKind
from tinymon_operator.common.synchronizer import Synchronizer
from tinymon_operator.ingress.state import IngressState
from tinymon_operator.settings import Settings
from tinymon_operator.tinymon.client import TinyMonClient
from tinymon_operator.tinymon.models import Check


class CheckType:
    """Pull check types executed by TinyMon itself"""
    HTTP = "http"
    CERTIFICATE = "certificate"
    ICECAST_LISTENERS = "icecast_listeners"


HTTP_INTERVAL = 300
CERTIFICATE_INTERVAL = 3600
ICECAST_INTERVAL = 60


def http_check(address: str, host: str, config: ResourceConfig) -> Check:
    check_config = {"url": f"https://{host}{config.http_path}"}
    if config.expected_http_status is not None:
        check_config["expected_status"] = config.expected_http_status
    return Check(
        host_address=address,
        type=CheckType.HTTP,
        config=check_config,
        interval_seconds=config.interval_or(HTTP_INTERVAL),
    )


def certificate_check(address: str, host: str, config: ResourceConfig) -> Check:
    return Check(
        host_address=address,
        type=CheckType.CERTIFICATE,
        config={"host": host, "port": 443},
        interval_seconds=config.interval_or(CERTIFICATE_INTERVAL),
    )


def icecast_check(address: str, host: str, mount: str, config: ResourceConfig) -> Check:
    return Check(
        host_address=address,
        type=CheckType.ICECAST_LISTENERS,
        config={"url": f"https://{host}", "mount": mount},
        interval_seconds=config.interval_or(ICECAST_INTERVAL),
    )


def ingress_checks(address: str, state: IngressState, config: ResourceConfig) -> List[Check]:
    """Pull check definitions for every rule host.

    Each host gets an http check, a certificate check when a TLS block
    covers it, and one icecast_listeners check per configured mount.
    """
    checks = []
    tls_hosts = set(state.tls_hosts)
    for host in state.hosts:
        checks.append(http_check(address, host, config))
        if host in tls_hosts:
            checks.append(certificate_check(address, host, config))
        for mount in config.icecast_mounts:
            checks.append(icecast_check(address, host, mount, config))
    return checks


@singleton
class IngressSynchronizer(Synchronizer[IngressState]):
    kind = ResourceKind.INGRESS
    default_interval = HTTP_INTERVAL

    @inject
    def __init__(self, client: TinyMonClient, settings: Settings):
        super().__init__(client, settings.cluster)

    def describe(self, identity: ResourceIdentity, state: IngressState) -> str:
        return f"Ingress {state.namespace}/{state.name} ({', '.join(state.hosts)})"

    def build_checks(self, address: str, state: IngressState, config: ResourceConfig) -> List[Check]:
        return ingress_checks(address, state, config)
