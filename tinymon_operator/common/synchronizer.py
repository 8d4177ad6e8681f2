from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, List, Mapping, Optional, TypeVar

from loguru import logger

from tinymon_operator.common.annotations import ResourceConfig, is_enabled, resolve
from tinymon_operator.common.identity import ResourceIdentity, ResourceKind
from tinymon_operator.tinymon.client import TinyMonClient, TinyMonException
from tinymon_operator.tinymon.models import Check, Host, Result

S = TypeVar("S")


class SyncException(Exception):
    """Raised when a sync pass was aborted or only partially applied"""
    pass


@dataclass
class SyncOutcome:
    address: str
    deleted: bool = False
    host: Optional[Host] = None
    checks: List[Check] = field(default_factory=list)
    results: List[Result] = field(default_factory=list)


class Synchronizer(ABC, Generic[S]):
    """Converges one resource's host, checks and results in TinyMon.

    Subclasses supply the kind, the default interval, the host description,
    the check definitions and the pushed results. The protocol itself is
    stateless: every pass recomputes the desired state from the live resource.
    """

    kind: ResourceKind
    default_interval: int = 60

    def __init__(self, client: TinyMonClient, cluster: str):
        self.client = client
        self.cluster = cluster

    def identity(self, name: str, namespace: Optional[str] = None) -> ResourceIdentity:
        return ResourceIdentity(cluster=self.cluster, kind=self.kind, name=name, namespace=namespace)

    @abstractmethod
    def describe(self, identity: ResourceIdentity, state: S) -> str:
        ...

    @abstractmethod
    def build_checks(self, address: str, state: S, config: ResourceConfig) -> List[Check]:
        ...

    def derive_results(self, address: str, state: S, config: ResourceConfig) -> List[Result]:
        """Push results for this pass, none for kinds that only declare pull checks."""
        return []

    def build_host(self, identity: ResourceIdentity, state: S, config: ResourceConfig) -> Host:
        return Host(
            name=config.display_name,
            address=identity.address,
            description=self.describe(identity, state),
            topic=config.topic,
            enabled=True,
        )

    def sync(self, identity: ResourceIdentity, state: Optional[S]) -> SyncOutcome:
        """Run one sync pass for a resource.

        Args:
            identity: Identity of the resource
            state: Current typed state, or None if the resource is gone

        Returns:
            SyncOutcome: What was applied to TinyMon

        Raises:
            SyncException: If a remote call failed
        """
        if state is None or not is_enabled(state.annotations):
            return self.remove(identity, "deleted" if state is None else "disabled")

        address, config = resolve(identity, state.annotations, self.default_interval)
        host = self.build_host(identity, state, config)

        logger.info(f"Syncing {identity} to TinyMon as {address}")
        try:
            self.client.upsert_host(host)
        except TinyMonException as e:
            logger.error(f"Failed to upsert host {address}: {e}")
            raise SyncException(f"Failed to upsert host {address}: {e}") from e

        outcome = SyncOutcome(address=address, host=host)
        failed_checks = []
        for check in self.build_checks(address, state, config):
            try:
                self.client.upsert_check(check)
                outcome.checks.append(check)
            except TinyMonException as e:
                logger.error(f"Failed to upsert {check.type} check for {address}: {e}")
                failed_checks.append(check.type)

        # Results only for checks that exist on the remote side
        registered = {check.type for check in outcome.checks}
        results = [r for r in self.derive_results(address, state, config) if r.check_type in registered]
        if results:
            try:
                if len(results) == 1:
                    self.client.push_result(results[0])
                else:
                    self.client.push_bulk(results, host_address=address)
            except TinyMonException as e:
                logger.error(f"Failed to push results for {address}: {e}")
                raise SyncException(f"Failed to push results for {address}: {e}") from e
            outcome.results = results

        if failed_checks:
            raise SyncException(f"Failed to upsert checks {', '.join(failed_checks)} for {address}")

        logger.debug(f"Synced {address}: {len(outcome.checks)} checks, {len(outcome.results)} results")
        return outcome

    def remove(self, identity: ResourceIdentity, reason: str) -> SyncOutcome:
        address = identity.address
        logger.info(f"{identity} {reason}, removing {address} from TinyMon")
        try:
            if not self.client.delete_host(address):
                logger.debug(f"Host {address} was already gone")
        except TinyMonException as e:
            logger.error(f"Failed to delete host {address}: {e}")
            raise SyncException(f"Failed to delete host {address}: {e}") from e
        return SyncOutcome(address=address, deleted=True)


def annotations_of(body: Mapping[str, Any]) -> dict:
    return dict((body.get("metadata") or {}).get("annotations") or {})


def run_sync(synchronizer: Synchronizer, identity: ResourceIdentity, state) -> Optional[SyncOutcome]:
    """Run a sync pass from a kopf handler, logging failures instead of raising.

    A failed pass is retried by the next event or resync loop pass.
    """
    try:
        return synchronizer.sync(identity, state)
    except SyncException as e:
        logger.error(f"Sync of {identity} failed, will retry on the next trigger: {e}")
        return None
