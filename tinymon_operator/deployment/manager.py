from typing import List, Tuple

from injector import inject, singleton

from tinymon_operator.common.annotations import ResourceConfig
from tinymon_operator.common.identity import ResourceIdentity, ResourceKind
from tinymon_operator.common.synchronizer import Synchronizer
from tinymon_operator.deployment.state import DeploymentState
from tinymon_operator.settings import Settings
from tinymon_operator.tinymon.client import TinyMonClient
from tinymon_operator.tinymon.models import Check, Result, Status

CHECK_TYPE = "status"


def deployment_status(state: DeploymentState) -> Tuple[str, str]:
    desired = state.replicas if state.replicas is not None else 1
    ready = state.ready_replicas
    available = state.available_replicas

    if ready == desired and available == desired:
        return Status.OK, f"{ready}/{desired} replicas ready"
    if ready == 0:
        return Status.CRITICAL, f"0/{desired} replicas ready"
    return Status.WARNING, f"{ready}/{desired} replicas ready"


@singleton
class DeploymentSynchronizer(Synchronizer[DeploymentState]):
    kind = ResourceKind.DEPLOYMENT
    default_interval = 60

    @inject
    def __init__(self, client: TinyMonClient, settings: Settings):
        super().__init__(client, settings.cluster)

    def describe(self, identity: ResourceIdentity, state: DeploymentState) -> str:
        return f"Deployment {state.namespace}/{state.name}"

    def build_checks(self, address: str, state: DeploymentState, config: ResourceConfig) -> List[Check]:
        return [Check(host_address=address, type=CHECK_TYPE, interval_seconds=config.check_interval_seconds)]

    def derive_results(self, address: str, state: DeploymentState, config: ResourceConfig) -> List[Result]:
        status, message = deployment_status(state)
        return [Result(host_address=address, check_type=CHECK_TYPE, status=status, message=message)]
