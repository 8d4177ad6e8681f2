from typing import List, Optional, Tuple

from injector import inject, singleton

from tinymon_operator.common.annotations import ResourceConfig
from tinymon_operator.common.formatting import GIB, quantity
from tinymon_operator.common.identity import ResourceIdentity, ResourceKind
from tinymon_operator.common.synchronizer import Synchronizer
from tinymon_operator.pvc.state import PVCState
from tinymon_operator.settings import Settings
from tinymon_operator.tinymon.client import TinyMonClient
from tinymon_operator.tinymon.models import Check, Result, Status

CHECK_TYPE = "status"

PHASE_STATUS = {
    "Bound": Status.OK,
    "Pending": Status.WARNING,
    "Lost": Status.CRITICAL,
}


def _details(state: PVCState) -> str:
    if state.size and state.storage_class:
        return f", {state.size} ({state.storage_class})"
    if state.size:
        return f", {state.size}"
    if state.storage_class:
        return f" ({state.storage_class})"
    return ""


def pvc_status(state: PVCState) -> Tuple[str, str]:
    status = PHASE_STATUS.get(state.phase)
    if status is None:
        return Status.UNKNOWN, f"Phase: {state.phase or 'Unknown'}{_details(state)}"
    return status, f"{state.phase}{_details(state)}"


def size_gib(state: PVCState) -> Optional[float]:
    size = quantity(state.size)
    if size is None:
        return None
    return float(size) / GIB


@singleton
class PVCSynchronizer(Synchronizer[PVCState]):
    kind = ResourceKind.PVC
    default_interval = 60

    @inject
    def __init__(self, client: TinyMonClient, settings: Settings):
        super().__init__(client, settings.cluster)

    def describe(self, identity: ResourceIdentity, state: PVCState) -> str:
        return f"PVC {state.namespace}/{state.name} ({state.size}, {state.storage_class})"

    def build_checks(self, address: str, state: PVCState, config: ResourceConfig) -> List[Check]:
        return [Check(host_address=address, type=CHECK_TYPE, interval_seconds=config.check_interval_seconds)]

    def derive_results(self, address: str, state: PVCState, config: ResourceConfig) -> List[Result]:
        status, message = pvc_status(state)
        return [Result(host_address=address, check_type=CHECK_TYPE, status=status, message=message,
                       value=size_gib(state))]
