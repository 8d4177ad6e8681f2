from injector import Injector
from loguru import logger
import kopf

from tinymon_operator.common.annotations import is_enabled
from tinymon_operator.common.resync import ResyncLoop, enabled_objects
from tinymon_operator.common.synchronizer import annotations_of, run_sync
from tinymon_operator.kube.providers import FilesystemUsageProvider, NodeMetricsProvider
from tinymon_operator.node.manager import NodeSynchronizer
from tinymon_operator.node.state import NodeState

injector: Injector = None


def register_handlers(inj: Injector):
    global injector
    injector = inj
    logger.info("Registering Node handlers...")
    inj.get(NodeSynchronizer)
    inj.get(ResyncLoop).register("nodes", resync_nodes)


def current_state(body, name: str) -> NodeState:
    """Node state with live telemetry, fetched only for enabled nodes."""
    if not is_enabled(annotations_of(body)):
        return NodeState.from_body(body)

    usage = injector.get(NodeMetricsProvider).usage(name)
    filesystem = injector.get(FilesystemUsageProvider).usage(name)
    return NodeState.from_body(body, usage=usage, filesystem=filesystem)


@kopf.on.event("nodes")
def node_event(type, body, name, **kwargs):
    synchronizer = injector.get(NodeSynchronizer)
    identity = synchronizer.identity(name)
    state = None if type == "DELETED" else current_state(body, name)
    run_sync(synchronizer, identity, state)


def resync_nodes():
    synchronizer = injector.get(NodeSynchronizer)
    for body in enabled_objects("nodes", namespaced=False):
        name = body["metadata"]["name"]
        run_sync(synchronizer, synchronizer.identity(name), current_state(body, name))
