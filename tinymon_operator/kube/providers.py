import json
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

import kr8s
from injector import inject, singleton
from kubernetes import client
from kubernetes.client import ApiClient
from kubernetes.client.exceptions import ApiException
from loguru import logger

from tinymon_operator.common.formatting import quantity


@dataclass(frozen=True)
class NodeUsage:
    cpu_millicores: Decimal
    memory_bytes: Decimal


@dataclass(frozen=True)
class FilesystemUsage:
    used_bytes: int
    capacity_bytes: int


@singleton
class NodeMetricsProvider:
    """Reads node CPU/memory usage from the metrics.k8s.io API."""

    @inject
    def __init__(self, api: ApiClient):
        self.custom = client.CustomObjectsApi(api)

    def usage(self, node_name: str) -> Optional[NodeUsage]:
        try:
            metrics = self.custom.get_cluster_custom_object("metrics.k8s.io", "v1beta1", "nodes", node_name)
        except ApiException as e:
            logger.warning(f"Metrics API not available for node {node_name}: {e.status} {e.reason}")
            return None
        except Exception as e:
            logger.warning(f"Failed to read metrics for node {node_name}: {e}")
            return None

        usage = metrics.get("usage") or {}
        cpu = quantity(usage.get("cpu"))
        memory = quantity(usage.get("memory"))
        if cpu is None or memory is None:
            logger.warning(f"Incomplete metrics for node {node_name}: {usage}")
            return None
        return NodeUsage(cpu_millicores=cpu * 1000, memory_bytes=memory)


@singleton
class FilesystemUsageProvider:
    """Reads node root filesystem usage from the kubelet stats summary."""

    @inject
    def __init__(self, api: ApiClient):
        self.core = client.CoreV1Api(api)

    def usage(self, node_name: str) -> Optional[FilesystemUsage]:
        try:
            response = self.core.connect_get_node_proxy_with_path(
                node_name, "stats/summary", _preload_content=False
            )
            summary = json.loads(response.data)
        except ApiException as e:
            logger.warning(f"Kubelet stats unavailable for node {node_name}: {e.status} {e.reason}")
            return None
        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to parse kubelet stats for node {node_name}: {e}")
            return None
        except Exception as e:
            logger.warning(f"Failed to read kubelet stats for node {node_name}: {e}")
            return None

        return filesystem_usage_from_summary(summary)


def filesystem_usage_from_summary(summary: dict) -> Optional[FilesystemUsage]:
    fs = ((summary or {}).get("node") or {}).get("fs") or {}
    capacity = fs.get("capacityBytes")
    if not capacity:
        return None

    used = fs.get("usedBytes")
    if used is None:
        available = fs.get("availableBytes")
        if available is None:
            return None
        used = capacity - available
    return FilesystemUsage(used_bytes=int(used), capacity_bytes=int(capacity))


@singleton
class BackupProvider:
    """Lists k8up Backup objects in a namespace."""

    def __init__(self):
        pass

    def list_backups(self, namespace: str) -> Optional[List[dict]]:
        """
        Args:
            namespace: Namespace of the backup schedule

        Returns:
            list: Raw Backup objects, or None if listing failed
        """
        try:
            return [backup.raw for backup in kr8s.get("backups.k8up.io", namespace=namespace)]
        except Exception as e:
            logger.error(f"Failed to list k8up backups in namespace {namespace}: {e}")
            return None
