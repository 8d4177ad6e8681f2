# tests/test_providers.py

import json
from decimal import Decimal
from unittest.mock import MagicMock, patch

from kubernetes.client.exceptions import ApiException

from tinymon_operator.kube.providers import (
    BackupProvider,
    FilesystemUsage,
    FilesystemUsageProvider,
    NodeMetricsProvider,
    filesystem_usage_from_summary,
)


def test_filesystem_usage_prefers_used_bytes():
    summary = {"node": {"fs": {"capacityBytes": 100, "usedBytes": 40, "availableBytes": 50}}}
    assert filesystem_usage_from_summary(summary) == FilesystemUsage(used_bytes=40, capacity_bytes=100)


def test_filesystem_usage_from_available_bytes():
    summary = {"node": {"fs": {"capacityBytes": 100, "availableBytes": 70}}}
    assert filesystem_usage_from_summary(summary) == FilesystemUsage(used_bytes=30, capacity_bytes=100)


def test_filesystem_usage_without_data():
    assert filesystem_usage_from_summary({"node": {}}) is None
    assert filesystem_usage_from_summary({"node": {"fs": {"capacityBytes": 0}}}) is None
    assert filesystem_usage_from_summary({}) is None


@patch("tinymon_operator.kube.providers.client.CoreV1Api")
def test_filesystem_provider_reads_stats_summary(mock_core_v1_api):
    response = MagicMock()
    response.data = json.dumps({"node": {"fs": {"capacityBytes": 200, "usedBytes": 50}}}).encode()
    mock_core_v1_api.return_value.connect_get_node_proxy_with_path.return_value = response

    usage = FilesystemUsageProvider(MagicMock()).usage("worker-1")

    assert usage == FilesystemUsage(used_bytes=50, capacity_bytes=200)
    mock_core_v1_api.return_value.connect_get_node_proxy_with_path.assert_called_once_with(
        "worker-1", "stats/summary", _preload_content=False
    )


@patch("tinymon_operator.kube.providers.client.CoreV1Api")
def test_filesystem_provider_unavailable(mock_core_v1_api):
    mock_core_v1_api.return_value.connect_get_node_proxy_with_path.side_effect = ApiException(status=503)

    assert FilesystemUsageProvider(MagicMock()).usage("worker-1") is None


@patch("tinymon_operator.kube.providers.client.CustomObjectsApi")
def test_metrics_provider(mock_custom_objects_api):
    mock_custom_objects_api.return_value.get_cluster_custom_object.return_value = {
        "usage": {"cpu": "1500m", "memory": "2Gi"},
    }

    usage = NodeMetricsProvider(MagicMock()).usage("worker-1")

    assert usage.cpu_millicores == Decimal(1500)
    assert usage.memory_bytes == 2 * 1024 ** 3


@patch("tinymon_operator.kube.providers.client.CustomObjectsApi")
def test_metrics_provider_unavailable(mock_custom_objects_api):
    mock_custom_objects_api.return_value.get_cluster_custom_object.side_effect = ApiException(status=404)

    assert NodeMetricsProvider(MagicMock()).usage("worker-1") is None


@patch("tinymon_operator.kube.providers.kr8s.get")
def test_backup_provider_lists_namespace(mock_get):
    backup = MagicMock()
    backup.raw = {"metadata": {"name": "b-1"}}
    mock_get.return_value = [backup]

    assert BackupProvider().list_backups("db") == [{"metadata": {"name": "b-1"}}]
    mock_get.assert_called_once_with("backups.k8up.io", namespace="db")


@patch("tinymon_operator.kube.providers.kr8s.get")
def test_backup_provider_failure(mock_get):
    mock_get.side_effect = RuntimeError("no such resource")

    assert BackupProvider().list_backups("db") is None
