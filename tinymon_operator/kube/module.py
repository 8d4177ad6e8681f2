import os

from injector import Module, provider, singleton
from kubernetes import client, config
from kubernetes.client import ApiClient
from kubernetes.config import ConfigException
from loguru import logger


class KubeModule(Module):
    """Dependency injection module for Kubernetes client."""

    @provider
    @singleton
    def get_kube_client(self) -> ApiClient:
        """Get a Kubernetes API client, preferring in-cluster configuration."""
        try:
            logger.debug("Loading in-cluster Kubernetes configuration")
            config.load_incluster_config()
            return client.ApiClient()
        except ConfigException:
            pass

        logger.trace(f"Loading kubeconfig from {os.getenv('KUBECONFIG')}")
        config.load_kube_config(os.getenv("KUBECONFIG"))

        return client.ApiClient()
