"""Live Kubernetes API access for metering custom resources."""

from kubemeter.kube.client import KubeAPIClient

__all__ = ["KubeAPIClient"]
