from __future__ import annotations

from cachetools.func import lru_cache  # type: ignore

from src.infra.config import ClusterConfig
from src.infra.k8s.controller import KubernetesController
from src.infra.k8s.sync import KubernetesControllerSync


def create_k8s_controller(cluster: ClusterConfig) -> KubernetesController:
    """Create the controller backend selected in the cluster configuration.

    Args:
        cluster: Cluster section of the configuration

    Returns:
        A Kr8sController or KubectlController
    """
    if cluster.backend == "kubectl":
        from src.infra.k8s.kubectl_controller import KubectlController

        return KubectlController(request_timeout=cluster.request_timeout)

    from src.infra.k8s.kr8s_controller import Kr8sController

    return Kr8sController(request_timeout=cluster.request_timeout)


@lru_cache(maxsize=4)
def get_k8s_controller_sync(cluster: ClusterConfig) -> KubernetesControllerSync:
    """Get a synchronous wrapper for the configured KubernetesController.

    Returns:
        An instance of KubernetesControllerSync wrapping the async controller
    """
    return KubernetesControllerSync(create_k8s_controller(cluster))
