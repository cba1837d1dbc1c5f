"""kubernetes-dashboard: per-cluster ingress host, pinned to kube-system."""

from workshop_manifests.params import ClusterNumber
from workshop_manifests.pipeline import SERVICE, kube_mutator, values_mutator, with_namespace

NAME = "kubernetes-dashboard"
RESOURCE_NAME = "workshopctl-kubernetes-dashboard"
CLUSTER_SERVICE_LABEL = "kubernetes.io/cluster-service"
# The dashboard only works from kube-system
NAMESPACE = "kube-system"


def without_cluster_service_label(name):
    def drop_label(svc):
        labels = (svc.get('metadata') or {}).get('labels') or {}
        labels.pop(CLUSTER_SERVICE_LABEL, None)
        return svc

    return kube_mutator(SERVICE, name, drop_label)


def with_custom_ingress_host():
    def set_ingress_host(values):
        wc = values['workshopctl']
        ingress = values.get('ingress')
        if ingress is None:
            ingress = values['ingress'] = {}
        ingress['hosts'] = [ClusterNumber(wc['clusterNumber']).domain(wc['domain'])]
        return values

    return values_mutator(set_ingress_host)


def pipe_mutators():
    return [
        without_cluster_service_label(RESOURCE_NAME),
        with_namespace(NAMESPACE),
    ]


def values_mutators():
    return [
        with_custom_ingress_host(),
    ]
