"""flux: point each cluster's flux at its own directory of the workshop repo."""

from workshop_manifests.params import ClusterNumber
from workshop_manifests.pipeline import values_mutator

NAME = "flux"


def with_cluster_number():
    def set_git_source(values):
        wc = values['workshopctl']
        git = values.get('git')
        if git is None:
            git = values['git'] = {}
        git['url'] = wc['gitRepo']
        git['path'] = ClusterNumber(wc['clusterNumber']).cluster_dir + '/'
        return values

    return values_mutator(set_git_source)


def values_mutators():
    return [
        with_cluster_number(),
    ]
