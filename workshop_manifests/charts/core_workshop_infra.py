"""core-workshop-infra: hand external-dns its DigitalOcean token, run in ``workshopctl``."""

from workshop_manifests.errors import ManifestError
from workshop_manifests.pipeline import DEPLOYMENT, kube_mutator, with_namespace

NAME = "core-workshop-infra"
NAMESPACE = "workshopctl"
EXTERNAL_DNS = "external-dns"


def with_do_token_env_var():
    def add_do_token(dep):
        try:
            container = dep['spec']['template']['spec']['containers'][0]
        except (KeyError, IndexError, TypeError) as e:
            raise ManifestError(
                f"Deployment {EXTERNAL_DNS} has no containers to add DO_TOKEN to"
            ) from e
        env = container.get('env')
        if env is None:
            env = container['env'] = []
        env.append({
            'name': 'DO_TOKEN',
            'valueFrom': {
                'secretKeyRef': {
                    'name': EXTERNAL_DNS,
                    'key': 'DO_TOKEN',
                },
            },
        })
        return dep

    return kube_mutator(DEPLOYMENT, EXTERNAL_DNS, add_do_token)


def pipe_mutators():
    return [
        with_do_token_env_var(),
        with_namespace(NAMESPACE),
    ]
