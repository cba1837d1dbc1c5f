"""
Pipeline parameters.

Values pipelines see the parameters under the ``workshopctl`` key of the
values document. They are resolved, later sources winning, from:

1. built-in defaults
2. an optional YAML params file (same keys as ``-p``)
3. the WORKSHOPCTL_CLUSTER environment variable (cluster number only)
4. ``-p key=value`` overrides
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

from workshop_manifests.errors import ParameterError

log = logging.getLogger(__name__)

ENV_CLUSTER = "WORKSHOPCTL_CLUSTER"
CLUSTERS_DIR = "clusters"


class ClusterNumber(str):
    """
    Cluster identifier as used in hostnames and directories.

    Numbers are zero-padded to two digits ("3" -> "03") and must be >= 1.
    Anything that is not an integer ("dev") is a custom name, kept verbatim.
    """

    def __new__(cls, value):
        text = '' if value is None else str(value).strip()
        if not text:
            raise ParameterError("cluster number must not be empty")
        try:
            n = int(text)
        except ValueError:
            return super().__new__(cls, text)
        if n < 1:
            raise ParameterError(f"cluster number must be >= 1, got {text}")
        return super().__new__(cls, f"{n:02d}")

    @property
    def subdomain(self) -> str:
        return f"cluster-{self}"

    def domain(self, root_domain: str) -> str:
        return f"{self.subdomain}.{root_domain}"

    @property
    def cluster_dir(self) -> str:
        return f"{CLUSTERS_DIR}/{self}"


@dataclass
class Parameters:
    cluster_number: str = "01"
    domain: str = "kubernetesfinland.com"
    git_repo: str = "https://github.com/luxas/workshopctl"
    provider: str = "digitalocean"

    def to_map(self) -> dict:
        """Map as exposed to values mutators under ``workshopctl``."""
        return {
            'clusterNumber': self.cluster_number,
            'domain': self.domain,
            'gitRepo': self.git_repo,
            'provider': self.provider,
        }

    def cluster_domain(self) -> str:
        return ClusterNumber(self.cluster_number).domain(self.domain)


# -p key -> Parameters field
PARAM_KEYS = {
    'cluster-number': 'cluster_number',
    'domain': 'domain',
    'git-repo': 'git_repo',
    'provider': 'provider',
}


def _check_key(key: str, source: str) -> str:
    if key not in PARAM_KEYS:
        raise ParameterError(
            f"unknown parameter {key!r} in {source} (expected one of: {', '.join(PARAM_KEYS)})"
        )
    return PARAM_KEYS[key]


def parse_param_overrides(items) -> dict:
    """Parse ``key=value`` strings into a ``{field: value}`` dict."""
    overrides = {}
    for item in items or []:
        key, sep, value = item.partition('=')
        if not sep:
            raise ParameterError(f"parameter {item!r} is not in key=value form")
        overrides[_check_key(key.strip(), '-p')] = value
    return overrides


def load_params_file(path: Path) -> dict:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ParameterError(f"cannot read params file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ParameterError(f"params file {path} is not valid UTF-8: {e.reason}") from e
    except yaml.YAMLError as e:
        raise ParameterError(f"invalid YAML in params file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParameterError(f"params file {path} must contain a mapping")
    loaded = {}
    for key, value in data.items():
        field_name = _check_key(str(key), str(path))
        # Empty keys ("domain:") leave the lower-priority value in place
        if value is not None:
            loaded[field_name] = str(value)
    return loaded


def resolve_parameters(overrides=None, params_file=None, environ=None) -> Parameters:
    if environ is None:
        environ = os.environ

    params = Parameters()
    if params_file is not None:
        params = replace(params, **load_params_file(Path(params_file)))
        log.debug("Loaded parameters from %s", params_file)

    cluster_env = environ.get(ENV_CLUSTER, '').strip()
    if cluster_env:
        params = replace(params, cluster_number=cluster_env)
        log.debug("Cluster number %s taken from %s", cluster_env, ENV_CLUSTER)

    if overrides:
        known = {f.name for f in fields(Parameters)}
        params = replace(params, **{k: v for k, v in overrides.items() if k in known})

    params.cluster_number = str(ClusterNumber(params.cluster_number))
    return params
