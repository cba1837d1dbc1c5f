"""YAML mutation pipelines for workshop cluster manifests and values files."""

from workshop_manifests.errors import ChartNotFoundError, ManifestError, ParameterError  # noqa: F401
from workshop_manifests.params import ClusterNumber, Parameters, resolve_parameters  # noqa: F401
from workshop_manifests.pipeline import (  # noqa: F401
    Mutator,
    ResourceType,
    ValuesMutator,
    kube_mutator,
    kube_pipe_with_mutators,
    values_mutator,
    values_pipe_for_functions,
    with_namespace,
)

__version__ = "0.1.0"

__all__ = [
    "ChartNotFoundError",
    "ClusterNumber",
    "ManifestError",
    "Mutator",
    "ParameterError",
    "Parameters",
    "ResourceType",
    "ValuesMutator",
    "kube_mutator",
    "kube_pipe_with_mutators",
    "resolve_parameters",
    "values_mutator",
    "values_pipe_for_functions",
    "with_namespace",
]
