"""
Mutation pipelines over YAML document streams.

Two flavours:

- kube pipe: every document of a manifest stream is run through a list of
  mutators, each optionally filtered by resource type and name.
- values pipe: the first document of a values file gets the pipeline
  parameters under ``workshopctl`` and is then run through a list of
  values mutators.

Both read everything, transform, then write everything.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Callable, Optional

import yaml

from workshop_manifests.errors import ManifestError
from workshop_manifests.params import Parameters

log = logging.getLogger(__name__)

Transform = Callable[[dict], Optional[dict]]


# ── YAML stream I/O ──────────────────────────────────────────────────────────

class ManifestDumper(yaml.SafeDumper):
    pass


def literal_str_representer(dumper, data):
    if '\n' in data:
        return dumper.represent_scalar('tag:yaml.org,2002:str', data, style='|')
    return dumper.represent_scalar('tag:yaml.org,2002:str', data)


ManifestDumper.add_representer(str, literal_str_representer)


def read_yaml_stream(stream) -> list:
    """Load every document of a YAML stream (a string or file object)."""
    try:
        return list(yaml.safe_load_all(stream))
    except yaml.YAMLError as e:
        raise ManifestError(f"invalid YAML input: {e}") from e


def dump_yaml_stream(documents, stream=None):
    """Write documents as a ``---`` separated stream, or return it as a string."""
    return yaml.dump_all(
        documents, stream,
        Dumper=ManifestDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        explicit_start=True,
    )


def unescape_go_templates(text: str) -> str:
    r"""Turn ``\{`` / ``\}`` back into literal braces."""
    return text.replace('\\{', '{').replace('\\}', '}')


# ── Mutators ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ResourceType:
    api_version: str
    kind: str

    def matches(self, document: dict) -> bool:
        return (document.get('apiVersion') == self.api_version
                and document.get('kind') == self.kind)

    def __str__(self):
        return f"{self.api_version}/{self.kind}"


DEPLOYMENT = ResourceType('apps/v1', 'Deployment')
SERVICE = ResourceType('v1', 'Service')
CONFIG_MAP = ResourceType('v1', 'ConfigMap')
SECRET = ResourceType('v1', 'Secret')
NAMESPACE = ResourceType('v1', 'Namespace')
INGRESS = ResourceType('networking.k8s.io/v1', 'Ingress')


@dataclass(frozen=True)
class Mutator:
    """Transform applied to manifest documents passing both filters."""
    resource_type: Optional[ResourceType]
    name: Optional[str]
    func: Transform

    def matches(self, document) -> bool:
        if not isinstance(document, dict):
            return False
        if self.resource_type is not None and not self.resource_type.matches(document):
            return False
        if self.name:
            metadata = document.get('metadata')
            if not isinstance(metadata, dict) or metadata.get('name') != self.name:
                return False
        return True

    def describe(self) -> str:
        target = str(self.resource_type) if self.resource_type else '*'
        if self.name:
            target += f" {self.name}"
        return f"{getattr(self.func, '__name__', 'mutator')} [{target}]"


@dataclass(frozen=True)
class ValuesMutator:
    func: Optional[Transform]


def kube_mutator(resource_type, name, func) -> Mutator:
    return Mutator(resource_type=resource_type, name=name, func=func)


def values_mutator(func) -> ValuesMutator:
    return ValuesMutator(func=func)


def with_namespace(ns: str) -> Mutator:
    """Move every document into namespace ``ns``."""
    def set_namespace(obj):
        metadata = obj.get('metadata')
        if not isinstance(metadata, dict):
            metadata = obj['metadata'] = {}
        metadata['namespace'] = ns
        return obj

    set_namespace.__name__ = f"with_namespace({ns})"
    return kube_mutator(None, None, set_namespace)


def _run(func, obj):
    result = func(obj)
    return obj if result is None else result


# ── Pipelines ────────────────────────────────────────────────────────────────

def apply_mutators(documents, mutators) -> list:
    """Run every mutator over every document; empty documents are dropped."""
    out = []
    for doc in documents:
        if doc is None:
            continue
        if not isinstance(doc, dict):
            log.debug("Passing through non-mapping document of type %s", type(doc).__name__)
            out.append(doc)
            continue
        for m in mutators:
            if m.matches(doc):
                log.debug("Applying %s", m.describe())
                doc = _run(m.func, doc)
        out.append(doc)
    return out


def kube_pipe_with_mutators(mutators, stream_in, stream_out=None) -> list:
    if stream_out is None:
        stream_out = sys.stdout
    documents = read_yaml_stream(stream_in)
    log.info("Read %d documents", len(documents))
    result = apply_mutators(documents, mutators)
    dump_yaml_stream(result, stream_out)
    log.info("Wrote %d documents", len(result))
    return result


def apply_values_mutators(values, params: Parameters, mutators) -> dict:
    """Seed ``values`` with ``workshopctl`` params and run the mutators over it."""
    if not values:
        values = {}
    elif not isinstance(values, dict):
        raise ManifestError(f"values document must be a mapping, got {type(values).__name__}")

    values['workshopctl'] = params.to_map()
    for m in mutators:
        if not m.func:
            continue
        values = _run(m.func, values)
    return values


def read_values_file(path) -> Optional[list]:
    """Documents of the values file, or None if it cannot be read."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return read_yaml_stream(f)
    except OSError as e:
        log.info("No values file at %s (%s); emitting parameters only", path, e.strerror or e)
        return None
    except UnicodeDecodeError as e:
        raise ManifestError(f"values file {path} is not valid UTF-8: {e.reason}") from e


def values_pipe_for_functions(mutators, params: Parameters, values_path='values.yaml',
                              stream_out=None) -> dict:
    if stream_out is None:
        stream_out = sys.stdout
    documents = read_values_file(values_path)
    if documents is None:
        values = {'workshopctl': params.to_map()}
    else:
        values = apply_values_mutators(documents[0] if documents else None, params, mutators)
    dump_yaml_stream([values], stream_out)
    return values
