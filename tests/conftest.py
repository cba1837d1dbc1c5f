"""Shared fixtures: sample manifest streams and values files."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'import workshop_manifests' works uninstalled
_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))


EXTERNAL_DNS_STREAM = """\
apiVersion: v1
kind: ServiceAccount
metadata:
  name: external-dns
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: external-dns
  labels:
    app: external-dns
spec:
  template:
    spec:
      containers:
      - name: external-dns
        image: registry.k8s.io/external-dns/external-dns:v0.13.5
        args:
        - --provider=digitalocean
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: traefik
spec:
  template:
    spec:
      containers:
      - name: traefik
        image: traefik:v2.10
"""

DASHBOARD_STREAM = """\
apiVersion: v1
kind: Service
metadata:
  name: workshopctl-kubernetes-dashboard
  labels:
    app: kubernetes-dashboard
    kubernetes.io/cluster-service: "true"
spec:
  ports:
  - port: 443
---
apiVersion: v1
kind: Service
metadata:
  name: metrics-scraper
  labels:
    kubernetes.io/cluster-service: "true"
"""


@pytest.fixture
def external_dns_stream() -> str:
    return EXTERNAL_DNS_STREAM


@pytest.fixture
def dashboard_stream() -> str:
    return DASHBOARD_STREAM


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("WORKSHOPCTL_CLUSTER", raising=False)
    return {}


@pytest.fixture
def values_file(tmp_path):
    def write(content: str, name: str = "values.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return write
