"""Tests for parameter parsing and resolution."""

from __future__ import annotations

import pytest

from workshop_manifests.errors import ParameterError
from workshop_manifests.params import (
    ClusterNumber,
    Parameters,
    parse_param_overrides,
    resolve_parameters,
)


def test_defaults_to_map():
    assert Parameters().to_map() == {
        "clusterNumber": "01",
        "domain": "kubernetesfinland.com",
        "gitRepo": "https://github.com/luxas/workshopctl",
        "provider": "digitalocean",
    }


def test_cluster_number_formatting():
    n = ClusterNumber(3)
    assert str(n) == "03"
    assert n.subdomain == "cluster-03"
    assert n.domain("example.com") == "cluster-03.example.com"
    assert n.cluster_dir == "clusters/03"
    assert str(ClusterNumber("120")) == "120"


@pytest.mark.parametrize("bad", [0, -1, "-3", "00", "", "  ", None])
def test_cluster_number_rejects_invalid(bad):
    with pytest.raises(ParameterError):
        ClusterNumber(bad)


def test_parse_overrides():
    assert parse_param_overrides(["cluster-number=4", "domain=a.b=c"]) == {
        "cluster_number": "4",
        "domain": "a.b=c",
    }
    assert parse_param_overrides(None) == {}


@pytest.mark.parametrize("item", ["cluster-number", "color=red"])
def test_parse_overrides_rejects(item):
    with pytest.raises(ParameterError):
        parse_param_overrides([item])


def test_resolve_precedence(tmp_path):
    params_file = tmp_path / "params.yaml"
    params_file.write_text("cluster-number: 2\ndomain: file.example\nprovider: gke\n")

    params = resolve_parameters(params_file=params_file, environ={})
    assert (params.cluster_number, params.domain, params.provider) == ("02", "file.example", "gke")

    params = resolve_parameters(params_file=params_file, environ={"WORKSHOPCTL_CLUSTER": "5"})
    assert params.cluster_number == "05"
    assert params.domain == "file.example"

    params = resolve_parameters(
        {"cluster_number": "9", "domain": "cli.example"},
        params_file=params_file,
        environ={"WORKSHOPCTL_CLUSTER": "5"},
    )
    assert params.cluster_number == "09"
    assert params.domain == "cli.example"
    assert params.provider == "gke"


def test_resolve_keeps_non_numeric_cluster_number():
    params = resolve_parameters({"cluster_number": "dev"}, environ={})
    assert params.cluster_number == "dev"


def test_resolve_uses_process_environment(clean_env, monkeypatch):
    assert resolve_parameters().cluster_number == "01"
    monkeypatch.setenv("WORKSHOPCTL_CLUSTER", "12")
    assert resolve_parameters().cluster_number == "12"


def test_cluster_domain():
    assert Parameters(cluster_number="04", domain="example.com").cluster_domain() == "cluster-04.example.com"


@pytest.mark.parametrize(
    "content",
    [
        "color: red\n",  # unknown key
        "- a\n- b\n",  # not a mapping
        "a: [unclosed\n",  # invalid YAML
    ],
)
def test_params_file_errors(tmp_path, content):
    path = tmp_path / "params.yaml"
    path.write_text(content)
    with pytest.raises(ParameterError):
        resolve_parameters(params_file=path, environ={})


def test_params_file_missing(tmp_path):
    with pytest.raises(ParameterError):
        resolve_parameters(params_file=tmp_path / "nope.yaml", environ={})


def test_params_file_empty(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text("")
    assert resolve_parameters(params_file=path, environ={}) == Parameters()


def test_cluster_number_custom_name():
    n = ClusterNumber("dev")
    assert n == "dev"
    assert n.subdomain == "cluster-dev"
    assert n.domain("example.com") == "cluster-dev.example.com"
    assert n.cluster_dir == "clusters/dev"
    assert Parameters(cluster_number="dev", domain="example.com").cluster_domain() == "cluster-dev.example.com"


@pytest.mark.parametrize("value", ["-1", "0", "+0"])
def test_resolve_rejects_cluster_number_below_one(value):
    with pytest.raises(ParameterError):
        resolve_parameters(environ={"WORKSHOPCTL_CLUSTER": value})


def test_params_file_null_values_are_skipped(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text("domain:\nprovider: null\ncluster-number: 4\n")
    params = resolve_parameters(params_file=path, environ={})
    assert params.domain == "kubernetesfinland.com"
    assert params.provider == "digitalocean"
    assert params.cluster_number == "04"


def test_params_file_null_value_with_unknown_key(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text("color:\n")
    with pytest.raises(ParameterError):
        resolve_parameters(params_file=path, environ={})


def test_params_file_not_utf8(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_bytes(b"domain: \xff\xfe\n")
    with pytest.raises(ParameterError):
        resolve_parameters(params_file=path, environ={})
