"""
Run a chart's mutation pipeline.

Usage:
    workshop-manifests pipe kubernetes-dashboard -i rendered.yaml
    workshop-manifests values flux --values charts/flux/values.yaml -p cluster-number=3
    workshop-manifests unescape -i chart.yaml -o chart.yaml
    workshop-manifests list
"""

import argparse
import io
import logging
import sys
from pathlib import Path

from workshop_manifests import __version__
from workshop_manifests.charts import get_chart, list_charts
from workshop_manifests.errors import ManifestError
from workshop_manifests.params import parse_param_overrides, resolve_parameters
from workshop_manifests.pipeline import (
    kube_pipe_with_mutators,
    unescape_go_templates,
    values_pipe_for_functions,
)

log = logging.getLogger("workshop_manifests")


def read_input(path) -> str:
    """Whole input text, from stdin when no path (or ``-``) is given."""
    name = 'stdin' if path is None or str(path) == '-' else str(path)
    try:
        if name == 'stdin':
            return sys.stdin.read()
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except OSError as e:
        raise ManifestError(f"cannot read {name}: {e.strerror}") from e
    except UnicodeDecodeError as e:
        raise ManifestError(f"{name} is not valid UTF-8: {e.reason} at byte {e.start}") from e


def write_output(path, text: str):
    if path is None or str(path) == '-':
        sys.stdout.write(text)
        return
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
    except OSError as e:
        raise ManifestError(f"cannot write {path}: {e.strerror}") from e


def cmd_pipe(args) -> int:
    chart = get_chart(args.chart)
    if not chart.pipe_mutators:
        log.warning("Chart %s has no manifest mutators; documents pass through unchanged", chart.name)
    text = read_input(args.input)
    # The output is only opened once the whole stream went through
    buf = io.StringIO()
    kube_pipe_with_mutators(chart.pipe_mutators, text, buf)
    write_output(args.output, buf.getvalue())
    return 0


def cmd_values(args) -> int:
    chart = get_chart(args.chart)
    params = resolve_parameters(parse_param_overrides(args.param), args.params_file)
    log.info("Cluster %s: %s", params.cluster_number, params.cluster_domain())
    buf = io.StringIO()
    values_pipe_for_functions(chart.values_mutators, params, args.values, buf)
    write_output(args.output, buf.getvalue())
    return 0


def cmd_unescape(args) -> int:
    text = read_input(args.input)
    write_output(args.output, unescape_go_templates(text))
    return 0


def cmd_list(args) -> int:
    for name in list_charts():
        chart = get_chart(name)
        kinds = []
        if chart.pipe_mutators:
            kinds.append(f"pipe ({len(chart.pipe_mutators)} mutators)")
        if chart.values_mutators:
            kinds.append(f"values ({len(chart.values_mutators)} mutators)")
        print(f"{name}: {', '.join(kinds)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workshop-manifests",
        description="Patch workshop manifests and values files",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("pipe", help="Mutate a manifest stream")
    p.add_argument("chart", help="Chart name (see 'list')")
    p.add_argument("-i", "--input", type=Path, help="Input YAML stream (default: stdin)")
    p.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    p.set_defaults(func=cmd_pipe)

    p = sub.add_parser("values", help="Render a chart's values file for one cluster")
    p.add_argument("chart", help="Chart name (see 'list')")
    p.add_argument("--values", type=Path, default=Path("values.yaml"),
                   help="Values file to start from (default: values.yaml)")
    p.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    p.add_argument("-p", "--param", action="append", default=[], metavar="KEY=VALUE",
                   help="cluster-number, domain, git-repo or provider")
    p.add_argument("--params-file", type=Path, help="YAML file with parameters")
    p.set_defaults(func=cmd_values)

    p = sub.add_parser("unescape", help=r"Turn \{ and \} back into braces")
    p.add_argument("-i", "--input", type=Path, help="Input file (default: stdin)")
    p.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    p.set_defaults(func=cmd_unescape)

    p = sub.add_parser("list", help="List bundled charts")
    p.set_defaults(func=cmd_list)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )

    try:
        return args.func(args)
    except ManifestError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
