"""Registry of the bundled charts and their mutator sets."""

from dataclasses import dataclass, field

from workshop_manifests.charts import core_workshop_infra, flux, kubernetes_dashboard
from workshop_manifests.errors import ChartNotFoundError


@dataclass
class Chart:
    name: str
    pipe_mutators: list = field(default_factory=list)
    values_mutators: list = field(default_factory=list)


def _build(module) -> Chart:
    return Chart(
        name=module.NAME,
        pipe_mutators=module.pipe_mutators() if hasattr(module, 'pipe_mutators') else [],
        values_mutators=module.values_mutators() if hasattr(module, 'values_mutators') else [],
    )


CHART_MODULES = {
    m.NAME: m for m in (core_workshop_infra, kubernetes_dashboard, flux)
}


def list_charts() -> list[str]:
    return sorted(CHART_MODULES)


def get_chart(name: str) -> Chart:
    if name not in CHART_MODULES:
        raise ChartNotFoundError(name, list_charts())
    return _build(CHART_MODULES[name])
