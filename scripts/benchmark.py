#!/usr/bin/env python3
"""Benchmark script for injectcheck performance testing.

Outputs results in JSON format compatible with github-action-benchmark.
"""

from __future__ import annotations

import argparse
import json
import time
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from injectcheck.domain.model.component import Component


def benchmark_import_time() -> float:
    """Measure import time of injectcheck package."""
    start = time.perf_counter()
    import injectcheck  # noqa: F401

    return time.perf_counter() - start


def service(package: str, name: str, *needs: str) -> Component:
    """Component providing its own type and injecting the named services."""
    from injectcheck.domain.model.component import Component, Dependency, Provider

    return Component(
        class_name=name,
        package_name=package,
        providers=(Provider(method_name=f"provide{name}", return_type=f"{package}.{name}"),),
        dependencies=tuple(
            Dependency(property_name=need.lower(), target_type=f"{package}.{need}")
            for need in needs
        ),
    )


def ring(size: int) -> tuple[Component, ...]:
    """size services, each injecting the next, the last the first."""
    return tuple(service("bench.ring", f"R{i}", f"R{(i + 1) % size}") for i in range(size))


def layered(size: int) -> tuple[Component, ...]:
    """Acyclic project: each service injects the two services after it."""
    names = [f"S{i}" for i in range(size)]
    return tuple(
        service("bench.layered", name, *names[i + 1 : i + 3]) for i, name in enumerate(names)
    )


def benchmark_analysis(components: tuple[Component, ...]) -> float:
    """Measure one full pipeline run."""
    from injectcheck.application.services.engine import AnalysisEngine

    engine = AnalysisEngine()
    start = time.perf_counter()
    engine.analyze(components, "benchmark")
    return time.perf_counter() - start


def main() -> None:
    """Run benchmarks and output results."""
    parser = argparse.ArgumentParser(description="Run injectcheck benchmarks")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("benchmark-results.json"),
        help="Output file for benchmark results",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=500,
        help="Component count of the layered project",
    )
    args = parser.parse_args()

    results = [
        {
            "name": "Import Time",
            "unit": "seconds",
            "value": benchmark_import_time(),
        },
        {
            "name": "Analysis (50-component ring)",
            "unit": "seconds",
            "value": benchmark_analysis(ring(50)),
        },
        {
            "name": f"Analysis ({args.size}-component layered project)",
            "unit": "seconds",
            "value": benchmark_analysis(layered(args.size)),
        },
    ]

    args.output.write_text(json.dumps(results, indent=2))
    print(f"Benchmark results written to {args.output}")
    for r in results:
        print(f"  {r['name']}: {r['value']:.4f} {r['unit']}")


if __name__ == "__main__":
    main()
