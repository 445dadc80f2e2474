import argparse
import csv
import time
from typing import Callable, Dict, List, NamedTuple, Tuple

import jax
import jax.numpy as jnp
import numpy as np

import at_index as ai


class Workload(NamedTuple):
    name: str
    kind: str
    build: Callable[[], Callable[[], object]]


_DATA = [1, 2, 3]


def _host(fn, idx):
    data = _DATA

    def _run():
        return fn(data, idx)

    return _run


def _native_index():
    data = _DATA
    idx = 2

    def _run():
        return data[idx]

    return _run


def _device_native():
    x = jnp.asarray(_DATA, dtype=jnp.int32)
    fn = jax.jit(lambda a, i: a[i])
    i = jnp.int32(2)

    def _run():
        return fn(x, i).block_until_ready()

    return _run


def _device_at(mode):
    x = jnp.asarray(_DATA, dtype=jnp.int32)
    fn = jax.jit(lambda a, i: ai.at_jnp(a, i, "bench.at_jnp", mode=mode))
    i = jnp.int32(-1)

    def _run():
        return fn(x, i).block_until_ready()

    return _run


def _build_workloads() -> List[Workload]:
    unchecked = ai.make_accessors("unchecked")
    return [
        Workload("normal_index", "host", _native_index),
        Workload("at_index", "host", lambda: _host(ai.at, 2)),
        Workload("at_index_neg", "host", lambda: _host(ai.at, -1)),
        Workload("at_index_i64", "host", lambda: _host(ai.at, np.int64(2))),
        Workload("at_index_i8", "host", lambda: _host(ai.at, np.int8(-1))),
        Workload("at_unchecked", "host", lambda: _host(unchecked.at, -1)),
        Workload("jnp_native", "device", _device_native),
        Workload("at_jnp_checked", "device", lambda: _device_at(ai.BoundsMode.CHECKED)),
        Workload("at_jnp_unchecked", "device", lambda: _device_at(ai.BoundsMode.UNCHECKED)),
    ]


def _parse_csv_list(raw: str) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _time_workload(run: Callable[[], object], iters: int) -> float:
    t0 = time.perf_counter()
    for _ in range(iters):
        run()
    return (time.perf_counter() - t0) * 1e9 / max(1, iters)


def _write_csv(path: str, rows: List[Dict[str, object]]) -> None:
    fieldnames: List[str] = []
    for row in rows:
        for key in row.keys():
            if key not in fieldnames:
                fieldnames.append(key)
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)


def _summarize(rows: List[Dict[str, object]]) -> None:
    grouped: Dict[Tuple[str, str], List[float]] = {}
    for row in rows:
        key = (row["workload"], row["kind"])
        grouped.setdefault(key, []).append(float(row["ns_per_iter"]))
    print("Summary (mean ns/iter):")
    for (workload, kind), values in sorted(grouped.items()):
        mean_ns = sum(values) / max(1, len(values))
        print(f"  {workload:18s} {kind:7s} {mean_ns:10.1f} ns")


def main() -> None:
    parser = argparse.ArgumentParser(description="Compare at() indexing against native indexing.")
    parser.add_argument("--out", default="bench_at.csv", help="CSV output path.")
    parser.add_argument("--runs", type=int, default=5, help="Timed runs per workload.")
    parser.add_argument("--iters", type=int, default=100_000, help="Host iterations per run.")
    parser.add_argument(
        "--device-iters", type=int, default=1_000, help="Device iterations per run."
    )
    parser.add_argument("--workloads", default="", help="Comma list to filter workloads.")
    args = parser.parse_args()

    selected = set(_parse_csv_list(args.workloads))
    rows: List[Dict[str, object]] = []
    for workload in _build_workloads():
        if selected and workload.name not in selected:
            continue
        run = workload.build()
        # Warmup (also triggers jit compilation).
        run()
        iters = args.iters if workload.kind == "host" else args.device_iters
        for run_idx in range(args.runs):
            rows.append(
                {
                    "workload": workload.name,
                    "kind": workload.kind,
                    "run": run_idx,
                    "iters": iters,
                    "ns_per_iter": _time_workload(run, iters),
                }
            )

    _write_csv(args.out, rows)
    _summarize(rows)
    print(f"Wrote {len(rows)} rows to {args.out}")


if __name__ == "__main__":
    main()
