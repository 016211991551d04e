"""Benchmark: tokenize and lint throughput.

Measures how many tokenize and lint passes over a generated module can
complete per second using the public verilint.tokenize() and
verilint.lint() APIs.
"""
from __future__ import annotations

import json
import sys
import time
from collections.abc import Callable
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import verilint

_ITERATIONS: int = 500

_BLOCK = """
  always_ff @(posedge clk or negedge rst_n) begin
    if (!rst_n) begin
      q{i} <= '0;
    end else if ((en && (sel == 2'b01)) || force_{i}) begin
      q{i} <= d{i};  // load
    end else
      q{i} <= q{i};
  end
"""

_SAMPLE = "module bench;\n" + "".join(_BLOCK.format(i=i) for i in range(50)) + "endmodule\n"


def _measure(operation: str, fn: Callable[[], object]) -> dict[str, object]:
    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        fn()
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": operation,
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _ITERATIONS * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_tokenize_throughput() -> dict[str, object]:
    """Benchmark tokenizing the sample module."""
    return _measure("tokenize_throughput", lambda: verilint.tokenize(_SAMPLE))


def bench_lint_throughput() -> dict[str, object]:
    """Benchmark tokenizing and linting the sample module with default rules."""
    return _measure("lint_throughput", lambda: verilint.lint(_SAMPLE))


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_tokenize_throughput, "tokenize_throughput_baseline.json"),
        (bench_lint_throughput, "lint_throughput_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
