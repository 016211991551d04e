#!/usr/bin/env python3
"""Example: linting Verilog for missing begin/end blocks

Runs the explicit-begin rule over a small counter module, once with the
defaults and once with ``else`` and ``always_ff`` checks switched off.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install verilint
"""
from __future__ import annotations

import verilint
from verilint.linter.config import parse_rules_flag

COUNTER = '''
module counter(input clk, input rst, output reg [3:0] q);
  always_ff @(posedge clk)
    if (rst) q <= 0;
    else q <= q + 1;   // bare statement
endmodule
'''


def main() -> None:
    print(f"verilint version: {verilint.__version__}")

    # Step 1: default configuration, every keyword checked
    for status in verilint.lint(COUNTER):
        print(f"\n{status.rule_name}: {len(status.violations)} finding(s)")
        for violation in status.sorted_violations():
            print("  " + violation.format("counter.sv", status.descriptor))

    # Step 2: relax the rule for always_ff and else
    settings = parse_rules_flag("explicit-begin=always_ff_enable:false;else_enable:false")
    for status in verilint.lint(COUNTER, settings):
        print(f"\nRelaxed {status.rule_name}: {len(status.violations)} finding(s)")
        for violation in status.sorted_violations():
            print("  " + violation.format("counter.sv", status.descriptor))


if __name__ == "__main__":
    main()
