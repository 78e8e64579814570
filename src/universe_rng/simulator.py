#!/usr/bin/env python3
"""Quantum circuit simulator process used by IBMQuantumWrapper.

Prepares qubits in equal superposition with Hadamard gates, measures them
once on a qiskit-aer backend, and prints a single JSON object to stdout::

    {"random_bits": "0110...", "random_integer": 6, "backend": "aer_simulator"}

If qiskit is not installed the process still exits 0 and prints
``{"error": {"code": "missing_dependency", "message": ...}}`` so the caller
can tell a provisioning problem from a crash.

Usage:
    python -m universe_rng.simulator --bits 8
    python -m universe_rng.simulator --bits 64 --backend aer_simulator
"""

from __future__ import annotations

import argparse
import json
import sys

# Upper bound on qubits per circuit; larger requests are split into batches.
QUBITS_PER_CIRCUIT = 20


def measure_bits(n_bits: int, backend_name: str) -> str:
    """Return *n_bits* measured bits, most significant first."""
    from qiskit import QuantumCircuit, transpile
    from qiskit_aer import Aer

    backend = Aer.get_backend(backend_name)
    bits = ""
    remaining = n_bits
    while remaining > 0:
        q = min(QUBITS_PER_CIRCUIT, remaining)
        circuit = QuantumCircuit(q, q)
        circuit.h(range(q))
        circuit.measure(range(q), range(q))
        result = backend.run(transpile(circuit, backend), shots=1).result()
        measured = next(iter(result.get_counts()))
        bits += measured.replace(" ", "").zfill(q)
        remaining -= q
    return bits


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the circuit and print the JSON result."""
    parser = argparse.ArgumentParser(
        description="Generate random bits on a simulated quantum circuit",
    )
    parser.add_argument("--bits", type=int, required=True, help="Number of bits to measure.")
    parser.add_argument(
        "--backend",
        type=str,
        default="aer_simulator",
        help="qiskit-aer backend name (default: aer_simulator).",
    )
    args = parser.parse_args(argv)

    if args.bits < 1:
        parser.error("--bits must be positive")

    try:
        bits = measure_bits(args.bits, args.backend)
    except ImportError as exc:
        payload: dict[str, object] = {
            "error": {
                "code": "missing_dependency",
                "message": f"{exc}. Install with: pip install 'universe-rng[quantum]'",
            }
        }
    else:
        payload = {
            "random_bits": bits,
            "random_integer": int(bits, 2),
            "backend": args.backend,
        }

    sys.stdout.write(json.dumps(payload) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
