"""Demo driver: exercises each backend in turn and prints the results.

Run with::

    export RANDOM_ORG_API_KEY=...   # optional, from https://api.random.org/
    universe-rng-demo

Each demonstration catches the library's errors, reports them on stderr,
and moves on to the next backend. There are no retries and no fallback
between backends.
"""

from __future__ import annotations

import logging
import sys

import pydantic

from universe_rng.config import UniverseRNGConfig
from universe_rng.exceptions import UniverseRNGError
from universe_rng.providers.anu import ANUQRNGClient
from universe_rng.providers.ibm_quantum import IBMQuantumWrapper
from universe_rng.providers.random_org import RandomOrgClient

_RULE = "-" * 39


def demonstrate_random_org(config: UniverseRNGConfig) -> None:
    print("\nDemonstrating Random.org API client:")
    print("(Note: You need to set a valid API key to run this example)")

    if not config.random_org_api_key:
        print("\nPlease set your Random.org API key to run this demo.")
        print("You can get a free API key at https://api.random.org/")
        print("Set it in the environment variable RANDOM_ORG_API_KEY.")
        return

    try:
        with RandomOrgClient(config) as client:
            print("\nGenerating 5 random integers between 1 and 100...")
            result = client.generate_integers(5, 1, 100)

            print("\nResults:")
            print("Random integers:", result["random"]["data"])
            print("Completion time:", result["random"].get("completionTime"))
            print("\nAPI Quota Information:")
            print("Bits used:", result.get("bitsUsed"))
            print("Bits left:", result.get("bitsLeft"))
            print("Requests left:", result.get("requestsLeft"))
            print("Advisory delay (ms):", result.get("advisoryDelay"))
    except UniverseRNGError as exc:
        print(f"\nError demonstrating Random.org API: {exc}", file=sys.stderr)


def demonstrate_anu_qrng(config: UniverseRNGConfig) -> None:
    print("\nDemonstrating ANU Quantum Random Number Generator API client:")
    print("(No API key required for this service)")

    try:
        with ANUQRNGClient(config) as client:
            print("\nGenerating 10 random uint8 values (0-255)...")
            print("Random uint8 values:", client.generate_uint8(10))

            print("\nGenerating 5 random uint16 values (0-65535)...")
            print("Random uint16 values:", client.generate_uint16(5))

            print("\nGenerating 3 random hex16 values...")
            print("Random hex16 values:", client.generate_hex16(3))
    except UniverseRNGError as exc:
        print(f"\nError demonstrating ANU QRNG API: {exc}", file=sys.stderr)


def demonstrate_ibm_quantum(config: UniverseRNGConfig) -> None:
    print("\nDemonstrating IBM Quantum Random Number Generator:")
    print("(Using local simulator - no API key required)")

    try:
        with IBMQuantumWrapper(config) as client:
            print("\nGenerating 8 random bits using IBM Quantum simulator...")
            measured = client.generate_random_bits(8)

            print("\nResults:")
            print("Random bitstring:", measured.bits)
            print("Random integer (0-255):", measured.integer)
            print("Backend used:", measured.backend)

            print("\nGenerating 4 random bytes...")
            print("Random bytes array:", list(client.get_random_bytes(4)))
    except UniverseRNGError as exc:
        print(f"\nError demonstrating IBM Quantum: {exc}", file=sys.stderr)
        print("This could be due to missing Python dependencies.")
        print("Try installing qiskit with: pip install 'universe-rng[quantum]'")


def main() -> None:
    """Run all three demonstrations in order."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    print(_RULE)
    print("Ask the Universe - Core RNG Engine")
    print("A transparent and verifiable randomness generator")
    print(_RULE)

    try:
        config = UniverseRNGConfig()
    except pydantic.ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
    else:
        demonstrate_random_org(config)
        demonstrate_anu_qrng(config)
        demonstrate_ibm_quantum(config)

    print(f"\n{_RULE}")
    print("Demo completed.")
    print(_RULE)


if __name__ == "__main__":
    main()
