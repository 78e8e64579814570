"""IBM Quantum simulator wrapper.

Bit generation is delegated to a separate simulator process
(:mod:`universe_rng.simulator`, built on qiskit and qiskit-aer) reached
through a :class:`SimulatorRunner`. The wrapper itself never imports qiskit,
so it can run in an interpreter without the quantum stack installed, and
it never installs anything. Use
:class:`~universe_rng.provisioning.DependencyInstaller` explicitly for that.
"""

from __future__ import annotations

import json
import logging
import subprocess
import sys
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from universe_rng.config import UniverseRNGConfig
from universe_rng.exceptions import ApiError, TransportError
from universe_rng.logging.logger import CallLogger
from universe_rng.providers.base import RandomnessProvider, check_count
from universe_rng.providers.registry import register_provider
from universe_rng.types import QuantumBits, RandomKind, RandomRequest, RandomResult

logger = logging.getLogger("universe_rng")

MAX_BITS = 8192
MAX_BYTES = MAX_BITS // 8

SIMULATOR_MODULE = "universe_rng.simulator"


class SimulatorRunner(ABC):
    """Process boundary to a quantum circuit simulator."""

    @abstractmethod
    def run(self, bits: int, backend: str) -> dict[str, Any]:
        """Measure *bits* qubits on *backend*.

        Returns:
            A mapping with ``random_bits``, ``random_integer`` and ``backend``.

        Raises:
            TransportError: If the simulator cannot be reached or crashes.
            ApiError: If the simulator reports a structured failure.
        """


class SubprocessSimulatorRunner(SimulatorRunner):
    """Runs ``python -m universe_rng.simulator`` and parses its JSON output.

    Args:
        python_executable: Interpreter with qiskit installed. Defaults to
            the current interpreter.
        timeout_s: Seconds to wait before the process is killed.
    """

    def __init__(self, python_executable: str | None = None, timeout_s: float = 120.0) -> None:
        self._python = python_executable or sys.executable
        self._timeout_s = timeout_s

    @property
    def python_executable(self) -> str:
        return self._python

    def run(self, bits: int, backend: str) -> dict[str, Any]:
        cmd = [self._python, "-m", SIMULATOR_MODULE, "--bits", str(bits), "--backend", backend]
        logger.debug("Launching simulator: %s", " ".join(cmd))
        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout_s,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise TransportError(
                f"Quantum simulator timed out after {self._timeout_s:g}s"
            ) from exc
        except OSError as exc:
            raise TransportError(f"Failed to launch quantum simulator: {exc}") from exc

        if completed.returncode != 0:
            stderr = completed.stderr.strip().splitlines()
            detail = stderr[-1] if stderr else "no output"
            raise TransportError(
                f"Quantum simulator exited with status {completed.returncode}: {detail}",
                status_code=completed.returncode,
            )

        lines = [line for line in completed.stdout.splitlines() if line.strip()]
        try:
            payload = json.loads(lines[-1])
        except (IndexError, ValueError) as exc:
            raise TransportError("Quantum simulator produced no JSON output") from exc
        if not isinstance(payload, dict):
            raise TransportError("Quantum simulator produced malformed output")

        error = payload.get("error")
        if error:
            if isinstance(error, dict):
                raise ApiError(error.get("message", "Unknown error"), code=error.get("code"))
            raise ApiError(str(error))
        return payload


@register_provider("ibm_quantum")
class IBMQuantumWrapper(RandomnessProvider):
    """Random bits from a simulated Hadamard-and-measure quantum circuit.

    Args:
        config: Configuration providing ``ibm_backend``,
            ``ibm_python_executable`` and ``ibm_timeout_s``.
        runner: Simulator collaborator; defaults to a
            :class:`SubprocessSimulatorRunner` built from *config*.
        call_logger: Overrides the logger built from *config*.
    """

    supported_kinds: ClassVar[frozenset[RandomKind]] = frozenset(
        {RandomKind.BITSTRING, RandomKind.BYTES}
    )

    def __init__(
        self,
        config: UniverseRNGConfig | None = None,
        *,
        runner: SimulatorRunner | None = None,
        call_logger: CallLogger | None = None,
    ) -> None:
        config = config or UniverseRNGConfig()
        self._backend = config.ibm_backend
        self._runner = runner or SubprocessSimulatorRunner(
            python_executable=config.ibm_python_executable or None,
            timeout_s=config.ibm_timeout_s,
        )
        self._call_logger = call_logger if call_logger is not None else CallLogger(config)

    @property
    def name(self) -> str:
        """Return ``'ibm_quantum'``."""
        return "ibm_quantum"

    def generate_random_bits(self, n: int) -> QuantumBits:
        """Measure *n* (1-8192) qubits prepared in equal superposition.

        Raises:
            ValidationError: If *n* is out of range.
            TransportError: If the simulator fails or returns malformed bits.
            ApiError: If the simulator reports a missing dependency.
        """
        check_count(n, 1, MAX_BITS, "Bit count")
        with self._record_call("random_bits", n):
            payload = self._runner.run(n, self._backend)
            bits = payload.get("random_bits")
            if not isinstance(bits, str) or len(bits) != n or set(bits) - {"0", "1"}:
                raise TransportError(
                    f"Quantum simulator returned malformed bits: {bits!r}"
                )
            return QuantumBits(
                bits=bits,
                integer=int(bits, 2),
                backend=str(payload.get("backend", self._backend)),
            )

    def get_random_bytes(self, n: int) -> bytes:
        """Return *n* (1-1024) bytes packed from ``8 * n`` measured bits."""
        check_count(n, 1, MAX_BYTES, "Byte count")
        measured = self.generate_random_bits(n * 8)
        return int(measured.bits, 2).to_bytes(n, byteorder="big")

    def _produce(self, request: RandomRequest) -> RandomResult:
        if request.kind is RandomKind.BYTES:
            return RandomResult(
                values=tuple(self.get_random_bytes(request.count)),
                backend=self.name,
                extra={"simulator_backend": self._backend},
            )
        measured = self.generate_random_bits(request.count)
        return RandomResult(
            values=(measured.bits,),
            backend=self.name,
            extra={"integer": measured.integer, "simulator_backend": measured.backend},
        )

    def close(self) -> None:
        """No-op: each call owns its own process."""

    def health_check(self) -> dict[str, Any]:
        """Return status including the configured simulator backend."""
        return {
            "source": self.name,
            "healthy": True,
            "backend": self._backend,
        }
