"""Explicit installer for the simulator's Python dependencies.

Constructing :class:`~universe_rng.providers.ibm_quantum.IBMQuantumWrapper`
never installs anything. Callers that want first-run provisioning invoke
:class:`DependencyInstaller` themselves::

    installer = DependencyInstaller.from_config(config)
    installer.ensure()
"""

from __future__ import annotations

import json
import logging
import subprocess
import sys
from typing import TYPE_CHECKING, Mapping

from universe_rng.exceptions import TransportError

if TYPE_CHECKING:
    from universe_rng.config import UniverseRNGConfig

logger = logging.getLogger("universe_rng")

# Import name -> requirement specifier.
SIMULATOR_REQUIREMENTS: Mapping[str, str] = {
    "qiskit": "qiskit",
    "qiskit_aer": "qiskit-aer",
}

_PROBE = (
    "import importlib.util, json, sys; "
    "print(json.dumps([m for m in sys.argv[1:] if importlib.util.find_spec(m) is None]))"
)


class DependencyInstaller:
    """Checks for and installs packages into a target interpreter.

    Args:
        requirements: Mapping of import name to pip requirement.
        python_executable: Interpreter to inspect and install into.
            Defaults to the current interpreter.
        timeout_s: Seconds allowed for each pip/probe process.
    """

    def __init__(
        self,
        requirements: Mapping[str, str] = SIMULATOR_REQUIREMENTS,
        python_executable: str | None = None,
        timeout_s: float = 600.0,
    ) -> None:
        self._requirements = dict(requirements)
        self._python = python_executable or sys.executable
        self._timeout_s = timeout_s

    @classmethod
    def from_config(cls, config: UniverseRNGConfig) -> DependencyInstaller:
        """Target the same interpreter the simulator runner uses."""
        return cls(python_executable=config.ibm_python_executable or None)

    def missing(self) -> list[str]:
        """Return the import names not importable in the target interpreter.

        Raises:
            TransportError: If the probe process fails.
        """
        completed = self._run([self._python, "-c", _PROBE, *self._requirements])
        try:
            return list(json.loads(completed.stdout.strip().splitlines()[-1]))
        except (IndexError, ValueError) as exc:
            raise TransportError("Dependency probe produced no JSON output") from exc

    def install(self, modules: list[str] | None = None) -> list[str]:
        """``pip install`` the requirements for *modules* (default: all).

        Returns:
            The requirement specifiers that were installed.

        Raises:
            TransportError: If pip cannot be launched or fails.
        """
        names = modules if modules is not None else list(self._requirements)
        packages = [self._requirements[name] for name in names]
        if not packages:
            return []
        logger.info("Installing simulator dependencies: %s", ", ".join(packages))
        self._run([self._python, "-m", "pip", "install", *packages])
        return packages

    def ensure(self) -> list[str]:
        """Install only what is missing. Returns the installed requirements."""
        absent = self.missing()
        if not absent:
            logger.debug("Simulator dependencies already installed")
            return []
        return self.install(absent)

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess[str]:
        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout_s,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise TransportError(f"{cmd[0]} timed out after {self._timeout_s:g}s") from exc
        except OSError as exc:
            raise TransportError(f"Failed to launch {cmd[0]}: {exc}") from exc

        if completed.returncode != 0:
            stderr = completed.stderr.strip().splitlines()
            raise TransportError(
                f"{' '.join(cmd[1:3])} failed with status {completed.returncode}: "
                f"{stderr[-1] if stderr else 'no output'}",
                status_code=completed.returncode,
            )
        return completed
