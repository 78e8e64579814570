"""Configuration system for universe-rng.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables (UNIVERSE_RNG_*) -> .env file -> field defaults.

The Random.org API key is additionally read from the conventional
``RANDOM_ORG_API_KEY`` environment variable.

Per-call Random.org options are resolved via resolve_options() which creates
a new RandomOrgOptions instance without mutating the defaults.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from universe_rng import __version__
from universe_rng.exceptions import ValidationError

INTEGER_REDUCTIONS: frozenset[str] = frozenset({"rejection", "modulo"})
LOG_LEVELS: frozenset[str] = frozenset({"none", "summary", "full"})


class UniverseRNGConfig(BaseSettings):
    """Configuration for universe-rng clients.

    Resolution order: init kwargs -> env vars (UNIVERSE_RNG_*) -> .env file -> defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="UNIVERSE_RNG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # --- Random.org ---

    random_org_api_url: str = Field(
        default="https://api.random.org/json-rpc/4/invoke",
        description="Random.org JSON-RPC endpoint",
    )
    random_org_api_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "random_org_api_key",
            "RANDOM_ORG_API_KEY",
            "UNIVERSE_RNG_RANDOM_ORG_API_KEY",
        ),
        description="Random.org API key (empty = not configured)",
    )

    # --- ANU QRNG ---

    anu_api_url: str = Field(
        default="https://qrng.anu.edu.au/API/jsonI.php",
        description="ANU QRNG REST endpoint",
    )
    integer_reduction: str = Field(
        default="rejection",
        description="Range reduction for ANU integers: 'rejection' (unbiased) or 'modulo'",
    )

    # --- HTTP transport ---

    http_timeout_s: float = Field(
        default=10.0,
        gt=0,
        description="Per-request HTTP timeout in seconds",
    )
    user_agent: str = Field(
        default=f"universe-rng/{__version__}",
        min_length=1,
        description="User-Agent header sent with every HTTP request",
    )

    # --- IBM Quantum simulator ---

    ibm_backend: str = Field(
        default="aer_simulator",
        description="qiskit-aer backend name used by the simulator process",
    )
    ibm_python_executable: str = Field(
        default="",
        description="Interpreter that runs the simulator process (empty = current)",
    )
    ibm_timeout_s: float = Field(
        default=120.0,
        gt=0,
        description="Simulator process timeout in seconds",
    )

    # --- Logging ---

    log_level: str = Field(
        default="summary",
        description="Call logging verbosity: 'none', 'summary', 'full'",
    )
    diagnostic_mode: bool = Field(
        default=False,
        description="Store all call records in memory for analysis",
    )


def check_choice(field_name: str, value: str, allowed: frozenset[str]) -> str:
    """Validate an enumerated string config value.

    Raises:
        ValidationError: If *value* is not one of *allowed*.
    """
    if value not in allowed:
        raise ValidationError(
            f"Invalid {field_name}: {value!r} (expected one of {', '.join(sorted(allowed))})"
        )
    return value


class RandomOrgOptions(BaseModel):
    """Every option recognised by the Random.org methods, with its default.

    ``replacement`` applies to integers and decimal fractions, ``base`` to
    integers, ``size`` (bits per blob) and ``format`` to blobs.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    replacement: bool = True
    base: int = 10
    size: int = 8
    format: str = "base64"


DEFAULT_OPTIONS = RandomOrgOptions()


def resolve_options(
    options: RandomOrgOptions | Mapping[str, Any] | None,
    defaults: RandomOrgOptions = DEFAULT_OPTIONS,
) -> RandomOrgOptions:
    """Merge per-call overrides onto the default options.

    Args:
        options: An options instance (used as-is), a mapping of overrides,
            or ``None`` for the defaults.
        defaults: Base options the overrides are applied to.

    Returns:
        A RandomOrgOptions instance. *defaults* is never mutated.

    Raises:
        ValidationError: If a key is unknown or a value has the wrong type.
    """
    if options is None:
        return defaults
    if isinstance(options, RandomOrgOptions):
        return options
    if not options:
        return defaults

    merged = defaults.model_dump()
    merged.update(options)
    try:
        return RandomOrgOptions.model_validate(merged)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid Random.org options: {exc}") from exc
