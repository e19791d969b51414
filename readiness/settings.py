"""Engine settings loading and validation utilities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional
import copy
import logging
import re

import yaml

from .bottleneck import MIN_REQUIRED_QTY
from .cost import COST_DECIMAL_PLACES
from .currency import DEFAULT_BASE_CURRENCY

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "engine.yaml"

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class EngineSettings:
    base_currency: str = DEFAULT_BASE_CURRENCY
    epsilon: float = MIN_REQUIRED_QTY
    cost_places: int = COST_DECIMAL_PLACES
    log_level: str = "INFO"


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base; lists are replaced, not merged."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_yaml_file(path: Path) -> dict:
    """Load a YAML file and return an object (empty dict for empty files)."""
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def validate_settings(raw: Dict) -> List[str]:
    """
    Validate the 'engine' section of a settings document.

    Returns:
        List of validation errors (empty if valid)
    """
    errors: List[str] = []
    engine = raw.get("engine", {})
    if not isinstance(engine, dict):
        return ["engine section must be a mapping"]

    currency = engine.get("base_currency", DEFAULT_BASE_CURRENCY)
    if not isinstance(currency, str) or not _CURRENCY_RE.match(currency):
        errors.append(f"base_currency invalid: {currency!r} (expected ISO code like 'CAD')")

    epsilon = engine.get("epsilon", MIN_REQUIRED_QTY)
    if isinstance(epsilon, bool) or not isinstance(epsilon, (int, float)) or epsilon <= 0:
        errors.append(f"epsilon invalid: {epsilon!r} (must be > 0)")

    places = engine.get("cost_places", COST_DECIMAL_PLACES)
    if isinstance(places, bool) or not isinstance(places, int) or not 0 <= places <= 10:
        errors.append(f"cost_places invalid: {places!r} (must be an integer 0..10)")

    level = engine.get("log_level", "INFO")
    if not isinstance(level, str) or level.upper() not in _LOG_LEVELS:
        errors.append(f"log_level invalid: {level!r}")

    return errors


def load_settings(
    path: Optional[Path] = None,
    overrides: Optional[Dict] = None
) -> EngineSettings:
    """
    Load default settings, merge an optional file and overrides, validate.

    Raises:
        ValueError: listing every validation error
    """
    raw: Dict = {}
    if DEFAULT_CONFIG_PATH.exists():
        raw = load_yaml_file(DEFAULT_CONFIG_PATH)
    if path is not None:
        raw = deep_merge(raw, load_yaml_file(Path(path)))
    if overrides:
        raw = deep_merge(raw, {"engine": overrides})

    errors = validate_settings(raw)
    if errors:
        raise ValueError("Invalid engine settings: " + "; ".join(errors))

    engine = raw.get("engine", {})
    settings = EngineSettings(
        base_currency=engine.get("base_currency", DEFAULT_BASE_CURRENCY),
        epsilon=float(engine.get("epsilon", MIN_REQUIRED_QTY)),
        cost_places=int(engine.get("cost_places", COST_DECIMAL_PLACES)),
        log_level=str(engine.get("log_level", "INFO")).upper(),
    )
    logging.getLogger(__name__).debug("loaded engine settings: %s", settings)
    return settings
