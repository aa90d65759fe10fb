"""
Prompt Router Configuration

Tier enumeration, the scorer config value type, and the default JSON-shaped
configuration: tier boundaries, confidence calibration, overrides and
tier-to-model preferences.
"""

from __future__ import annotations

import math
from copy import deepcopy
from dataclasses import asdict, dataclass
from enum import IntEnum
from typing import Any, Dict, Optional


class Tier(IntEnum):
    """Complexity tier assigned to a prompt, ordered cheapest first."""

    SIMPLE = 0
    MEDIUM = 1
    COMPLEX = 2
    REASONING = 3

    def __str__(self):
        return self.name

    @classmethod
    def from_string(cls, value: Optional[str]) -> "Tier":
        return tier_from_string(value)


def tier_to_string(tier: Tier) -> str:
    try:
        return Tier(tier).name
    except ValueError:
        return "UNKNOWN"


def tier_from_string(value: Optional[str]) -> Tier:
    """Parse ``simple|medium|complex|reasoning`` case-insensitively; anything else is MEDIUM.

    Surrounding whitespace is not trimmed, so ``" simple "`` is MEDIUM.
    """
    if value is None:
        return Tier.MEDIUM
    return Tier.__members__.get(str(value).upper(), Tier.MEDIUM)


TIERS = tuple(tier.name for tier in Tier)


@dataclass
class ScorerConfig:
    """Tier boundaries and calibration knobs used by ``classify``.

    Boundaries are expected to ascend but are not validated; inverted
    boundaries simply produce whatever the mapping rules yield.
    """

    simple_medium: float = 0.0
    medium_complex: float = 0.3
    complex_reasoning: float = 0.5
    confidence_threshold: float = 0.7
    confidence_steepness: float = 12.0
    max_tokens_force_complex: int = 100_000

    def set_tier_boundaries(self, simple_medium, medium_complex, complex_reasoning):
        self.simple_medium = float(simple_medium)
        self.medium_complex = float(medium_complex)
        self.complex_reasoning = float(complex_reasoning)

    def set_confidence_threshold(self, threshold):
        self.confidence_threshold = float(threshold)

    def set_confidence_steepness(self, steepness):
        self.confidence_steepness = float(steepness)

    def set_max_tokens_force_complex(self, tokens):
        self.max_tokens_force_complex = int(tokens)

    def copy(self) -> "ScorerConfig":
        return ScorerConfig(**asdict(self))

    @classmethod
    def from_dict(cls, scoring: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None) -> "ScorerConfig":
        """Build from the ``scoring``/``overrides`` sections of a normalized config."""
        defaults = cls()
        boundaries = scoring.get("tierBoundaries", {})
        overrides = overrides or {}
        return cls(
            simple_medium=boundaries.get("simpleMedium", defaults.simple_medium),
            medium_complex=boundaries.get("mediumComplex", defaults.medium_complex),
            complex_reasoning=boundaries.get("complexReasoning", defaults.complex_reasoning),
            confidence_threshold=scoring.get("confidenceThreshold", defaults.confidence_threshold),
            confidence_steepness=scoring.get("confidenceSteepness", defaults.confidence_steepness),
            max_tokens_force_complex=overrides.get("maxTokensForceComplex", defaults.max_tokens_force_complex),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tierBoundaries": {
                "simpleMedium": self.simple_medium,
                "mediumComplex": self.medium_complex,
                "complexReasoning": self.complex_reasoning,
            },
            "confidenceSteepness": self.confidence_steepness,
            "confidenceThreshold": self.confidence_threshold,
        }


DEFAULT_SCORING_CONFIG = ScorerConfig().to_dict()


def _prefer(*models, **capabilities):
    return {"preferred_models": list(models), "capabilities": capabilities}


# Model short names, matched against every provider's model ids
DEFAULT_TIER_PREFERENCES = {
    "SIMPLE": _prefer("gemini-2.5-flash", "deepseek-chat", "gpt-4o-mini"),
    "MEDIUM": _prefer("deepseek-chat", "gpt-4o-mini", "gemini-2.5-flash"),
    "COMPLEX": _prefer("gemini-2.5-pro", "claude-sonnet-4", "gpt-4o"),
    "REASONING": _prefer("deepseek-reasoner", "o3-mini", "gemini-2.5-pro", reasoning=True),
}

# Tool-capable models for requests with tools or an agentic prompt
DEFAULT_AGENTIC_PREFERENCES = {
    "SIMPLE": _prefer("claude-haiku-4.5", "gpt-4o-mini", "gemini-2.5-flash", tool_call=True),
    "MEDIUM": _prefer("claude-sonnet-4", "gpt-4o", "gemini-2.5-flash", tool_call=True),
    "COMPLEX": _prefer("claude-sonnet-4", "claude-opus-4", "gpt-4o", tool_call=True),
    "REASONING": _prefer("claude-sonnet-4", "deepseek-reasoner", "gemini-2.5-pro", tool_call=True),
}

DEFAULT_OVERRIDES = {
    "maxTokensForceComplex": ScorerConfig().max_tokens_force_complex,
    "structuredOutputMinTier": "MEDIUM",
    "ambiguousDefaultTier": "MEDIUM",
    "agenticMode": False,
}

# Agentic score at which a request is routed to tool-capable models
AGENTIC_ROUTING_THRESHOLD = 0.75

# Input cost ceiling per tier (per 1M tokens) for fallback selection
TIER_COST_THRESHOLDS = {
    Tier.SIMPLE: 1.0,
    Tier.MEDIUM: 5.0,
    Tier.COMPLEX: 20.0,
    Tier.REASONING: 50.0,
}

DEFAULT_CONFIG = {
    "scoring": DEFAULT_SCORING_CONFIG,
    "overrides": DEFAULT_OVERRIDES,
    "tierPreferences": DEFAULT_TIER_PREFERENCES,
    "agenticPreferences": DEFAULT_AGENTIC_PREFERENCES,
}


def default_config():
    return deepcopy(DEFAULT_CONFIG)


# ---------------------------------------------------------------------------
# Normalization of user supplied JSON
# ---------------------------------------------------------------------------


def _number(value, default, low=None, high=None, cast=float):
    """Return ``cast(value)`` when it is a finite number inside ``[low, high]``."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return default
    try:
        number = cast(value)
    except (ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    if (low is not None and number < low) or (high is not None and number > high):
        return default
    return number


def _flag(value, default):
    if isinstance(value, bool):
        return value
    words = {"1": True, "true": True, "yes": True, "on": True,
             "0": False, "false": False, "no": False, "off": False}
    if isinstance(value, str):
        return words.get(value.lower(), default)
    return default


def _tier_name(value, default):
    if isinstance(value, str) and value.upper() in TIERS:
        return value.upper()
    return default


def _section(raw, key):
    value = raw.get(key) if isinstance(raw, dict) else None
    return value if isinstance(value, dict) else {}


def _preferences(raw, defaults):
    """One ``{preferred_models, capabilities}`` entry per tier, defaults filling gaps."""
    normalized = {}
    for name in TIERS:
        entry = raw.get(name) if isinstance(raw, dict) else None
        entry = entry if isinstance(entry, dict) else {}
        models = entry.get("preferred_models")
        if isinstance(models, list):
            models = [m.strip() for m in models if isinstance(m, str) and m.strip()]
        capabilities = entry.get("capabilities")
        normalized[name] = {
            "preferred_models": models or list(defaults[name]["preferred_models"]),
            "capabilities": (
                {str(k): bool(v) for k, v in capabilities.items()}
                if isinstance(capabilities, dict)
                else dict(defaults[name]["capabilities"])
            ),
        }
    return normalized


def normalize_config(raw_config) -> Dict[str, Any]:
    """Validate a JSON config against ``DEFAULT_CONFIG``.

    Every value of the wrong type or out of range is replaced by its default.
    Boundaries are coerced to floats but kept in the order given.
    """
    raw = raw_config if isinstance(raw_config, dict) else {}
    scoring = _section(raw, "scoring")
    boundaries = _section(scoring, "tierBoundaries")
    overrides = _section(raw, "overrides")
    defaults = ScorerConfig()

    scorer = ScorerConfig(
        simple_medium=_number(boundaries.get("simpleMedium"), defaults.simple_medium),
        medium_complex=_number(boundaries.get("mediumComplex"), defaults.medium_complex),
        complex_reasoning=_number(boundaries.get("complexReasoning"), defaults.complex_reasoning),
        confidence_threshold=_number(
            scoring.get("confidenceThreshold"), defaults.confidence_threshold, 0.0, 1.0
        ),
        confidence_steepness=_number(
            scoring.get("confidenceSteepness"), defaults.confidence_steepness, 0.1, 100.0
        ),
        max_tokens_force_complex=_number(
            overrides.get("maxTokensForceComplex"), defaults.max_tokens_force_complex, 0, cast=int
        ),
    )
    return {
        "scoring": scorer.to_dict(),
        "overrides": {
            "maxTokensForceComplex": scorer.max_tokens_force_complex,
            "structuredOutputMinTier": _tier_name(
                overrides.get("structuredOutputMinTier"), DEFAULT_OVERRIDES["structuredOutputMinTier"]
            ),
            "ambiguousDefaultTier": _tier_name(
                overrides.get("ambiguousDefaultTier"), DEFAULT_OVERRIDES["ambiguousDefaultTier"]
            ),
            "agenticMode": _flag(overrides.get("agenticMode"), DEFAULT_OVERRIDES["agenticMode"]),
        },
        "tierPreferences": _preferences(raw.get("tierPreferences"), DEFAULT_TIER_PREFERENCES),
        "agenticPreferences": _preferences(raw.get("agenticPreferences"), DEFAULT_AGENTIC_PREFERENCES),
    }
