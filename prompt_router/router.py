"""
Tier-to-provider ranking and selection.

Providers are duck-typed: they expose ``models`` (model id -> info dict with
``cost`` and capability flags), ``provider_model(name)`` and
``model_info(name)``.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import (
    DEFAULT_AGENTIC_PREFERENCES,
    DEFAULT_TIER_PREFERENCES,
    TIER_COST_THRESHOLDS,
    Tier,
)

ROUTER_PROVIDER_ID = "tier_routing"

Candidate = Tuple[str, str, Dict[str, Any]]


def select_provider(
    tier: Tier,
    agentic: bool,
    providers: Dict[str, Any],
    preferences: Optional[Dict[str, Any]] = None,
    agentic_preferences: Optional[Dict[str, Any]] = None,
) -> Optional[Candidate]:
    ranked = rank_candidates(tier, agentic, providers, preferences, agentic_preferences)
    return ranked[0] if ranked else None


def rank_candidates(
    tier: Tier,
    agentic: bool,
    providers: Dict[str, Any],
    preferences: Optional[Dict[str, Any]] = None,
    agentic_preferences: Optional[Dict[str, Any]] = None,
) -> List[Candidate]:
    """Order every usable (provider, model) pair for ``tier``.

    Preferred models come first (cheapest provider first for each), then any
    model under the tier's input-cost ceiling. If neither yields anything,
    all known models are returned so the caller still has something to try.
    """
    tier = Tier(tier)
    if agentic:
        table = agentic_preferences or DEFAULT_AGENTIC_PREFERENCES
    else:
        table = preferences or DEFAULT_TIER_PREFERENCES
    entry = table.get(tier.name)
    if not isinstance(entry, dict):
        entry = {}
    required_caps = entry.get("capabilities") or {}

    candidates: List[Candidate] = []
    for preferred_model in entry.get("preferred_models") or []:
        candidates.extend(_candidates_for_model(str(preferred_model), providers, required_caps))

    max_cost = TIER_COST_THRESHOLDS.get(tier, TIER_COST_THRESHOLDS[Tier.REASONING])
    candidates.extend(_cheapest_first(
        candidate
        for candidate in _all_models(providers)
        if _meets_capabilities(candidate[2], required_caps) and _input_cost(candidate[2]) <= max_cost
    ))
    if not candidates:
        candidates.extend(_all_models(providers))

    return _dedupe(candidates)


def _external_providers(providers: Dict[str, Any]) -> Iterable[Tuple[str, Any]]:
    for provider_id, provider in providers.items():
        if provider_id != ROUTER_PROVIDER_ID:
            yield provider_id, provider


def _candidates_for_model(
    model_name: str,
    providers: Dict[str, Any],
    required_caps: Dict[str, Any],
) -> List[Candidate]:
    found: List[Candidate] = []
    for provider_id, provider in _external_providers(providers):
        resolved = provider.provider_model(model_name)
        if not resolved:
            continue
        info = _model_info(provider, model_name, resolved)
        if info and _meets_capabilities(info, required_caps):
            found.append((provider_id, resolved, info))
    return _cheapest_first(found)


def _all_models(providers: Dict[str, Any]) -> List[Candidate]:
    ret: List[Candidate] = []
    for provider_id, provider in _external_providers(providers):
        models = getattr(provider, "models", {}) or {}
        for model_id, info in models.items():
            if isinstance(info, dict):
                ret.append((provider_id, str(model_id), info))
    return ret


def _cheapest_first(candidates: Iterable[Candidate]) -> List[Candidate]:
    # sorted() is stable, so equal costs keep provider order
    return sorted(candidates, key=lambda candidate: _input_cost(candidate[2]))


def _meets_capabilities(info: Dict[str, Any], required_caps: Dict[str, Any]) -> bool:
    if not isinstance(required_caps, dict):
        return True
    return all(bool(info.get(cap)) for cap, required in required_caps.items() if required)


def _input_cost(info: Dict[str, Any]) -> float:
    cost = info.get("cost")
    if not isinstance(cost, dict) or cost.get("input") is None:
        return math.inf
    try:
        return float(cost["input"])
    except (TypeError, ValueError):
        return math.inf


def _model_info(provider: Any, requested: str, resolved: str) -> Optional[Dict[str, Any]]:
    for name in (requested, resolved):
        info = provider.model_info(name)
        if isinstance(info, dict):
            return info
    direct = (getattr(provider, "models", {}) or {}).get(resolved)
    return direct if isinstance(direct, dict) else None


def _dedupe(candidates: List[Candidate]) -> List[Candidate]:
    seen = set()
    deduped: List[Candidate] = []
    for provider_id, model_id, info in candidates:
        if (provider_id, model_id) in seen:
            continue
        seen.add((provider_id, model_id))
        deduped.append((provider_id, model_id, info))
    return deduped
