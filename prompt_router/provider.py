"""
Tier routing provider.

Serves the virtual model "auto": the last user message is classified and the
request is forwarded to the best ranked real model for the resulting tier.
"""

from __future__ import annotations

import re

from .config import (
    AGENTIC_ROUTING_THRESHOLD,
    TIERS,
    ScorerConfig,
    normalize_config,
    tier_from_string,
)
from .router import ROUTER_PROVIDER_ID, rank_candidates
from .scorer import classify

g_stats = {
    "total_routed": 0,
    "tiers": {name: 0 for name in TIERS},
    "providers": {},
    "ambiguous": 0,
    "fallback_attempts": 0,
    "candidate_failures": 0,
}

_STRUCTURED_OUTPUT = re.compile(r"json|structured|schema", re.IGNORECASE)


class RoutingError(Exception):
    """No provider candidate could take the request."""


def message_text(content):
    """Flatten OpenAI-style message content; only ``text`` parts are kept."""
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ""
    return " ".join(
        part["text"]
        for part in content
        if isinstance(part, dict) and part.get("type") == "text" and isinstance(part.get("text"), str)
    )


def split_prompts(messages):
    """Return ``(prompt, system_prompt)``: the last user message and the first system one."""
    prompt, system_prompt = "", None
    for message in messages if isinstance(messages, list) else ():
        if not isinstance(message, dict):
            continue
        role = message.get("role")
        if role == "user":
            prompt = message_text(message.get("content"))
        elif role == "system" and system_prompt is None:
            system_prompt = message_text(message.get("content")) or None
    return prompt, system_prompt


class TierRouterProvider:
    """Virtual provider that claims model='auto' and delegates to real providers."""

    def __init__(self, ctx, config=None):
        self.ctx = ctx
        self.id = ROUTER_PROVIDER_ID
        self.name = "Tier Routing"
        self.models = {
            "auto": {
                "id": "auto",
                "name": "Auto (Tier Routing)",
                "tool_call": True,
                "reasoning": True,
                "cost": {"input": 0, "output": 0},
            }
        }
        self.config = normalize_config(config)
        self.overrides = self.config["overrides"]
        self.scorer_config = ScorerConfig.from_dict(self.config["scoring"], self.overrides)

    def provider_model(self, model):
        return "auto" if str(model or "").lower() == "auto" else None

    def model_info(self, model):
        return self.models["auto"] if self.provider_model(model) else None

    def resolve_tier(self, result, system_prompt=None):
        """Apply routing policy on top of a classification.

        Returns ``(tier, notes)``; ambiguous results take ``ambiguousDefaultTier``
        and system prompts asking for structured output are raised to at least
        ``structuredOutputMinTier``.
        """
        tier = result.tier
        notes = []
        if result.ambiguous:
            tier = tier_from_string(self.overrides["ambiguousDefaultTier"])
            notes.append("ambiguous -> %s" % tier.name)
        if system_prompt and _STRUCTURED_OUTPUT.search(system_prompt):
            floor = tier_from_string(self.overrides["structuredOutputMinTier"])
            if tier < floor:
                tier = floor
                notes.append("upgraded to %s (structured output)" % floor.name)
        return tier, notes

    def agentic_reason(self, chat, result):
        if chat.get("tools"):
            return "agentic"
        if result.agentic_score >= AGENTIC_ROUTING_THRESHOLD:
            return "auto-agentic"
        if self.overrides["agenticMode"]:
            return "forced-agentic"
        return None

    async def chat(self, chat, context=None):
        prompt, system_prompt = split_prompts(chat.get("messages"))
        result = classify(prompt, system_prompt, self.scorer_config)
        if result.ambiguous:
            g_stats["ambiguous"] += 1

        tier, notes = self.resolve_tier(result, system_prompt)
        agentic = self.agentic_reason(chat, result)
        if agentic:
            notes.append(agentic)

        providers = self.ctx.get_providers()
        candidates = rank_candidates(
            tier,
            agentic is not None,
            providers,
            preferences=self.config["tierPreferences"],
            agentic_preferences=self.config["agenticPreferences"],
        )
        if not candidates:
            raise RoutingError("Tier routing: no available provider candidates")

        errors = []
        for provider_id, model_id, _info in candidates:
            chat["model"] = model_id
            try:
                response = await providers[provider_id].chat(chat, context=context)
            except Exception as ex:
                errors.append(ex)
                g_stats["candidate_failures"] += 1
                self.ctx.log("Candidate failed %s/%s: %s" % (provider_id, model_id, ex))
                continue

            g_stats["total_routed"] += 1
            g_stats["fallback_attempts"] += len(errors)
            g_stats["tiers"][tier.name] += 1
            g_stats["providers"][provider_id] = g_stats["providers"].get(provider_id, 0) + 1

            reasoning = " | ".join([result.format_debug()] + notes)
            self.ctx.log("Routed -> %s/%s: %s" % (provider_id, model_id, reasoning))
            if isinstance(response, dict):
                response["routing"] = {
                    "tier": tier.name,
                    "confidence": round(result.confidence, 3),
                    "score": round(result.score, 4),
                    "provider": provider_id,
                    "model": model_id,
                    "agentic": agentic is not None,
                    "signals": list(result.signals),
                    "attempts": len(errors) + 1,
                    "reasoning": reasoning,
                }
            return response

        raise errors[0]
