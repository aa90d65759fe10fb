"""
Prompt Router extension.

Classifies prompts into complexity tiers locally and routes requests with
model="auto" to a provider/model chosen for that tier.
"""

from __future__ import annotations

import json
import os

from aiohttp import web
from loguru import logger

from .config import (
    ScorerConfig,
    Tier,
    default_config,
    normalize_config,
    tier_from_string,
    tier_to_string,
)
from .provider import RoutingError, TierRouterProvider, g_stats
from .router import ROUTER_PROVIDER_ID, rank_candidates, select_provider
from .scorer import ScoringResult, classify, count_keyword_matches

__all__ = [
    "RoutingError",
    "ScorerConfig",
    "ScoringResult",
    "Tier",
    "TierRouterProvider",
    "classify",
    "count_keyword_matches",
    "default_config",
    "normalize_config",
    "rank_candidates",
    "select_provider",
    "tier_from_string",
    "tier_to_string",
]

g_ctx = None
g_config = None


def _config_path():
    return os.path.expanduser("~/.prompt_router/config.json")


def _log(message):
    if g_ctx:
        g_ctx.log(message)
    else:
        logger.debug(message)


def _load_user_config():
    """Read the user's JSON config; a missing or unusable file means defaults."""
    path = _config_path()
    try:
        with open(path, encoding="utf-8") as handle:
            loaded = json.load(handle)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as ex:
        _log("Ignoring %s: %s" % (path, ex))
        return {}
    if isinstance(loaded, dict):
        return loaded
    _log("Ignoring %s: top level is not a JSON object" % path)
    return {}


async def get_config_handler(request):
    return web.json_response(g_config or default_config())


async def get_stats_handler(request):
    return web.json_response(g_stats)


async def classify_handler(request):
    """POST {"prompt": str, "system_prompt"?: str} -> ScoringResult as JSON."""
    try:
        body = await request.json()
    except ValueError as ex:
        return web.json_response({"error": "Invalid JSON: %s" % ex}, status=400)
    if not isinstance(body, dict) or not isinstance(body.get("prompt"), str):
        return web.json_response({"error": "Expected JSON object with a 'prompt' string"}, status=400)

    system_prompt = body.get("system_prompt")
    config = g_config or default_config()
    result = classify(
        body["prompt"],
        system_prompt if isinstance(system_prompt, str) else None,
        ScorerConfig.from_dict(config["scoring"], config["overrides"]),
    )
    _log("classify: %s" % result.format_debug())
    return web.json_response(result.to_dict())


def install(ctx):
    global g_ctx
    g_ctx = ctx
    ctx.add_get("config", get_config_handler)
    ctx.add_get("stats", get_stats_handler)
    ctx.add_post("classify", classify_handler)


async def load(ctx):
    global g_config
    g_config = normalize_config(_load_user_config())
    ctx.get_providers()[ROUTER_PROVIDER_ID] = TierRouterProvider(ctx, g_config)
    ctx.log("Tier routing enabled. Model 'auto' is now available.")


__install__ = install
__load__ = load
