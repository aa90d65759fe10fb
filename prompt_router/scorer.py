"""
14-Dimension Weighted Scoring Classifier

Scores a request across 14 weighted dimensions and maps the aggregate
score to a tier using configurable boundaries. Confidence is calibrated
via sigmoid. An agentic-task score is tracked alongside the tier.
"""

import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from . import keywords
from .config import ScorerConfig, Tier

# Dimension weights (sum to ~1.0)
DIMENSION_WEIGHTS = {
    "tokenCount": 0.08,
    "codePresence": 0.15,
    "reasoningMarkers": 0.18,
    "technicalTerms": 0.10,
    "creativeMarkers": 0.05,
    "simpleIndicators": 0.02,
    "multiStepPatterns": 0.12,
    "questionComplexity": 0.05,
    "imperativeVerbs": 0.03,
    "constraintCount": 0.04,
    "outputFormat": 0.03,
    "referenceComplexity": 0.02,
    "negationComplexity": 0.01,
    "domainSpecificity": 0.02,
    "agenticTask": 0.04,
}

TOKEN_COUNT_THRESHOLDS = {"simple": 50, "complex": 500}

_STEP_NUMBER = re.compile(r"step [0-9]")
_NUMBERED_ITEM = re.compile(r"[1-9]\. ")


@dataclass
class DimensionScore:
    name: str
    score: float
    signal: Optional[str] = None


@dataclass
class ScoringResult:
    score: float = 0.0
    tier: Tier = Tier.MEDIUM
    ambiguous: bool = False  # confidence fell below threshold; tier forced to MEDIUM
    confidence: float = 0.0
    agentic_score: float = 0.0
    signals: List[str] = field(default_factory=list)

    def copy(self) -> "ScoringResult":
        return ScoringResult(
            score=self.score,
            tier=self.tier,
            ambiguous=self.ambiguous,
            confidence=self.confidence,
            agentic_score=self.agentic_score,
            signals=list(self.signals),
        )

    def format_debug(self) -> str:
        text = "tier=%s confidence=%.2f score=%.3f agentic=%.2f" % (
            "AMBIGUOUS" if self.ambiguous else self.tier.name,
            self.confidence,
            self.score,
            self.agentic_score,
        )
        if self.signals:
            text += " signals=[%s]" % ", ".join(self.signals)
        return text

    def to_dict(self):
        return {
            "score": self.score,
            "tier": self.tier.name,
            "ambiguous": self.ambiguous,
            "confidence": self.confidence,
            "agentic_score": self.agentic_score,
            "signals": list(self.signals),
        }

    def __str__(self):
        return self.format_debug()


def count_keyword_matches(text: str, keyword_list: Sequence[str]) -> int:
    """Count keywords occurring anywhere in ``text``, case-insensitively and not word-bounded."""
    text = text.lower()
    return sum(1 for kw in keyword_list if kw in text)


def estimate_tokens(prompt: str, system_prompt: Optional[str] = None) -> int:
    """Rough token estimate: ~4 bytes of UTF-8 per token.

    Lone surrogates (as decoded from JSON escapes like ``"\\ud800"``) count
    as their three-byte encoding instead of raising.
    """
    tokens = len(prompt.encode("utf-8", "surrogatepass")) // 4
    if system_prompt is not None:
        tokens += len(system_prompt.encode("utf-8", "surrogatepass")) // 4
    return tokens


def _score_token_count(estimated_tokens):
    if estimated_tokens < TOKEN_COUNT_THRESHOLDS["simple"]:
        return DimensionScore("tokenCount", -1.0, "short")
    if estimated_tokens > TOKEN_COUNT_THRESHOLDS["complex"]:
        return DimensionScore("tokenCount", 1.0, "long")
    return DimensionScore("tokenCount", 0.0)


def _score_keyword_match(text, keyword_list, name, signal_label, thresholds, scores):
    matches = count_keyword_matches(text, keyword_list)
    if matches >= thresholds["high"]:
        return DimensionScore(name, scores["high"], signal_label)
    if matches >= thresholds["low"]:
        return DimensionScore(name, scores["low"], signal_label)
    return DimensionScore(name, scores["none"])


def _score_multi_step(text):
    hit = (
        ("first" in text and "then" in text)
        or _STEP_NUMBER.search(text) is not None
        or _NUMBERED_ITEM.search(text) is not None
    )
    if hit:
        return DimensionScore("multiStepPatterns", 0.5, "multi-step")
    return DimensionScore("multiStepPatterns", 0.0)


def _score_question_complexity(prompt):
    if prompt.count("?") > 3:
        return DimensionScore("questionComplexity", 0.5, "multi-question")
    return DimensionScore("questionComplexity", 0.0)


def _score_agentic_task(text):
    matches = count_keyword_matches(text, keywords.AGENTIC_TASK_KEYWORDS)
    if matches >= 4:
        return DimensionScore("agenticTask", 1.0, "agentic")
    if matches >= 3:
        return DimensionScore("agenticTask", 0.6, "agentic")
    if matches >= 1:
        return DimensionScore("agenticTask", 0.2, "agentic-light")
    return DimensionScore("agenticTask", 0.0)


def _calibrate_confidence(distance, steepness):
    try:
        return 1.0 / (1.0 + math.exp(-steepness * distance))
    except OverflowError:
        # inverted boundaries can yield a large negative distance
        return 0.0


def _map_to_tier(score, config):
    """Return ``(tier, distance to the nearest boundary)``."""
    simple_medium = config.simple_medium
    medium_complex = config.medium_complex
    complex_reasoning = config.complex_reasoning

    if score < simple_medium:
        return Tier.SIMPLE, simple_medium - score
    if score < medium_complex:
        return Tier.MEDIUM, min(score - simple_medium, medium_complex - score)
    if score < complex_reasoning:
        return Tier.COMPLEX, min(score - medium_complex, complex_reasoning - score)
    return Tier.REASONING, score - complex_reasoning


def score_dimensions(prompt: str, system_prompt: Optional[str] = None) -> List[DimensionScore]:
    """Score all 14 dimensions plus the agentic term, in evaluation order."""
    user_text = prompt.lower()
    if system_prompt is not None:
        text = "%s %s" % (system_prompt.lower(), user_text)
    else:
        text = user_text

    return [
        _score_token_count(estimate_tokens(prompt, system_prompt)),
        _score_keyword_match(
            text, keywords.CODE_KEYWORDS,
            "codePresence", "code",
            {"low": 1, "high": 2}, {"none": 0.0, "low": 0.5, "high": 1.0},
        ),
        # Reasoning markers: user prompt only, so a heavy system prompt
        # cannot push a trivial question into REASONING
        _score_keyword_match(
            user_text, keywords.REASONING_KEYWORDS,
            "reasoningMarkers", "reasoning",
            {"low": 1, "high": 2}, {"none": 0.0, "low": 0.7, "high": 1.0},
        ),
        _score_keyword_match(
            text, keywords.TECHNICAL_KEYWORDS,
            "technicalTerms", "technical",
            {"low": 2, "high": 4}, {"none": 0.0, "low": 0.5, "high": 1.0},
        ),
        _score_keyword_match(
            text, keywords.CREATIVE_KEYWORDS,
            "creativeMarkers", "creative",
            {"low": 1, "high": 2}, {"none": 0.0, "low": 0.5, "high": 0.7},
        ),
        _score_keyword_match(
            text, keywords.SIMPLE_KEYWORDS,
            "simpleIndicators", "simple",
            {"low": 1, "high": 2}, {"none": 0.0, "low": -1.0, "high": -1.0},
        ),
        _score_multi_step(text),
        _score_question_complexity(prompt),
        _score_keyword_match(
            text, keywords.IMPERATIVE_VERBS,
            "imperativeVerbs", "imperative",
            {"low": 1, "high": 2}, {"none": 0.0, "low": 0.3, "high": 0.5},
        ),
        _score_keyword_match(
            text, keywords.CONSTRAINT_INDICATORS,
            "constraintCount", "constraints",
            {"low": 1, "high": 3}, {"none": 0.0, "low": 0.3, "high": 0.7},
        ),
        _score_keyword_match(
            text, keywords.OUTPUT_FORMAT_KEYWORDS,
            "outputFormat", "format",
            {"low": 1, "high": 2}, {"none": 0.0, "low": 0.4, "high": 0.7},
        ),
        _score_keyword_match(
            text, keywords.REFERENCE_KEYWORDS,
            "referenceComplexity", "references",
            {"low": 1, "high": 2}, {"none": 0.0, "low": 0.3, "high": 0.5},
        ),
        _score_keyword_match(
            text, keywords.NEGATION_KEYWORDS,
            "negationComplexity", "negation",
            {"low": 2, "high": 3}, {"none": 0.0, "low": 0.3, "high": 0.5},
        ),
        _score_keyword_match(
            text, keywords.DOMAIN_SPECIFIC_KEYWORDS,
            "domainSpecificity", "domain-specific",
            {"low": 1, "high": 2}, {"none": 0.0, "low": 0.5, "high": 0.8},
        ),
        _score_agentic_task(text),
    ]


def classify(prompt, system_prompt=None, config=None):
    """
    Classify a prompt into a complexity tier.

    Args:
        prompt: The user's prompt text. ``None`` or empty yields a default
            MEDIUM result.
        system_prompt: Optional system prompt (or None)
        config: Optional ScorerConfig; defaults are used when None

    Returns:
        ScoringResult with tier, confidence, signals, and agentic_score
    """
    if not prompt:
        return ScoringResult()
    if config is None:
        config = ScorerConfig()

    dimensions = score_dimensions(prompt, system_prompt)

    weighted_score = 0.0
    for dim in dimensions:
        weighted_score += dim.score * DIMENSION_WEIGHTS.get(dim.name, 0.0)

    result = ScoringResult(
        score=weighted_score,
        agentic_score=dimensions[-1].score,
        signals=[dim.signal for dim in dimensions if dim.signal is not None],
    )

    # Reasoning override: 2+ reasoning markers in user prompt -> force REASONING
    if count_keyword_matches(prompt, keywords.REASONING_KEYWORDS) >= 2:
        confidence = _calibrate_confidence(max(weighted_score, 0.3), config.confidence_steepness)
        result.tier = Tier.REASONING
        result.confidence = max(confidence, 0.85)
        return result

    # Large context override, only while the score sits below COMPLEX
    if (
        estimate_tokens(prompt, system_prompt) > config.max_tokens_force_complex
        and weighted_score < config.medium_complex
    ):
        result.tier = Tier.COMPLEX
        result.confidence = 0.9
        return result

    tier, distance = _map_to_tier(weighted_score, config)
    result.tier = tier
    result.confidence = _calibrate_confidence(distance, config.confidence_steepness)

    # Below threshold -> ambiguous, routed as MEDIUM
    if result.confidence < config.confidence_threshold:
        result.ambiguous = True
        result.tier = Tier.MEDIUM

    return result
