#!/usr/bin/env python3
"""
Unit tests for the prompt complexity scorer.
"""

import json
import os
import sys
import unittest

# Add parent directory to path to import prompt_router
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from prompt_router.config import ScorerConfig, Tier, tier_from_string, tier_to_string
from prompt_router.scorer import (
    DIMENSION_WEIGHTS,
    ScoringResult,
    classify,
    count_keyword_matches,
    estimate_tokens,
    score_dimensions,
)

LONG_PROMPT = """Design a distributed job scheduler for our kubernetes cluster.

First read the existing database schema, then propose an architecture:
1. A leader election module
2. A queue backed by the database
3. Workers that optimize throughput

```python
import asyncio

async def run(job):
    return await job.execute()
```

Explain the algorithm for retries and make sure the design scales to
thousands of nodes without a single point of failure.
"""


def dims_by_name(prompt, system_prompt=None):
    return {dim.name: dim for dim in score_dimensions(prompt, system_prompt)}


class TestTierClassification(unittest.TestCase):
    def test_greeting_is_simple(self):
        result = classify("hello")
        self.assertEqual(result.tier, Tier.SIMPLE)
        self.assertFalse(result.ambiguous)

    def test_time_question_is_simple(self):
        result = classify("what time is it?")
        self.assertEqual(result.tier, Tier.SIMPLE)
        self.assertFalse(result.ambiguous)

    def test_complex_prompt_scores_higher_than_greeting(self):
        simple = classify("hello")
        complex_ = classify(LONG_PROMPT)
        self.assertGreater(complex_.score, simple.score)
        self.assertGreater(complex_.score, 0.0)
        self.assertGreaterEqual(complex_.tier, Tier.MEDIUM)
        for signal in ("code", "technical", "multi-step"):
            self.assertIn(signal, complex_.signals)

    def test_code_request_is_at_least_medium(self):
        result = classify("write a python function that sorts a list of integers using quicksort")
        self.assertGreaterEqual(result.tier, Tier.MEDIUM)
        self.assertIn("code", result.signals)

    def test_reasoning_override(self):
        result = classify("Prove the theorem and derive the closed form step by step.")
        self.assertEqual(result.tier, Tier.REASONING)
        self.assertGreaterEqual(result.confidence, 0.85)
        self.assertFalse(result.ambiguous)

    def test_reasoning_override_ignores_boundaries(self):
        config = ScorerConfig()
        config.set_tier_boundaries(10.0, 20.0, 30.0)
        config.set_confidence_threshold(0.99)
        result = classify("Prove the theorem and derive the closed form step by step.", None, config)
        self.assertEqual(result.tier, Tier.REASONING)
        self.assertGreaterEqual(result.confidence, 0.85)
        self.assertFalse(result.ambiguous)

    def test_reasoning_override_wins_over_length_override(self):
        config = ScorerConfig()
        config.set_max_tokens_force_complex(1)
        result = classify("Prove the theorem and derive it step by step", None, config)
        self.assertLess(result.score, config.medium_complex)
        self.assertEqual(result.tier, Tier.REASONING)
        self.assertNotEqual(result.confidence, 0.9)

    def test_reasoning_confidence_has_a_floor(self):
        # logistic(0.3) at steepness 1 is ~0.57, below the floor
        config = ScorerConfig()
        config.set_confidence_steepness(1.0)
        result = classify("Prove the theorem and derive it step by step", None, config)
        self.assertEqual(result.tier, Tier.REASONING)
        self.assertEqual(result.confidence, 0.85)

    def test_reasoning_override_multilingual(self):
        result = classify("请证明这个定理")
        self.assertEqual(result.tier, Tier.REASONING)

    def test_system_prompt_reasoning_does_not_count(self):
        result = classify("hello", "Prove the theorem step by step")
        self.assertEqual(result.tier, Tier.SIMPLE)
        self.assertNotIn("reasoning", result.signals)

    def test_system_prompt_raises_token_dimension(self):
        system_prompt = (
            "You are an expert systems architect with deep knowledge of distributed "
            "computing, microservices, and cloud infrastructure. You help engineering "
            "teams reason about scalability, reliability, observability, and cost. "
            "Keep answers grounded in production experience and call out trade-offs clearly."
        )
        without = classify("hi")
        with_system = classify("hi", system_prompt)
        self.assertGreaterEqual(with_system.score, without.score)
        self.assertIn("short", without.signals)
        self.assertNotIn("short", with_system.signals)


class TestOverridesAndCalibration(unittest.TestCase):
    def test_length_override_forces_complex(self):
        config = ScorerConfig()
        config.set_max_tokens_force_complex(10)
        result = classify("please tell me a little about the weather around here today", None, config)
        self.assertEqual(result.tier, Tier.COMPLEX)
        self.assertEqual(result.confidence, 0.9)
        self.assertFalse(result.ambiguous)

    def test_length_override_skipped_when_score_reaches_complex(self):
        config = ScorerConfig()
        config.set_max_tokens_force_complex(10)
        config.set_tier_boundaries(-2.0, -1.0, 5.0)
        result = classify("please tell me a little about the weather around here today", None, config)
        self.assertEqual(result.tier, Tier.COMPLEX)
        self.assertGreater(result.confidence, 0.99)

    def test_low_confidence_is_ambiguous_medium(self):
        config = ScorerConfig()
        config.set_confidence_threshold(0.99)
        result = classify("hello", None, config)
        self.assertTrue(result.ambiguous)
        self.assertEqual(result.tier, Tier.MEDIUM)
        self.assertTrue(result.format_debug().startswith("tier=AMBIGUOUS "))

    def test_lower_boundaries_never_lower_tier(self):
        prompt = "write a python function that implements binary search with error handling and type annotations"
        default = classify(prompt)
        loose = ScorerConfig()
        loose.set_tier_boundaries(-3.0, -2.5, -2.0)
        elevated = classify(prompt, None, loose)
        self.assertEqual(elevated.tier, Tier.REASONING)
        self.assertGreaterEqual(elevated.tier, default.tier)

    def test_inverted_boundaries_do_not_fail(self):
        config = ScorerConfig()
        config.set_tier_boundaries(0.5, 0.3, 0.0)
        for prompt in ("hello", LONG_PROMPT, "write a poem"):
            result = classify(prompt, None, config)
            self.assertIsInstance(result.tier, Tier)
            self.assertGreaterEqual(result.confidence, 0.0)
            self.assertLessEqual(result.confidence, 1.0)

    def test_confidence_and_agentic_ranges(self):
        prompts = [
            "hello",
            "what time is it?",
            "explain how a b-tree works with examples",
            LONG_PROMPT,
            "Привет, что такое квантовый компьютер?",
            "Schreibe ein Gedicht ohne Reime",
        ]
        for prompt in prompts:
            result = classify(prompt)
            self.assertGreaterEqual(result.confidence, 0.0)
            self.assertLessEqual(result.confidence, 1.0)
            self.assertGreaterEqual(result.agentic_score, 0.0)
            self.assertLessEqual(result.agentic_score, 1.0)

    def test_score_is_weighted_sum_of_dimensions(self):
        dims = score_dimensions(LONG_PROMPT)
        self.assertEqual(len(dims), 15)
        expected = sum(dim.score * DIMENSION_WEIGHTS[dim.name] for dim in dims)
        self.assertAlmostEqual(classify(LONG_PROMPT).score, expected)

    def test_deterministic(self):
        config = ScorerConfig()
        first = classify(LONG_PROMPT, "You are terse.", config)
        second = classify(LONG_PROMPT, "You are terse.", config)
        self.assertEqual(first, second)


class TestDimensions(unittest.TestCase):
    def test_keyword_matches_are_substrings(self):
        self.assertEqual(count_keyword_matches("Read The File now", ("read the file", "file", "xyz")), 2)
        self.assertEqual(count_keyword_matches("classification", ("class",)), 1)
        self.assertEqual(count_keyword_matches("ПРИВЕТ мир", ("привет",)), 1)
        self.assertEqual(count_keyword_matches("", ("class",)), 0)

    def test_token_estimate_counts_both_prompts(self):
        self.assertEqual(estimate_tokens("a" * 40), 10)
        self.assertEqual(estimate_tokens("a" * 40, "b" * 9), 12)

    def test_token_estimate_accepts_lone_surrogates(self):
        prompt = json.loads('"hello \\ud800 world"')
        # "hello " + 3 bytes + " world" = 15 bytes
        self.assertEqual(estimate_tokens(prompt), 3)
        self.assertEqual(estimate_tokens("hi", prompt), 3)

    def test_classify_accepts_lone_surrogates(self):
        result = classify(json.loads('"hello \\ud800 world"'))
        self.assertIsInstance(result.tier, Tier)
        self.assertIn("short", result.signals)

    def test_technical_thresholds(self):
        self.assertEqual(dims_by_name("the algorithm")["technicalTerms"].score, 0.0)
        self.assertIsNone(dims_by_name("the algorithm")["technicalTerms"].signal)
        self.assertEqual(dims_by_name("optimize the algorithm")["technicalTerms"].score, 0.5)
        dim = dims_by_name("optimize the distributed database architecture")["technicalTerms"]
        self.assertEqual(dim.score, 1.0)
        self.assertEqual(dim.signal, "technical")

    def test_negation_needs_two_hits(self):
        self.assertEqual(dims_by_name("don't do it")["negationComplexity"].score, 0.0)
        self.assertEqual(dims_by_name("don't stop and never quit")["negationComplexity"].score, 0.3)

    def test_simple_indicator_is_negative(self):
        dim = dims_by_name("what is rust")["simpleIndicators"]
        self.assertEqual(dim.score, -1.0)
        self.assertEqual(dim.signal, "simple")

    def test_multi_step_patterns(self):
        self.assertEqual(dims_by_name("first clean up, then rebuild")["multiStepPatterns"].score, 0.5)
        self.assertEqual(dims_by_name("then rebuild, but first clean up")["multiStepPatterns"].score, 0.5)
        self.assertEqual(dims_by_name("now do step 3")["multiStepPatterns"].score, 0.5)
        self.assertEqual(dims_by_name("1. gather data")["multiStepPatterns"].score, 0.5)
        self.assertEqual(dims_by_name("0. nothing here")["multiStepPatterns"].score, 0.0)
        self.assertEqual(dims_by_name("one more step please")["multiStepPatterns"].score, 0.0)

    def test_question_count_uses_raw_prompt(self):
        self.assertIn("multi-question", classify("Why? How? When? Where?").signals)
        self.assertNotIn("multi-question", classify("Why? How? When?").signals)
        self.assertNotIn("multi-question", classify("hi", "a? b? c? d? e?").signals)

    def test_agentic_detection(self):
        result = classify(
            "Read the file config.yaml, execute the build script, "
            "then fix any failing tests and verify the output."
        )
        self.assertEqual(result.agentic_score, 1.0)
        self.assertIn("agentic", result.signals)

    def test_agentic_three_hits(self):
        result = classify("Read the file, execute the script, and debug the crash.")
        self.assertGreaterEqual(result.agentic_score, 0.6)
        self.assertEqual(result.agentic_score, 0.6)

    def test_agentic_light(self):
        result = classify("please fix the typo")
        self.assertEqual(result.agentic_score, 0.2)
        self.assertIn("agentic-light", result.signals)
        self.assertEqual(classify("hello").agentic_score, 0.0)


class TestScoringResult(unittest.TestCase):
    def test_empty_prompt_returns_default(self):
        self.assertEqual(classify(""), ScoringResult())
        self.assertEqual(classify(None).tier, Tier.MEDIUM)
        self.assertEqual(classify(None).signals, [])

    def test_format_debug(self):
        self.assertEqual(
            classify("hello").format_debug(),
            "tier=SIMPLE confidence=0.77 score=-0.100 agentic=0.00 signals=[short, simple]",
        )
        self.assertEqual(
            str(ScoringResult()),
            "tier=MEDIUM confidence=0.00 score=0.000 agentic=0.00",
        )

    def test_signals_follow_dimension_order(self):
        self.assertEqual(classify("hello").signals, ["short", "simple"])

    def test_copy_is_independent(self):
        original = classify("hello there")
        copied = original.copy()
        self.assertEqual(copied, original)

        copied.signals.append("extra")
        copied.score = 42.0
        self.assertNotIn("extra", original.signals)
        self.assertNotEqual(original.score, 42.0)

    def test_to_dict(self):
        data = classify("hello").to_dict()
        self.assertEqual(data["tier"], "SIMPLE")
        self.assertEqual(data["signals"], ["short", "simple"])
        self.assertFalse(data["ambiguous"])


class TestScorerConfig(unittest.TestCase):
    def test_defaults(self):
        config = ScorerConfig()
        self.assertEqual(
            (config.simple_medium, config.medium_complex, config.complex_reasoning),
            (0.0, 0.3, 0.5),
        )
        self.assertEqual(config.confidence_threshold, 0.7)
        self.assertEqual(config.confidence_steepness, 12.0)
        self.assertEqual(config.max_tokens_force_complex, 100000)

    def test_copy_gives_same_results(self):
        config = ScorerConfig()
        config.set_tier_boundaries(0.1, 0.4, 0.7)
        config.set_confidence_threshold(0.15)
        copied = config.copy()
        self.assertEqual(classify("test prompt", None, config), classify("test prompt", None, copied))

        copied.set_confidence_steepness(1.0)
        self.assertEqual(config.confidence_steepness, 12.0)

    def test_mutating_config_does_not_touch_past_results(self):
        config = ScorerConfig()
        result = classify("hello", None, config)
        snapshot = result.copy()
        config.set_confidence_threshold(0.99)
        self.assertEqual(result, snapshot)


class TestTierConversion(unittest.TestCase):
    def test_to_string_is_uppercase(self):
        self.assertEqual(tier_to_string(Tier.SIMPLE), "SIMPLE")
        self.assertEqual(tier_to_string(Tier.MEDIUM), "MEDIUM")
        self.assertEqual(tier_to_string(Tier.COMPLEX), "COMPLEX")
        self.assertEqual(tier_to_string(Tier.REASONING), "REASONING")
        self.assertEqual(str(Tier.COMPLEX), "COMPLEX")

    def test_from_string(self):
        self.assertEqual(tier_from_string("simple"), Tier.SIMPLE)
        self.assertEqual(tier_from_string("medium"), Tier.MEDIUM)
        self.assertEqual(tier_from_string("Complex"), Tier.COMPLEX)
        self.assertEqual(Tier.from_string("REASONING"), Tier.REASONING)
        self.assertEqual(tier_from_string("bogus"), Tier.MEDIUM)
        self.assertEqual(tier_from_string(None), Tier.MEDIUM)
        self.assertEqual(tier_from_string(" simple "), Tier.MEDIUM)
        self.assertEqual(tier_from_string("simple\n"), Tier.MEDIUM)

    def test_out_of_range_tier_is_unknown(self):
        self.assertEqual(tier_to_string(7), "UNKNOWN")
        self.assertEqual(tier_to_string(-1), "UNKNOWN")
        self.assertEqual(tier_to_string(3), "REASONING")

    def test_ordering(self):
        self.assertLess(Tier.SIMPLE, Tier.MEDIUM)
        self.assertLess(Tier.MEDIUM, Tier.COMPLEX)
        self.assertLess(Tier.COMPLEX, Tier.REASONING)


if __name__ == "__main__":
    unittest.main()
