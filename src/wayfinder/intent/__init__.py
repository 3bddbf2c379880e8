"""
Intent module - transcript + portal context -> action token.

- rules: ordered rule table (universal, per-portal, global fallbacks)
- resolver: cascade of rules, world memory match, generative fallback
"""

from wayfinder.intent.resolver import IntentResolver
from wayfinder.intent.rules import IntentRule, build_rules

__all__ = ["IntentResolver", "IntentRule", "build_rules"]
