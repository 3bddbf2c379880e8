"""Test harness configuration."""

import os

# Use LiteLLM's bundled model cost map instead of fetching it over the network
# in a background thread, which races with test-module imports when offline.
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")
