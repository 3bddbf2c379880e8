"""
Wayfinder - voice-intent router for portal-based 3D web experiences.

Package structure:
- core: config, logging, errors, common types
- memory: world memory store and world map ingestion
- intent: ordered rule cascade and the resolver
- llm: generative fallback over LiteLLM
- interfaces: HTTP API (FastAPI)
"""

__version__ = "0.1.0"
