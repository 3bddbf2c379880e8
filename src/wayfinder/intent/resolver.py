"""Intent resolution cascade."""

import re

from wayfinder.core.config import Settings
from wayfinder.core.errors import MissingFieldError, UpstreamError
from wayfinder.core.logging import get_logger
from wayfinder.core.types import DEFAULT_PORTAL, ActionResult, PortalContext
from wayfinder.intent.rules import IntentRule, build_rules, first_match
from wayfinder.llm.fallback import GenerativeFallback
from wayfinder.memory.base import normalize_command
from wayfinder.memory.store import WorldMemoryStore

logger = get_logger("intent.resolver")

# A stray "vibe" memory must not fire from the top level
SUPPRESSED_AT_ROOT = {"vibe"}


def phrase_in(phrase: str, clean: str) -> bool:
    """Whole-word containment; the phrase is matched literally."""
    return re.search(rf"\b{re.escape(phrase)}\b", clean) is not None


class IntentResolver:
    """
    Resolve an utterance to an ActionResult.

    Order: rule table, world memory, generative fallback. The first hit
    short-circuits everything after it. Only the fallback can fail.
    """

    def __init__(
        self,
        store: WorldMemoryStore,
        rules: list[IntentRule],
        fallback: GenerativeFallback | None = None,
    ):
        self.store = store
        self.rules = rules
        self.fallback = fallback

    async def resolve(
        self,
        transcript: str,
        current_portal: str = DEFAULT_PORTAL,
        current_mesh: str | None = None,
    ) -> ActionResult:
        """
        Resolve a transcript spoken inside a portal.

        Raises:
            MissingFieldError: If transcript is empty
            UpstreamError: If the generative fallback fails
        """
        ctx = PortalContext(
            transcript=transcript or "",
            current_portal=current_portal or DEFAULT_PORTAL,
            current_mesh=current_mesh,
        )
        if not ctx.clean:
            raise MissingFieldError("transcript", "Missing transcript")

        logger.info(
            f"Reasoning about {ctx.clean!r} in portal {ctx.current_portal!r}"
            + (f" (mesh {ctx.current_mesh!r})" if ctx.current_mesh else "")
        )

        result = self.match_rules(ctx)
        if result is not None:
            return result

        result = self.match_memory(ctx)
        if result is not None:
            return result

        if self.fallback is None:
            raise UpstreamError("No rule or memory matched and no generative fallback is configured")

        return await self.fallback.suggest(ctx.current_portal, ctx.transcript)

    def match_rules(self, ctx: PortalContext) -> ActionResult | None:
        rule = first_match(self.rules, ctx.clean, ctx.current_portal, ctx.current_mesh)
        if rule is None:
            return None
        logger.info(f"Rule {rule.name} -> {rule.action!r}")
        return rule.result()

    def match_memory(self, ctx: PortalContext) -> ActionResult | None:
        """First stored record whose command appears as a whole word."""
        for mesh, record in self.store.all().items():
            commands = [normalize_command(c) for c in record.commands]
            if not any(cmd and phrase_in(cmd, ctx.clean) for cmd in commands):
                continue

            if mesh in SUPPRESSED_AT_ROOT and ctx.current_portal == DEFAULT_PORTAL:
                logger.info(f"Ignoring memory match {mesh!r} from root")
                return ActionResult.noop()

            logger.info(f"Memory match: {ctx.clean!r} -> {mesh}")
            return ActionResult(action=mesh, target=record.target)
        return None


def create_resolver(
    settings: Settings,
    store: WorldMemoryStore,
    fallback: GenerativeFallback | None = None,
) -> IntentResolver:
    """Build a resolver wired from settings."""
    rules = build_rules(
        contact_email=settings.contact_email,
        contact_phone=settings.contact_phone,
        contact_subject=settings.contact_subject,
    )
    return IntentResolver(store=store, rules=rules, fallback=fallback)
