"""
Ordered intent rule table.

Each rule pairs a whole-word transcript pattern with optional portal and
mesh constraints and a fixed result. Rules are evaluated top to bottom and
the first hit wins, so list position is the priority.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import quote

from wayfinder.core.types import DEFAULT_PORTAL, ActionResult

VIBE_ENERGY = "the-vibe-energy"
MEET_JOZ = "meet-joz"

MeshPredicate = Callable[[str | None], bool]


def words(*phrases: str) -> re.Pattern:
    """Compile phrases into one whole-word alternation."""
    alternation = "|".join(re.escape(p) for p in phrases)
    return re.compile(rf"\b(?:{alternation})\b")


def mesh_contains(fragment: str) -> MeshPredicate:
    return lambda mesh: bool(mesh) and fragment in mesh.lower()


def mesh_is(name: str) -> MeshPredicate:
    return lambda mesh: bool(mesh) and mesh.lower() == name


@dataclass(frozen=True)
class IntentRule:
    """One row of the cascade."""

    name: str
    pattern: re.Pattern
    action: str | None
    target: str | None = None
    awareness: str | None = None
    portal: str | None = None  # None matches every portal
    skip_portal: str | None = None
    mesh: MeshPredicate | None = None

    def matches(self, clean: str, portal: str, mesh: str | None) -> bool:
        if self.portal is not None and self.portal != portal:
            return False
        if self.skip_portal is not None and self.skip_portal == portal:
            return False
        if self.mesh is not None and not self.mesh(mesh):
            return False
        return bool(self.pattern.search(clean))

    def result(self) -> ActionResult:
        return ActionResult(action=self.action, target=self.target, awareness=self.awareness)


# Keyword families

# Contact and call need a named recipient, show/hide need a contact noun, so a
# bare "open" or "close" still reaches the portal rules. Open product question:
# whether a bare verb should hit the contact buttons first.
CONTACT = words(
    "contact joz", "contact him", "email joz", "email him", "e-mail joz",
    "send an email", "send email", "get in touch", "reach out", "write to joz",
)
CALL = words("call joz", "call him", "phone joz", "phone him", "ring joz", "give joz a call")
HIDE_CONTACT = re.compile(
    r"\b(?:remove|hide|close|dismiss)\b.*\b(?:contact|contacts|buttons?|icons?)\b"
)
SHOW_CONTACT = re.compile(
    r"\b(?:show|bring back|display|open)\b.*\b(?:contact|contacts|buttons?|icons?)\b"
)

AR_LAUNCH = words("launch in space", "open in space", "view in ar", "launch ar")

N2X_PAUSE = words(
    "pause", "stop", "pause neurons", "stop neurons", "pause animation", "stop animation",
)
N2X_RESUME = words(
    "play", "resume", "continue", "start", "resume neurons", "play neurons",
    "start neurons", "resume animation", "play animation",
)
N2X_BACK = words("back", "exit", "leave", "return", "go back")

JOZ_VIBE = words("vibe")
JOZ_DISCOVER = words("discover")
JOZ_SKILLS = words("skills", "show skills", "open skills")
JOZ_BACK = words("back", "go back", "return")
JOZ_PAUSE = words("pause", "stop")
JOZ_RESUME = words("play", "resume", "continue")
JOZ_EXIT = words("exit", "leave", "close joz", "exit joz")

GLOBAL_EXIT = words(
    "exit", "leave portal", "leave the portal", "close portal", "close the portal",
)
GLOBAL_BACK = words("back", "go back", "return")
ROOT_BACK = words("back", "go back", "return", "leave")

CLICK_ONLY = "Moving forward happens with a click. Voice can only take you back from here."


def build_rules(contact_email: str, contact_phone: str, contact_subject: str = "") -> list[IntentRule]:
    """Build the cascade in evaluation order."""
    mailto = f"mailto:{contact_email}"
    if contact_subject:
        mailto += f"?subject={quote(contact_subject)}"
    tel = f"tel:{contact_phone}"

    return [
        # 1. Universal direct commands, ahead of any portal rule
        IntentRule(
            "contact", CONTACT, "contact_joz", target=mailto,
            awareness="Opening your mail app so you can write to Joz.",
        ),
        IntentRule("call", CALL, "call_joz", target=tel),
        IntentRule("hide_contact", HIDE_CONTACT, "hide_contact_buttons"),
        IntentRule("show_contact", SHOW_CONTACT, "show_contact_buttons"),

        # 2. the-vibe-energy
        IntentRule("n2x_pause", N2X_PAUSE, "n2x_pause", portal=VIBE_ENERGY),
        IntentRule("n2x_resume", N2X_RESUME, "n2x_resume", portal=VIBE_ENERGY),
        IntentRule("n2x_back", N2X_BACK, "back", target="/", portal=VIBE_ENERGY),
        IntentRule("n2x_ar", AR_LAUNCH, "launch_in_space_n2x", portal=VIBE_ENERGY),

        # 3. meet-joz; forward navigation is click-only
        IntentRule("joz_vibe", JOZ_VIBE, None, portal=MEET_JOZ),
        IntentRule("joz_discover", JOZ_DISCOVER, None, awareness=CLICK_ONLY, portal=MEET_JOZ),
        IntentRule("joz_skills", JOZ_SKILLS, None, awareness=CLICK_ONLY, portal=MEET_JOZ),
        # Back resolves by mesh. The "vibe" exit row shadows the floor no-op below it;
        # keep both until product decides which one is intended.
        IntentRule(
            "joz_back_from_vibe", JOZ_BACK, "vibe_back", target="/",
            portal=MEET_JOZ, mesh=mesh_is("vibe"),
        ),
        IntentRule(
            "joz_back_from_skills", JOZ_BACK, "vibe_back1",
            portal=MEET_JOZ, mesh=mesh_contains("skills"),
        ),
        IntentRule(
            "joz_back_from_discover", JOZ_BACK, "vibe_back",
            portal=MEET_JOZ, mesh=mesh_contains("discover"),
        ),
        IntentRule(
            "joz_back_floor", JOZ_BACK, None,
            portal=MEET_JOZ, mesh=mesh_is("vibe"),
        ),
        IntentRule("joz_back_default", JOZ_BACK, "vibe_back", portal=MEET_JOZ),
        IntentRule("joz_pause", JOZ_PAUSE, "pause", portal=MEET_JOZ),
        IntentRule("joz_resume", JOZ_RESUME, "resume", portal=MEET_JOZ),
        IntentRule("joz_exit", JOZ_EXIT, "back", target="/", portal=MEET_JOZ),
        IntentRule("joz_ar", AR_LAUNCH, "launch_in_space_workf", portal=MEET_JOZ),

        # 4. AR launch safety net, dispatched by portal
        IntentRule("ar_n2x", AR_LAUNCH, "launch_in_space_n2x", portal=VIBE_ENERGY),
        IntentRule("ar_workf", AR_LAUNCH, "launch_in_space_workf", portal=MEET_JOZ),

        # 5. Global exit, and back from any portal other than root
        IntentRule("global_exit", GLOBAL_EXIT, "back", target="/"),
        IntentRule("global_back", GLOBAL_BACK, "back", target="/", skip_portal=DEFAULT_PORTAL),

        # 6. Nowhere to go back to from root
        IntentRule("root_back", ROOT_BACK, None, portal=DEFAULT_PORTAL),
    ]


def first_match(
    rules: list[IntentRule], clean: str, portal: str, mesh: str | None
) -> IntentRule | None:
    """Return the first rule that fires, or None."""
    for rule in rules:
        if rule.matches(clean, portal, mesh):
            return rule
    return None
