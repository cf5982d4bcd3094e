"""
Banter lines used when a message is removed.

Each violation type has its own pool. Domain lines carry a ``{domain}``
placeholder filled with the first domain that failed the whitelist.
"""

from __future__ import annotations

import random
from typing import Dict, Optional, Sequence

from bloz.datatypes.moderation_datatypes import ViolationType

LINK_REQUIRED_LINES: tuple[str, ...] = (
    "*Hun, this channel runs on links. Bring one or jog on.*",
    "*Cute essay. Wrong room. Links only in here.*",
    "*Checked the guest list: no plain text booked for tonight.*",
    "*Darling, this isn't a Q&A. Links or leave.*",
    "*Snatched that faster than fake credits bait. Post a link next time.*",
    "*Typed? Sweet. Now try again with an actual link.*",
    "*Text-only entries get bounced at the door. Link up.*",
)

LINK_NOT_ALLOWED_LINES: tuple[str, ...] = (
    "*Oi, no links in this channel. Bounced.*",
    "*Spotted a link where links don't go. Not today, pal.*",
    "*Wrong runway for that link. Keep it chatty in here.*",
    "*Links stay outside this room, babe.*",
    "*That link just got shown the exit.*",
)

DOMAIN_BLOCKED_LINES: tuple[str, ...] = (
    "*{domain}? Not on the VIP list, hun. Back of the queue.*",
    "*Stamped REJECTED on {domain}. This room doesn't take knock-offs.*",
    "*{domain}? Babe, that ain't couture, that's clearance.*",
    "*{domain} tried the velvet rope. Denied.*",
    "*{domain}? Cute, but it's not on the list.*",
    "*{domain} gets bounced harder than a spam wishlist.*",
)

WARNING_POOLS: Dict[ViolationType, Sequence[str]] = {
    ViolationType.LINK_REQUIRED: LINK_REQUIRED_LINES,
    ViolationType.LINK_NOT_ALLOWED: LINK_NOT_ALLOWED_LINES,
    ViolationType.DOMAIN_BLOCKED: DOMAIN_BLOCKED_LINES,
}

_default_rng = random.Random()


def pick_warning(pool: Sequence[str], rng: Optional[random.Random] = None) -> str:
    """Pick one line uniformly at random from ``pool``."""
    if not pool:
        raise ValueError("warning pool is empty")
    return (rng or _default_rng).choice(pool)


def warning_for(
    violation: ViolationType,
    domain: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Return a random warning line for ``violation``, with ``domain`` filled in."""
    line = pick_warning(WARNING_POOLS[violation], rng)
    if violation is ViolationType.DOMAIN_BLOCKED:
        return line.format(domain=domain or "that site")
    return line
