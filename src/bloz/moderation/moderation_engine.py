"""
Moderation decisions for incoming messages.

`decide` applies the checks shared by every policy (bot authors, bypass roles,
channels switched off) and then hands the message to the strategy selected by
the guild's :class:`LinkPolicy`:

- ``standard``: a non-empty whitelist is checked first whenever the message
  carries a link, then links-only channels reject messages without a link and
  no-links channels reject messages with one.
- ``single-link``: links-only channels accept exactly one bare URL whose host is
  whitelisted (subdomains included); no-links channels behave as in
  ``standard``.

The single bare URL rule is also what the history cleanup uses, see
:func:`is_cleanup_violation`.
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence, Tuple

from bloz.datatypes.guild_settings import ChannelMode, GuildSettings, LinkPolicy
from bloz.datatypes.moderation_datatypes import (
    ActionType,
    ModerationDecision,
    ModerationMessage,
    ViolationType,
)
from bloz.moderation.link_detection import (
    extract_domains,
    has_http_url,
    has_link,
    host_matches_whitelist,
    hostname_of,
    single_bare_url,
)
from bloz.moderation.warning_templates import warning_for


def message_has_link(message: ModerationMessage) -> bool:
    """Return True if the text looks like it holds a URL or any attachment URL is http(s)."""
    return has_link(message.content.strip()) or any(has_http_url(url) for url in message.attachment_urls)


def collect_domains(message: ModerationMessage) -> List[str]:
    """Return the distinct hostnames linked from the text and attachments, in first-seen order."""
    domains = extract_domains(message.content.strip())
    for url in message.attachment_urls:
        hostname = hostname_of(url)
        if hostname is not None:
            domains.append(hostname)
    return list(dict.fromkeys(domains))


def single_link_violation(content: str, whitelist: Sequence[str]) -> Optional[Tuple[ViolationType, Optional[str]]]:
    """Check ``content`` against the single bare URL rule.

    Returns None when the content is exactly one URL whose host passes the
    whitelist (or no whitelist is set), otherwise the violation and, for
    domain violations, the offending host.
    """
    url = single_bare_url(content)
    if url is None:
        return ViolationType.LINK_REQUIRED, None

    hostname = hostname_of(url)
    if hostname is None:
        return ViolationType.LINK_REQUIRED, None

    if whitelist and not host_matches_whitelist(hostname, whitelist):
        return ViolationType.DOMAIN_BLOCKED, hostname
    return None


def is_cleanup_violation(content: str, whitelist: Sequence[str]) -> bool:
    """Return True if a historical message should be removed by the cleanup sweep."""
    return single_link_violation(content, whitelist) is not None


def _delete(violation: ViolationType, rng: Optional[random.Random], domain: Optional[str] = None) -> ModerationDecision:
    return ModerationDecision(
        action=ActionType.DELETE,
        violation=violation,
        warning=warning_for(violation, domain, rng),
        offending_domain=domain,
    )


class StandardLinkPolicy:
    """Mode checks with an exact-match whitelist that wins over the mode rules."""

    name = LinkPolicy.STANDARD

    def evaluate(
        self,
        message: ModerationMessage,
        settings: GuildSettings,
        mode: ChannelMode,
        rng: Optional[random.Random] = None,
    ) -> ModerationDecision:
        link_present = message_has_link(message)

        if link_present and settings.whitelist:
            blocked = [domain for domain in collect_domains(message) if domain not in settings.whitelist]
            if blocked:
                return _delete(ViolationType.DOMAIN_BLOCKED, rng, blocked[0])

        if mode is ChannelMode.LINKS_ONLY and not link_present:
            return _delete(ViolationType.LINK_REQUIRED, rng)

        if mode is ChannelMode.NO_LINKS and link_present:
            return _delete(ViolationType.LINK_NOT_ALLOWED, rng)

        return ModerationDecision.allow()


class SingleLinkPolicy:
    """Links-only channels accept one bare whitelisted URL and nothing else."""

    name = LinkPolicy.SINGLE_LINK

    def evaluate(
        self,
        message: ModerationMessage,
        settings: GuildSettings,
        mode: ChannelMode,
        rng: Optional[random.Random] = None,
    ) -> ModerationDecision:
        if mode is ChannelMode.NO_LINKS:
            if message_has_link(message):
                return _delete(ViolationType.LINK_NOT_ALLOWED, rng)
            return ModerationDecision.allow()

        if message.attachment_urls:
            return _delete(ViolationType.LINK_REQUIRED, rng)

        violation = single_link_violation(message.content, settings.whitelist)
        if violation is not None:
            violation_type, domain = violation
            return _delete(violation_type, rng, domain)
        return ModerationDecision.allow()


POLICY_STRATEGIES: Dict[LinkPolicy, StandardLinkPolicy | SingleLinkPolicy] = {
    LinkPolicy.STANDARD: StandardLinkPolicy(),
    LinkPolicy.SINGLE_LINK: SingleLinkPolicy(),
}


def is_exempt(message: ModerationMessage, settings: GuildSettings) -> bool:
    """Return True for bot authors and members holding a bypass role."""
    if message.author_is_bot:
        return True
    return any(role_id in message.author_role_ids for role_id in settings.bypass_roles)


def decide(
    message: ModerationMessage,
    settings: GuildSettings,
    rng: Optional[random.Random] = None,
) -> ModerationDecision:
    """Decide whether ``message`` is allowed under ``settings``.

    Parameters
    ----------
    message:
        Normalized incoming message.
    settings:
        Snapshot of the guild's configuration.
    rng:
        Random source for the warning pick; tests pass a seeded instance.

    Returns
    -------
    ModerationDecision
        ALLOW, or DELETE with the violation and the warning line to present.
    """
    if is_exempt(message, settings):
        return ModerationDecision.allow()

    mode = settings.mode_for(message.channel_id)
    if mode is ChannelMode.OFF:
        return ModerationDecision.allow()

    strategy = POLICY_STRATEGIES.get(settings.policy, POLICY_STRATEGIES[LinkPolicy.STANDARD])
    return strategy.evaluate(message, settings, mode, rng)
