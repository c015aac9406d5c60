"""Waitlist capture: email check, delivery to the signup form, join/snooze flags."""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from urllib.parse import quote

import requests

from ..config import settings
from ..config.rules import EMAIL_PATTERN, WAITLIST_MAIL_SUBJECT, WAITLIST_MAILTO
from ..config.scoring_constants import SPLASH_SNOOZE_DAYS, WAITLIST_TIMEOUT
from ..storage.repository import KeyValueStore, mark_joined, should_show_waitlist, snooze
from ..utils.logging import get_logger

logger = get_logger(__name__)

_EMAIL_RE = re.compile(EMAIL_PATTERN)


class InvalidInput(ValueError):
    """User-entered value rejected before anything is submitted."""


class WaitlistUnavailable(RuntimeError):
    """The signup form could not be reached; the visitor is not marked joined."""


@dataclass(frozen=True)
class JoinResult:
    email: str
    delivered: bool
    # Set when no form is configured: the visitor sends the address themselves.
    mailto: Optional[str] = None


def validate_email(email: Optional[str]) -> str:
    value = (email or "").strip()
    if not value or not _EMAIL_RE.match(value):
        raise InvalidInput("Enter a valid email")
    return value


def mailto_link(email: str) -> str:
    return WAITLIST_MAILTO.format(
        subject=quote(WAITLIST_MAIL_SUBJECT, safe=""),
        body=quote(email, safe=""),
    )


def submit_email(
    email: str,
    form_url: str,
    entry: str,
    session: Optional[requests.Session] = None,
) -> None:
    """POST ``email`` to the form as field ``entry.<entry>``. One attempt."""
    data = {f"entry.{entry}": email}
    if session is None:
        with requests.Session() as own:
            resp = own.post(form_url, data=data, timeout=WAITLIST_TIMEOUT)
    else:
        resp = session.post(form_url, data=data, timeout=WAITLIST_TIMEOUT)
    resp.raise_for_status()


def join(
    store: KeyValueStore,
    email: Optional[str],
    form_url: Optional[str] = None,
    entry: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> JoinResult:
    """Validate ``email``, deliver it, then remember that this visitor joined.

    Without a configured form the address is not sent anywhere; the result
    carries a mailto link for the caller to offer instead. A failed POST
    raises WaitlistUnavailable and leaves the joined flag unset.
    """
    value = validate_email(email)
    form_url = settings.WAITLIST_FORM_URL if form_url is None else form_url
    entry = settings.WAITLIST_ENTRY if entry is None else entry

    if not form_url or not entry:
        logger.info("Waitlist form not configured, offering mailto")
        mark_joined(store)
        return JoinResult(email=value, delivered=False, mailto=mailto_link(value))

    try:
        submit_email(value, form_url, entry, session=session)
    except requests.RequestException as exc:
        logger.warning("Waitlist signup failed: %s", exc)
        raise WaitlistUnavailable(f"Couldn't reach the waitlist right now: {exc}") from exc

    mark_joined(store)
    logger.info("Waitlist joined")
    return JoinResult(email=value, delivered=True)


def dismiss(store: KeyValueStore, days: int = SPLASH_SNOOZE_DAYS, now: Optional[datetime] = None) -> int:
    return snooze(store, days, now)


def visible(store: KeyValueStore, now: Optional[datetime] = None) -> bool:
    return should_show_waitlist(store, now)
