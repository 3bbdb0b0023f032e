"""
Family Calendar Lite — PIN session gate.

A single shared passcode unlocks the calendar for a fixed number of days.
The expiry is stored as epoch milliseconds under `pin_expiry`.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.data.db import SessionDB

logger = logging.getLogger(__name__)

PIN_EXPIRY_KEY = "pin_expiry"


def _to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class SessionGate:
    """Expiring-PIN gate; the rest of the app only sees a boolean."""

    def __init__(
        self,
        session_db: SessionDB,
        pin_code: str | None = None,
        ttl_days: int | None = None,
    ) -> None:
        if pin_code is None or ttl_days is None:
            from src.config import settings
            pin_code = settings.PIN_CODE if pin_code is None else pin_code
            ttl_days = settings.PIN_TTL_DAYS if ttl_days is None else ttl_days

        self._db = session_db
        self._pin_code = pin_code
        self._ttl = timedelta(days=ttl_days)

    def is_authorized(self, now: datetime | None = None) -> bool:
        """True while the stored expiry lies in the future."""
        raw = self._db.get(PIN_EXPIRY_KEY)
        if not raw:
            return False
        try:
            expiry = float(raw)
        except ValueError:
            expiry = math.nan
        if not math.isfinite(expiry):
            logger.warning("Ignoring unreadable PIN expiry: %r", raw)
            return False
        now = now or datetime.now()
        return _to_millis(now) < expiry

    def authorize(self, pin: str, now: datetime | None = None) -> bool:
        """Check the PIN; on a match keep the session open for ttl_days."""
        if pin != self._pin_code:
            logger.info("Wrong PIN entered")
            return False

        expiry = (now or datetime.now()) + self._ttl
        self._db.set(PIN_EXPIRY_KEY, str(_to_millis(expiry)))
        logger.info("Session authorized until %s", expiry.isoformat(timespec="minutes"))
        return True

    def revoke(self) -> None:
        """Forget the stored session."""
        self._db.remove(PIN_EXPIRY_KEY)
