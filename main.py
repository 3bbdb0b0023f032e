"""
Family Calendar Lite — Entry Point.

`python main.py` unlocks the session, loads the events from the configured
backend and logs the upcoming agenda and open approval requests.
"""

import asyncio
import logging

from src.adapters.backend_factory import create_backend
from src.config import settings
from src.core.approval import approval_hint
from src.core.event_store import EventStore
from src.core.query import View, ViewState, agenda_list
from src.core.session_gate import SessionGate
from src.data.db import SessionDB
from src.ports.backend_port import BackendError

logger = logging.getLogger("main")


def configure_logging() -> None:
    """Root logging at the level configured by LOG_LEVEL."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


async def run() -> int:
    gate = SessionGate(SessionDB())
    if not gate.is_authorized():
        pin = await asyncio.to_thread(input, "PIN: ")
        if not gate.authorize(pin.strip()):
            logger.error("Wrong PIN")
            return 1

    store = EventStore(create_backend())
    try:
        await store.load()
    except BackendError:
        return 1

    for event in agenda_list(store.events, ViewState(view=View.AGENDA)):
        logger.info("%s  %s (%s)", event.start_at, event.title, event.who.value)
    for event in agenda_list(store.events, ViewState(view=View.PENDING)):
        logger.info("%s  %s: %s", event.start_at, event.title, approval_hint(event))
    return 0


def main() -> None:
    configure_logging()
    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
