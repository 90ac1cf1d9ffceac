"""
Counters - sequential folio numbers for quotes, purchase orders and tickets.

Numbers are allocated inside the caller's transaction: the counter row is
locked, incremented and flushed together with the new document, so a
rollback releases the number and two concurrent writers never share one.
"""

import logging
from datetime import datetime
from sqlalchemy.orm import Session

from database.models import Counter

logger = logging.getLogger(__name__)

QUOTES = 'quotes'
PURCHASE_ORDERS = 'purchaseOrders'
TICKETS = 'tickets'


def format_document_number(prefix, number):
    """Human readable folio, e.g. COT-0007."""
    if number is None:
        return None
    return f"{prefix}-{int(number):04d}"


def next_number(session: Session, name: str) -> int:
    """
    Allocate the next number of the named counter.

    The first number of a new counter is 1.
    """
    counter = (
        session.query(Counter)
        .filter(Counter.name == name)
        .with_for_update()
        .first()
    )

    if counter is None:
        counter = Counter(name=name, last_number=0)
        session.add(counter)

    counter.last_number = (counter.last_number or 0) + 1
    counter.updated_at = datetime.utcnow()
    session.flush()
    logger.debug(f"Counter {name} advanced to {counter.last_number}")
    return counter.last_number


def current_number(session: Session, name: str) -> int:
    """Last number handed out by the counter, 0 if none yet."""
    counter = session.get(Counter, name)
    return counter.last_number if counter else 0
