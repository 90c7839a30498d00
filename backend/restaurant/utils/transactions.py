from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def smart_transaction(session: Session) -> Iterator:
    """
    Run the block inside a transaction on `session`.

    If the session already has a transaction open, a SAVEPOINT (begin_nested)
    is used so that only the work of this block is rolled back on error and
    the caller stays in charge of the outer commit. Otherwise a normal
    transaction is started and committed when the block exits cleanly.

        with smart_transaction(db):
            ... DB work ...
    """
    if session.in_transaction():
        cm = session.begin_nested()
    else:
        cm = session.begin()
    with cm:
        yield
