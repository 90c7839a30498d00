from restaurant.db import SessionLocal
from restaurant.models.cart import Cart


def test_open_read_transaction_does_not_block_a_writer():
    reader = SessionLocal()
    try:
        # deferred BEGIN: the snapshot is taken at the first read
        assert reader.query(Cart).count() == 0

        with SessionLocal() as writer:
            writer.add(Cart(customer_id="cust-9"))
            writer.commit()

        assert reader.query(Cart).count() == 0
        reader.rollback()
        assert reader.query(Cart).count() == 1
    finally:
        reader.close()


def test_sqlite_connections_use_wal_and_foreign_keys():
    with SessionLocal() as s:
        assert s.connection().exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
        assert s.connection().exec_driver_sql("PRAGMA journal_mode").scalar() == "wal"
