import sqlite3
import sys

DB = sys.argv[1] if len(sys.argv) > 1 else "dev.db"
CUSTOMER = sys.argv[2] if len(sys.argv) > 2 else None

conn = sqlite3.connect(DB)
cur = conn.cursor()

print("=== Recent Orders ===")
cur.execute(
    "SELECT id, customer_id, order_type, status, subtotal, tax, discount, total, created_at "
    "FROM orders ORDER BY created_at DESC LIMIT 20"
)
for r in cur.fetchall():
    print(r)

print("\n=== Carts ===")
if CUSTOMER:
    cur.execute(
        "SELECT id, customer_id, total, updated_at FROM carts WHERE customer_id=?",
        (CUSTOMER,),
    )
else:
    cur.execute("SELECT id, customer_id, total, updated_at FROM carts ORDER BY id DESC LIMIT 20")
carts = cur.fetchall()
for c in carts:
    cur.execute(
        "SELECT menu_item_id, quantity, price FROM cart_items WHERE cart_id=?", (c[0],)
    )
    lines = cur.fetchall()
    computed = sum(q * p for _, q, p in lines)
    flag = "" if abs(computed - (c[2] or 0)) < 0.005 else "  <-- total out of sync"
    print({"cart": c, "lines": lines}, flag)

conn.close()
