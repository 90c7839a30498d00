"""
Double-submit checker against a running server.

Fills the cart of one customer, then fires N concurrent place-order requests
for that customer. Exactly one should succeed; the rest should be rejected
with "Cart is empty".

    python tools/concurrency_checkout.py --workers 8 --product 1
"""
import argparse
import concurrent.futures
import os

import requests

BASE = os.environ.get("RESTAURANT_BASE", "http://127.0.0.1:8000")


def _headers(customer_id):
    return {"X-User-Id": customer_id, "X-User-Roles": "Customer"}


def order_task(i, customer_id, payload):
    try:
        r = requests.post(
            f"{BASE}/api/customer/orders/place-order",
            json=payload,
            headers=_headers(customer_id),
            timeout=20,
        )
        return (i, r.status_code, r.json())
    except requests.RequestException as e:
        return (i, "ERR", str(e))


def run(workers, customer_id, product_id, qty):
    r = requests.post(
        f"{BASE}/api/customer/cart/add",
        json={"product_id": product_id, "quantity": qty},
        headers=_headers(customer_id),
        timeout=10,
    )
    r.raise_for_status()
    print("cart:", r.json()["data"])

    payload = {
        "customer_name": "Load Test",
        "phone_number": "0100000000",
        "order_type": 1,
        "payment_method": 1,
    }
    print(f"Running checkout test: workers={workers}, customer={customer_id}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(order_task, i, customer_id, payload) for i in range(workers)]
        results = [f.result() for f in futures]

    for res in results:
        print(res)
    placed = [res for res in results if res[1] == 200]
    print(f"Orders placed: {len(placed)} (expected 1)")
    return len(placed)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Concurrent checkout (double-submit) test.")
    parser.add_argument("--workers", type=int, default=8)
    parser.add_argument("--customer", default="load-test-customer")
    parser.add_argument("--product", type=int, default=1)
    parser.add_argument("--qty", type=int, default=1)
    args = parser.parse_args()

    placed = run(args.workers, args.customer, args.product, args.qty)
    raise SystemExit(0 if placed == 1 else 1)
