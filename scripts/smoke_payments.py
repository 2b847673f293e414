"""Walk a running instance through create, duplicate, authorize and refund.

Exits non-zero on the first unexpected status code.
"""

import argparse
import sys
from uuid import uuid4

import httpx


def expect(resp: httpx.Response, status_code: int, label: str) -> dict:
    ok = resp.status_code == status_code
    print(f"{'ok  ' if ok else 'FAIL'} {label}: {resp.status_code} {resp.text}")
    if not ok:
        sys.exit(1)
    return resp.json() if resp.headers.get("content-type", "").startswith("application/json") else {}


def run(base_url: str, api_key: str) -> None:
    external_id = f"smoke-{uuid4()}"
    payments = f"{base_url}/api/payments"
    with httpx.Client(timeout=5.0, headers={"X-API-KEY": api_key}) as client:
        created = expect(
            client.post(payments, json={"externalId": external_id, "amount": "100.00", "currency": "brl", "description": "order"}),
            201,
            "create",
        )
        if created["currency"] != "BRL" or created["status"] != "PENDING":
            sys.exit(f"unexpected record: {created}")
        expect(client.post(payments, json={"externalId": external_id, "amount": "100.00", "currency": "brl"}), 409, "duplicate")
        expect(client.patch(f"{payments}/{external_id}/status", json={"status": "AUTHORIZED"}), 200, "authorize")
        expect(client.post(f"{payments}/{external_id}/refund", json={"amount": "150.00"}), 400, "over-refund")
        refunded = expect(client.post(f"{payments}/{external_id}/refund", json={"amount": "50.00"}), 200, "refund")
        if refunded["status"] != "REFUNDED":
            sys.exit(f"unexpected record: {refunded}")
    expect(httpx.get(payments, timeout=5.0), 401, "no api key")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--api-key", default="dev-key")
    args = parser.parse_args()
    run(args.base_url, args.api_key)
