"""Async load generator for the payment routing endpoint."""

import argparse
import asyncio
import random
import statistics
import time
from collections import Counter
from uuid import uuid4

import httpx


async def send_one(client: httpx.AsyncClient, base_url: str):
    """Send one payment request and return (status_code, latency_ms, body)."""

    started = time.perf_counter()
    payload = {
        "amount": round(random.uniform(1, 500), 2),
        "currency": random.choice(["BRL", "USD"]),
    }
    try:
        resp = await client.post(
            f"{base_url}/payments",
            json=payload,
            headers={"x-correlation-id": str(uuid4())},
        )
        latency = (time.perf_counter() - started) * 1000
        body = resp.json() if resp.status_code == 200 else {}
        return resp.status_code, latency, body
    except Exception:
        latency = (time.perf_counter() - started) * 1000
        return 599, latency, {}


async def run(total: int, concurrency: int, base_url: str):
    """Execute a bounded-concurrency load run and print summary stats.

    Also checks that every issued payment id is unique.
    """

    sem = asyncio.Semaphore(concurrency)
    results = []

    async with httpx.AsyncClient(timeout=10.0) as client:
        async def worker():
            async with sem:
                return await send_one(client, base_url)

        tasks = [asyncio.create_task(worker()) for _ in range(total)]
        for task in asyncio.as_completed(tasks):
            results.append(await task)

    codes = [c for c, _, _ in results]
    lats = [latency for _, latency, _ in results]
    bodies = [body for _, _, body in results if body]
    ids = [body["id"] for body in bodies]
    statuses = Counter(body["status"] for body in bodies)
    providers = Counter(body["provider"] for body in bodies)
    success = sum(1 for c in codes if 200 <= c < 300)
    errors = total - success

    def pct(values, p):
        """Simple percentile helper for sorted latency values."""

        if not values:
            return 0.0
        idx = min(len(values) - 1, max(0, int((p / 100.0) * len(values)) - 1))
        return sorted(values)[idx]

    print(f"total={total}")
    print(f"success={success}")
    print(f"errors={errors}")
    print(f"error_rate={(errors / total) * 100:.2f}%")
    print(f"statuses={dict(statuses)}")
    print(f"providers={dict(providers)}")
    print(f"duplicate_ids={len(ids) - len(set(ids))}")
    print(f"p50_ms={pct(lats, 50):.2f}")
    print(f"p95_ms={pct(lats, 95):.2f}")
    print(f"p99_ms={pct(lats, 99):.2f}")
    print(f"avg_ms={statistics.mean(lats):.2f}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--total", type=int, default=1000)
    parser.add_argument("--concurrency", type=int, default=100)
    parser.add_argument("--base-url", default="http://localhost:8000")
    args = parser.parse_args()
    asyncio.run(run(args.total, args.concurrency, args.base_url))
