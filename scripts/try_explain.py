#!/usr/bin/env python3
"""
Call the running API for a few concepts and print the explanations.
Run with the API already up: uvicorn explainer.api:app --reload --port 8000

  export GROQ_API_KEY=your-groq-api-key-here
  python3 scripts/try_explain.py "Binary Search" "Recursion"
"""
from __future__ import annotations

import sys

import httpx

BASE = "http://127.0.0.1:8000"


def main(concepts: list[str]) -> None:
    client = httpx.Client(timeout=35.0)
    try:
        health = client.get(f"{BASE}/health")
        health.raise_for_status()
        info = health.json()
        print(f"Server model: {info['model']} (configured: {info['configured']})")

        if not concepts:
            r = client.get(f"{BASE}/topics")
            r.raise_for_status()
            concepts = r.json()["topics"][:2]

        for concept in concepts:
            resp = client.post(f"{BASE}/explain", json={"concept": concept})
            print(f"\n--- POST /explain: {concept} ({resp.status_code}) ---")
            try:
                body = resp.json()
            except ValueError:
                print("Server error body:", resp.text[:500])
                continue
            print(body.get("response") or body.get("error"))

        # Missing concept: expect 400 and no inference call
        bad = client.post(f"{BASE}/refresh-explain", json={})
        print(f"\n--- POST /refresh-explain with no concept ({bad.status_code}) ---")
        print(bad.json())
    finally:
        client.close()


if __name__ == "__main__":
    main(sys.argv[1:])
