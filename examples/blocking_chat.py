#!/usr/bin/env python3
"""
Blocking calls from synchronous code.

This example sends requests from several plain threads at once, and
shows how a CancelToken releases a waiting caller.

Usage:
    export ANTHROPIC_API_KEY="your-api-key"
    python examples/blocking_chat.py
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

from claude_client import (
    Anthropic,
    CancellationError,
    CancelToken,
    ClientError,
    Role,
)

PROMPTS = [
    "Name a prime number larger than 100.",
    "Give me a synonym for 'quick'.",
    "What is the boiling point of water in Fahrenheit?",
]


def ask(client: Anthropic, prompt: str) -> tuple[str, float]:
    """Send one prompt and return the answer and latency in ms."""
    start_time = time.perf_counter()
    try:
        response = client.messages.create_blocking(
            lambda r: r.max_tokens(100).message(lambda m: m.role(Role.USER).text(prompt))
        )
        answer = response.text or ""
    except ClientError as e:
        answer = f"ERROR: {e}"
    return answer, (time.perf_counter() - start_time) * 1000


def main() -> None:
    """Run blocking example."""
    with Anthropic.create(lambda c: c.timeout(30)) as client:
        with ThreadPoolExecutor(max_workers=len(PROMPTS)) as pool:
            for prompt, (answer, latency_ms) in zip(
                PROMPTS, pool.map(lambda p: ask(client, p), PROMPTS)
            ):
                print(f"{prompt}\n  -> {answer} ({latency_ms:.0f}ms)")

        # Give up on a long answer after half a second
        token = CancelToken()
        threading.Timer(0.5, token.cancel).start()
        try:
            client.messages.create_blocking(
                lambda r: r.user("Write a long essay about event loops."), cancel=token
            )
        except CancellationError as e:
            print(f"Cancelled: {e.reason}")

        print(client)


if __name__ == "__main__":
    main()
