#!/usr/bin/env python3
"""
Basic message example.

This example demonstrates the simplest way to use claude-client-python
from asynchronous code.

Usage:
    export ANTHROPIC_API_KEY="your-api-key"
    python examples/basic_chat.py
"""

import asyncio

from claude_client import Anthropic, Message, Model, Role


async def main() -> None:
    """Run basic message example."""
    # API key is read from ANTHROPIC_API_KEY
    client = Anthropic.create(lambda c: c.default_model(Model.CLAUDE_3_5_HAIKU))

    try:
        # Method 1: Nested message builder
        response = await client.messages.create(
            lambda r: r.system("You are a helpful assistant.")
            .message(lambda m: m.role(Role.USER).text("What is the capital of France?"))
            .temperature(0.7)
        )
        print(f"Response: {response.text}")
        print(f"Stop reason: {response.stop_reason}")
        print()

        # Method 2: Continue a conversation with prebuilt messages
        history = [
            Message.user("Write a one-liner to read a file in Python."),
            response.as_message(),
            Message.user("Now without the with statement."),
        ]
        response = await client.messages.create(lambda r: r.messages(*history).max_tokens(100))
        print(f"Python tip: {response.text}")
        print()

        # Method 3: Accumulated usage and cost
        print(f"Tokens: {client.usage.input_tokens} in, {client.usage.output_tokens} out")
        print(f"Cost: ${client.cost.total:.6f}")

    finally:
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
