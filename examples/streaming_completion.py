"""
streaming_completion.py — Print a completion as it is generated.

Usage:
    export OPENROUTER_API_KEY=sk-or-...
    python examples/streaming_completion.py
"""

from contextlib import aclosing

from openrouter_pipeline import Message, OpenRouterClientBuilder


async def main() -> None:
    client = OpenRouterClientBuilder().profile("production").build()
    client.settings.validate()

    async with client, aclosing(
        client.stream_completion([Message(role="user", content="Write a haiku about retries.")])
    ) as stream:
        async for text in stream:
            print(text, end="", flush=True)
    print()


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())
