"""
basic_completion.py — Minimal OpenRouter completion example.

Demonstrates one cached, rate-limited, retried completion call.

Usage:
    export OPENROUTER_API_KEY=sk-or-...
    python examples/basic_completion.py
"""

from openrouter_pipeline import (
    GenerationOptions,
    Message,
    OpenRouterClient,
    OpenRouterError,
    OpenRouterSettings,
    UsageTracker,
)


async def main() -> None:
    settings = OpenRouterSettings.from_env().validate()
    usage = UsageTracker()

    async with OpenRouterClient(settings) as client:
        try:
            result = await client.generate_completion(
                [Message(role="user", content="Hello! What can you do?")],
                GenerationOptions(system_prompt="You are a helpful assistant. Be concise."),
                usage=usage,
            )
        except OpenRouterError as error:
            print(f"[{error.kind.value}] {error.user_message()}")
            return

    print(result.content)
    print(f"tokens={usage.total_tokens} cost~${usage.estimated_cost_usd:.6f}")


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())
