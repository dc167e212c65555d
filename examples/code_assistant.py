"""
code_assistant.py — The explain/optimize/generate convenience wrappers.

Usage:
    export OPENROUTER_API_KEY=sk-or-...
    python examples/code_assistant.py
"""

from openrouter_pipeline import GenerationOptions, OpenRouterClient, OpenRouterSettings

SNIPPET = """
def total(xs):
    t = 0
    for i in range(len(xs)):
        t = t + xs[i]
    return t
"""


async def main() -> None:
    settings = OpenRouterSettings.from_env().validate()
    options = GenerationOptions(model="anthropic/claude-3.5-sonnet", temperature=0.2)

    async with OpenRouterClient(settings) as client:
        explained = await client.explain_code(SNIPPET, language="Python", options=options)
        optimized = await client.optimize_code(SNIPPET, language="Python", options=options)
        generated = await client.generate_code("parse an ISO-8601 duration", language="Python")

    for title, result in (("Explain", explained), ("Optimize", optimized), ("Generate", generated)):
        print(f"## {title}\n{result.content}\n")


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())
