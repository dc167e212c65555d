"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: prompts.py.
"""

from __future__ import annotations


def _language_clause(language: str | None) -> str:
    return f" written in {language}" if language else ""


def explain_code_prompt(language: str | None = None) -> str:
    return (
        "You are an expert software engineer. Explain the following code"
        f"{_language_clause(language)} clearly and concisely: describe what it "
        "does, how it works step by step, and point out any notable patterns "
        "or potential issues."
    )


def optimize_code_prompt(language: str | None = None) -> str:
    return (
        "You are an expert software engineer focused on performance and "
        f"readability. Optimize the following code{_language_clause(language)}. "
        "Return the improved code first, then a short list of the changes "
        "you made and why they help."
    )


def generate_code_prompt(language: str | None = None) -> str:
    target = f" in {language}" if language else ""
    return (
        f"You are an expert software engineer. Write clean, well-structured code{target} "
        "that fulfils the user's description. Include brief comments where "
        "the intent is not obvious and return only the code unless asked otherwise."
    )
