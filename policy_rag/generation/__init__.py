"""
Answer generation for the insurance chat.

Usage:
    from policy_rag.generation import GeminiGenerator, build_system_prompt

    generator = GeminiGenerator(model_name="gemini-2.5-flash", project_id="my-project")
    answer = await generator.generate(build_system_prompt(matches), recent_messages)
"""

from .base import BaseGenerator
from .gemini import GeminiGenerator
from .prompt import build_system_prompt, format_context, NO_CONTEXT_NOTICE

__all__ = [
    "BaseGenerator",
    "GeminiGenerator",
    "build_system_prompt",
    "format_context",
    "NO_CONTEXT_NOTICE",
]
