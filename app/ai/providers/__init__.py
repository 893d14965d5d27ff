"""Provider implementations."""

from app.ai.providers.openai_chat import OpenAIChatModel

__all__ = ["OpenAIChatModel"]
