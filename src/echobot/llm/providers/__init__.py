from .openai import OpenAICompatibleClient

__all__ = ["OpenAICompatibleClient"]
