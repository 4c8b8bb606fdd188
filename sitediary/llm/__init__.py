from sitediary.llm.client import GeminiTextProvider, TextProvider

__all__ = ["GeminiTextProvider", "TextProvider"]
