"""SiteDiary AI service: diary selection, AI summaries and text enhancement."""

__version__ = "1.0.0"
