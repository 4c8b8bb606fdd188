from sitediary.ai.gateway import AIGateway

__all__ = ["AIGateway"]
