from slidegen.agents.ai.gateway import ModelGateway

__all__ = ["ModelGateway"]
