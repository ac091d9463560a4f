from slidegen.agents.content.content_agent import ContentAgent

__all__ = ["ContentAgent"]
