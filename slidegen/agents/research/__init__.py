from slidegen.agents.research.research_agent import ResearchAgent

__all__ = ["ResearchAgent"]
