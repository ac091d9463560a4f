from slidegen.agents.design.content_analyzer import ContentAnalyzer
from slidegen.agents.design.design_agent import DesignAgent
from slidegen.agents.design.layout_engine import LayoutEngine

__all__ = ["ContentAnalyzer", "DesignAgent", "LayoutEngine"]
