from slidegen.agents.generation.generator_agent import GeneratorAgent
from slidegen.agents.generation.html_renderer import HTMLRenderer, RenderOptions
from slidegen.agents.generation.orchestrator import SlideGenerator, create_slide_generator

__all__ = ["GeneratorAgent", "HTMLRenderer", "RenderOptions", "SlideGenerator", "create_slide_generator"]
