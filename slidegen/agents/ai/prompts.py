"""
Prompt builders for every model call the pipeline makes.

Prompts describe the JSON shape in prose as well as relying on the
response schema so that the json structured mode gets the same guidance.
"""

from typing import List, Optional

from slidegen.models.research import TopicResearch

# Sampling temperatures per call kind
RESEARCH_TEMPERATURE = 0.7
ENHANCE_TEMPERATURE = 0.6
OUTLINE_TEMPERATURE = 0.7
SLIDE_CONTENT_TEMPERATURE = 0.8
IMAGE_QUERY_TEMPERATURE = 0.6


def build_research_prompt(topic: str, depth: str = "quick") -> str:
    base_prompt = f'You are a professional researcher. Research the topic: "{topic}"'

    if depth == "quick":
        return f"""{base_prompt}

Provide:
- A concise summary (2-3 sentences)
- 5-7 key points that would be valuable in a presentation
- 2-3 related topics worth exploring
- Confidence score (0-1) on the completeness of information

Return JSON:
{{
  "topic": "{topic}",
  "summary": "Summary text",
  "keyPoints": ["Point 1", "Point 2", ...],
  "sources": ["Conceptual source 1", "Source 2"],
  "relatedTopics": ["Topic 1", "Topic 2"],
  "confidence": 0.85
}}"""

    return f"""{base_prompt}

Provide comprehensive research including:
- Detailed summary (4-6 sentences)
- 10-15 key points organized by category
- Historical context and current trends
- 5+ related topics and subtopics
- Expert perspectives
- Confidence score (0-1)

Return JSON:
{{
  "topic": "{topic}",
  "summary": "Detailed summary",
  "keyPoints": ["Point 1", "Point 2", ...],
  "sources": ["Source 1", "Source 2", ...],
  "relatedTopics": ["Topic 1", "Topic 2", ...],
  "confidence": 0.9,
  "additionalContext": {{
    "trends": ["Trend 1", "Trend 2"],
    "challenges": ["Challenge 1", "Challenge 2"],
    "opportunities": ["Opportunity 1", "Opportunity 2"]
  }}
}}"""


def build_enhance_research_prompt(research: TopicResearch, focus_area: Optional[str] = None) -> str:
    focus = f" focusing on: {focus_area}" if focus_area else ""
    return f"""Enhance this research with more depth{focus}

Initial Research:
Topic: {research.topic}
Summary: {research.summary}
Key Points: {', '.join(research.key_points)}

Provide:
- Deeper insights
- More specific examples
- Additional key points
- Updated confidence score

Return enhanced research as JSON in the same format."""


def build_outline_prompt(
    topic: str,
    target_slide_count: Optional[int] = None,
    research: Optional[TopicResearch] = None,
    audience: Optional[str] = None
) -> str:
    target = (
        f"Target {target_slide_count} slides."
        if target_slide_count
        else "Suggest optimal number of slides (5-10)."
    )

    context = ""
    if research is not None and (research.summary or research.key_points):
        key_points = "\n".join(f"- {p}" for p in research.key_points)
        context = f"\n\nResearch summary: {research.summary}\nKey findings:\n{key_points}"
    if audience:
        context += f"\n\nAudience: {audience}"

    return f"""Create a professional presentation outline for: "{topic}"

{target}{context}

Return a JSON object with this structure:
{{
  "title": "Presentation title",
  "sections": [
    {{
      "title": "Section title",
      "points": ["Key point 1", "Key point 2"],
      "slideCount": 2,
      "hasVisuals": true
    }}
  ],
  "totalSlides": 8,
  "estimatedDuration": 15,
  "tone": "formal|casual|technical"
}}"""


def build_slide_content_prompt(topic: str, section_title: str, points: List[str]) -> str:
    return f"""Create engaging slide content for a presentation about "{topic}".

Section: {section_title}
Key points to cover: {', '.join(points)}

Guidelines:
- Keep text concise and impactful (max 50 words)
- Use clear, active language
- Format with markdown for emphasis
- Suggest 1-2 visual elements that would enhance the content

Return JSON:
{{
  "title": "Slide title",
  "content": "Main slide content with markdown formatting",
  "notes": "Presenter notes",
  "visualSuggestions": ["Description of visual 1", "Description of visual 2"]
}}"""


def build_image_queries_prompt(slide_content: str, count: int = 3) -> str:
    return f"""Analyze this slide content and generate {count} professional image search queries.

Slide content:
{slide_content}

Create specific, detailed search queries that would find high-quality, professional images.
Consider: style (photographic/illustration), mood, composition, and relevance.

Return JSON array:
[
  {{
    "query": "Specific search query",
    "description": "What this image should show",
    "style": "photographic|illustration|abstract",
    "priority": "high|medium|low"
  }}
]"""
