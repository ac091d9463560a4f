"""
Content analysis for layout and asset decisions.

Extracts cheap textual features (word count, lists, quotes, code, numbers,
complexity, tone) from a slide's markdown and suggests visual assets from a
keyword table.
"""

import re
from typing import List

from slidegen.models.design import AssetSuggestion, Complexity, ContentAnalysis
from slidegen.models.outline import Tone
from slidegen.models.slide import AssetType


LIST_PATTERNS = [
    re.compile(r"^[-*+]\s+", re.M),
    re.compile(r"^\d+\.\s+", re.M),
    re.compile(r"^[a-z]\)\s+", re.M | re.I),
    re.compile(r"<ul>|<ol>|<li>", re.I),
]

QUOTE_PATTERN = re.compile(r"[\"'“”].*[\"'“”]|^>\s+", re.M)

CODE_PATTERNS = [
    re.compile(r"```[\s\S]*```"),
    re.compile(r"`[^`]+`"),
    re.compile(r"<code>|<pre>", re.I),
    re.compile(r"function|class|const|let|var|import|export", re.I),
]

NUMBER_PATTERN = re.compile(r"\b\d+(?:[.,]\d+)?%?\b")

LIST_ITEM_PATTERN = re.compile(r"^(?:[-*+]|\d+\.)\s+(.+)$", re.M)

FORMAL_INDICATORS = ["furthermore", "therefore", "consequently", "hereby", "wherein"]
CASUAL_INDICATORS = ["you", "we", "let's", "easy", "simple", "great"]
TECHNICAL_INDICATORS = ["algorithm", "function", "data", "system", "process", "implementation"]

KEY_PHRASES = ["important", "key", "critical", "essential", "must", "should"]

ASSET_MAPPINGS = [
    {
        "keywords": ["team", "people", "collaboration", "group"],
        "type": AssetType.IMAGE,
        "description": "Team collaboration or group of people",
        "search_query": "professional team collaboration",
        "relevance": 0.9,
    },
    {
        "keywords": ["technology", "computer", "software", "digital"],
        "type": AssetType.IMAGE,
        "description": "Technology or digital concept",
        "search_query": "modern technology workspace",
        "relevance": 0.85,
    },
    {
        "keywords": ["growth", "increase", "success", "achievement"],
        "type": AssetType.ICON,
        "description": "Growth or upward trend icon",
        "search_query": "growth chart icon",
        "relevance": 0.8,
    },
    {
        "keywords": ["data", "analytics", "metrics", "statistics"],
        "type": AssetType.CHART,
        "description": "Data visualization or chart",
        "search_query": "data analytics dashboard",
        "relevance": 0.9,
    },
    {
        "keywords": ["security", "protection", "safety", "privacy"],
        "type": AssetType.ICON,
        "description": "Security or protection icon",
        "search_query": "security shield icon",
        "relevance": 0.85,
    },
    {
        "keywords": ["innovation", "idea", "creative", "design"],
        "type": AssetType.IMAGE,
        "description": "Creative or innovative concept",
        "search_query": "innovation lightbulb creative",
        "relevance": 0.8,
    },
    {
        "keywords": ["business", "corporate", "professional", "office"],
        "type": AssetType.IMAGE,
        "description": "Business or professional setting",
        "search_query": "modern business office",
        "relevance": 0.75,
    },
]


class ContentAnalyzer:
    """Stateless; one instance can be shared across requests."""

    def analyze(self, content: str) -> ContentAnalysis:
        word_count = self.count_words(content)
        key_points = self.extract_key_points(content)
        return ContentAnalysis(
            word_count=word_count,
            sentence_count=self.count_sentences(content),
            has_lists=self.detect_lists(content),
            has_quotes=self.detect_quotes(content),
            has_code=self.detect_code(content),
            has_numbers=self.detect_numbers(content),
            complexity=self.determine_complexity(content, word_count),
            tone=self.detect_tone(content),
            key_points=key_points,
            suggested_assets=self.suggest_assets(content),
        )

    @staticmethod
    def count_words(content: str) -> int:
        return len(content.split())

    @staticmethod
    def count_sentences(content: str) -> int:
        sentences = re.findall(r"[.!?]+", content)
        return len(sentences) if sentences else 1

    @staticmethod
    def detect_lists(content: str) -> bool:
        return any(pattern.search(content) for pattern in LIST_PATTERNS)

    @staticmethod
    def detect_quotes(content: str) -> bool:
        return bool(QUOTE_PATTERN.search(content)) or "said" in content or "stated" in content

    @staticmethod
    def detect_code(content: str) -> bool:
        return any(pattern.search(content) for pattern in CODE_PATTERNS)

    @staticmethod
    def detect_numbers(content: str) -> bool:
        return len(NUMBER_PATTERN.findall(content)) >= 3

    @staticmethod
    def determine_complexity(content: str, word_count: int) -> Complexity:
        words = content.split()
        if not words:
            return Complexity.SIMPLE

        avg_word_length = sum(len(word) for word in words) / len(words)
        # Long words stand in for polysyllabic ones
        complex_word_ratio = len([word for word in words if len(word) > 8]) / len(words)

        if word_count < 50 and avg_word_length < 6 and complex_word_ratio < 0.1:
            return Complexity.SIMPLE
        if word_count > 150 or avg_word_length > 7 or complex_word_ratio > 0.3:
            return Complexity.COMPLEX
        return Complexity.MEDIUM

    @staticmethod
    def detect_tone(content: str) -> Tone:
        lower = content.lower()
        formal = sum(1 for word in FORMAL_INDICATORS if word in lower)
        casual = sum(1 for word in CASUAL_INDICATORS if word in lower)
        technical = sum(1 for word in TECHNICAL_INDICATORS if word in lower)

        if technical > formal and technical > casual:
            return Tone.TECHNICAL
        if casual > formal:
            return Tone.CASUAL
        return Tone.FORMAL

    @staticmethod
    def extract_key_points(content: str) -> List[str]:
        points = [item.strip() for item in LIST_ITEM_PATTERN.findall(content)]

        sentences = [s for s in re.split(r"[.!?]+", content) if s.strip()]
        for sentence in sentences:
            if any(phrase in sentence.lower() for phrase in KEY_PHRASES):
                points.append(sentence.strip())

        if not points and sentences:
            points.extend(s.strip() for s in sentences[:3])

        return points[:5]

    @staticmethod
    def suggest_assets(content: str) -> List[AssetSuggestion]:
        lower = content.lower()
        suggestions = []

        for mapping in ASSET_MAPPINGS:
            match_count = sum(1 for keyword in mapping["keywords"] if keyword in lower)
            if match_count > 0:
                suggestions.append(AssetSuggestion(
                    type=mapping["type"],
                    description=mapping["description"],
                    relevance=mapping["relevance"] * (match_count / len(mapping["keywords"])),
                    search_query=mapping["search_query"],
                ))

        suggestions.sort(key=lambda s: s.relevance, reverse=True)
        return suggestions[:3]

    def should_use_images(self, analysis: ContentAnalysis) -> bool:
        has_image_suggestions = any(a.type == AssetType.IMAGE for a in analysis.suggested_assets)
        is_descriptive = analysis.word_count > 50 and analysis.complexity != Complexity.COMPLEX
        return has_image_suggestions or is_descriptive

    def should_use_icons(self, analysis: ContentAnalysis) -> bool:
        has_icon_suggestions = any(a.type == AssetType.ICON for a in analysis.suggested_assets)
        is_complex = analysis.complexity == Complexity.COMPLEX or analysis.tone == Tone.TECHNICAL
        return has_icon_suggestions or analysis.has_lists or is_complex

    def get_recommended_visual_count(self, analysis: ContentAnalysis) -> int:
        if analysis.word_count < 30:
            return 1
        if analysis.word_count < 100:
            return 2
        if analysis.has_lists and len(analysis.key_points) > 3:
            return 3
        return 2
