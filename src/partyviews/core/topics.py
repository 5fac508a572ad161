"""UK political topic taxonomy and message relevance signals."""

import re
from typing import Dict, List, Optional, Tuple

from .constants import ContributorConstants


# Topic taxonomy used for keyword inference and relevance matching
TOPIC_KEYWORDS: Dict[str, List[str]] = {
    "immigration": ["immigration", "migrants", "asylum", "refugees", "borders", "visa", "migration", "illegal immigration"],
    "housing": ["housing", "homes", "homeless", "rent", "mortgage", "property", "affordable housing", "homelessness", "rental", "buying homes"],
    "nhs": ["nhs", "health", "healthcare", "hospitals", "doctors", "nurses", "medical", "health service", "waiting lists"],
    "economy": ["economy", "economic", "recession", "inflation", "growth", "gdp", "budget", "cost of living", "jobs", "unemployment"],
    "education": ["education", "schools", "universities", "students", "teachers", "tuition", "school funding", "exams"],
    "environment": ["environment", "climate", "green", "carbon", "renewable", "pollution", "climate change", "net zero", "emissions"],
    "taxation": ["tax", "taxes", "taxation", "income tax", "corporation tax", "vat", "tax cuts", "tax rises"],
    "crime": ["crime", "police", "justice", "prisons", "criminal", "safety", "policing", "sentencing", "law and order"],
    "foreign_policy": ["foreign policy", "international", "diplomacy", "trade deals", "alliances", "gaza", "ukraine", "russia", "china"],
    "brexit": ["brexit", "eu", "europe", "single market", "customs union", "european union", "leaving eu"],
    "welfare": ["welfare", "benefits", "universal credit", "social security", "poverty", "benefits system", "social care"],
    "defense": ["defense", "military", "armed forces", "nato", "security", "defence", "army", "navy", "air force"],
    "transport": ["transport", "trains", "buses", "roads", "rail", "public transport", "infrastructure", "hs2"],
    "energy": ["energy", "electricity", "gas", "power", "energy bills", "renewable energy", "nuclear"],
    "politics": ["politics", "government", "parliament", "mp", "minister", "election", "voting", "democracy"],
}

POLITICAL_KEYWORDS: Tuple[str, ...] = tuple(
    dict.fromkeys(keyword for keywords in TOPIC_KEYWORDS.values() for keyword in keywords)
)

_TOPIC_TAG_RE = re.compile(r"\[\[topic:\s*([^;\]]+)(?:;\s*confidence:\s*([0-9.]+))?\]\]\s*$", re.IGNORECASE)


def parse_topic_tag(content: str) -> Tuple[str, float, str]:
    """
    Split a trailing ``[[topic: x; confidence: y]]`` tag off an assistant reply.

    Returns (topic, confidence, clean_content). Without a tag the topic is ""
    and confidence 0.
    """
    match = _TOPIC_TAG_RE.search(content or "")
    if not match:
        return "", 0.0, content or ""
    topic = match.group(1).strip().lower()
    try:
        confidence = float(match.group(2)) if match.group(2) else 0.8
    except ValueError:
        confidence = 0.8
    return topic, confidence, content[:match.start()].strip()


def infer_topic(message: str) -> Tuple[str, float]:
    """Keyword fallback for messages the classifier did not tag."""
    lowered = (message or "").lower()
    for topic, keywords in TOPIC_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return topic, 0.7
    return ContributorConstants.GENERAL_TOPIC, 0.3


def effective_topic(topic: Optional[str]) -> Optional[str]:
    """Normalized topic tag, or None for an empty or ``general`` tag."""
    if not isinstance(topic, str):
        return None
    topic = topic.strip().lower()
    if not topic or topic == ContributorConstants.GENERAL_TOPIC:
        return None
    return topic


def mentions_political_keyword(content: str) -> bool:
    """Case-insensitive substring match against the political vocabulary."""
    lowered = (content or "").lower()
    return any(keyword in lowered for keyword in POLITICAL_KEYWORDS)


def is_politically_relevant(content: str, topic: Optional[str] = None) -> bool:
    return effective_topic(topic) is not None or mentions_political_keyword(content)
