"""
Semantic boundary table for ATC procedures documents.

Ordered (pattern, topic, priority) rows. When several rows match one line the
highest priority wins and, among equal priorities, the row declared first.
New procedure families are added here without touching the chunker.

Dependencies: re (stdlib)
System role: Chunker configuration data
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class SemanticBoundary:
    """A heading pattern that opens a new topical section."""

    pattern: re.Pattern[str]
    topic: str
    priority: int

    def matches(self, line: str) -> bool:
        return self.pattern.search(line) is not None


SEMANTIC_BOUNDARIES: tuple[SemanticBoundary, ...] = (
    SemanticBoundary(
        re.compile(r"^([A-Z\s]+APPLICATION|WAKE\s*TURBULENCE\s*APPLICATION|SEPARATION\s*APPLICATION)"),
        "procedure_application",
        10,
    ),
    SemanticBoundary(re.compile(r"WAKE\s*TURBULENCE", re.IGNORECASE), "wake_turbulence", 15),
    SemanticBoundary(re.compile(r"SEPARATION\s*MINIMA|MINIMA", re.IGNORECASE), "separation_minima", 12),
    SemanticBoundary(re.compile(r"APPROACH\s*(PROCEDURES?|SEPARATION)", re.IGNORECASE), "approach_procedures", 11),
    SemanticBoundary(re.compile(r"DEPARTURE\s*(PROCEDURES?|SEPARATION)", re.IGNORECASE), "departure_procedures", 11),
    SemanticBoundary(re.compile(r"RADAR\s*SEPARATION", re.IGNORECASE), "radar_separation", 10),
    SemanticBoundary(re.compile(r"EMERGENCY\s*(PROCEDURES?|AIRCRAFT)", re.IGNORECASE), "emergency_procedures", 13),
    SemanticBoundary(re.compile(r"WEATHER\s*MINIMA", re.IGNORECASE), "weather_minimums", 11),
    SemanticBoundary(re.compile(r"RUNWAY\s*INCURSION", re.IGNORECASE), "runway_incursion", 12),
)

GENERAL_TOPIC = "general"

TOPIC_TITLES: dict[str, str] = {
    "wake_turbulence": "Wake Turbulence Procedures",
    "separation_minima": "Separation Minima",
    "approach_procedures": "Approach Procedures",
    "departure_procedures": "Departure Procedures",
    "radar_separation": "Radar Separation",
    "emergency_procedures": "Emergency Procedures",
    "weather_minimums": "Weather Minimums",
    "runway_incursion": "Runway Incursion Procedures",
    "procedure_application": "Procedure Application",
}
DEFAULT_TITLE = "Air Traffic Control Procedures"

PROCEDURE_TYPES: dict[str, str] = {
    "wake_turbulence": "separation",
    "separation_minima": "separation",
    "approach_procedures": "approach",
    "departure_procedures": "departure",
    "radar_separation": "separation",
    "emergency_procedures": "emergency",
    "weather_minimums": "weather",
    "runway_incursion": "safety",
    "procedure_application": "general",
}

TOPIC_KEYWORDS: dict[str, tuple[str, ...]] = {
    "wake_turbulence": ("wake turbulence", "separation", "heavy", "super", "large", "small", "B757"),
    "separation_minima": ("separation", "minima", "miles", "distance", "radar"),
    "approach_procedures": ("approach", "final", "runway", "landing"),
    "departure_procedures": ("departure", "takeoff", "initial", "climb"),
    "radar_separation": ("radar", "separation", "target", "miles"),
    "emergency_procedures": ("emergency", "alert", "priority", "assistance"),
    "weather_minimums": ("weather", "minimums", "visibility", "ceiling"),
    "runway_incursion": ("runway", "incursion", "safety", "alert"),
    "procedure_application": ("application", "procedure", "requirements"),
}

SEMANTIC_FOCUS: dict[str, str] = {
    "wake_turbulence": "Wake turbulence separation requirements and procedures",
    "separation_minima": "Aircraft separation minimum distances and requirements",
    "approach_procedures": "Aircraft approach and landing procedures",
    "departure_procedures": "Aircraft departure and takeoff procedures",
    "radar_separation": "Radar-based aircraft separation procedures",
    "emergency_procedures": "Emergency aircraft handling procedures",
    "weather_minimums": "Weather minimum requirements for operations",
    "runway_incursion": "Runway safety and incursion prevention procedures",
    "procedure_application": "General procedure application and requirements",
}
DEFAULT_FOCUS = "Air traffic control procedures and requirements"
DEFAULT_DOCUMENT_FOCUS = "General ATC procedures"

# Too generic to describe a section
GENERIC_TERMS = frozenset({"application", "procedure", "aircraft", "control"})


def match_boundary(
    line: str,
    boundaries: tuple[SemanticBoundary, ...] = SEMANTIC_BOUNDARIES,
) -> SemanticBoundary | None:
    """
    Select the boundary a line opens, if any.

    Args:
        line: Stripped, non-blank line
        boundaries: Ordered boundary table

    Returns:
        SemanticBoundary | None: Highest-priority match, first declared on ties
    """
    best: SemanticBoundary | None = None
    for boundary in boundaries:
        if boundary.matches(line) and (best is None or boundary.priority > best.priority):
            best = boundary
    return best
