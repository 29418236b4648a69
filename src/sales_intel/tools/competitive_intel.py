"""``get_competitive_intel``: talking points for competing against a named rival."""

from __future__ import annotations

import difflib
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from sales_intel.protocols.registry import ToolSpec
from sales_intel.tools.demo_data import DEMO_COMPETITORS, Competitor, find_competitor

if TYPE_CHECKING:
    from sales_intel.http.client import ResilientHttpClient

SUGGESTION_CUTOFF = 0.6
MAX_SUGGESTIONS = 3

INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "competitor": {
            "type": "string",
            "description": "Name of competitor (supports abbreviations like 'EWS' for Early Warning System)",
        },
        "solution": {
            "type": "string",
            "description": (
                "Filter by solution context (e.g., Account Verification, Fraud Prevention, Payment Processing)"
            ),
        },
        "includeExamples": {
            "type": "boolean",
            "description": "Include example talking points and use cases",
            "default": True,
        },
    },
    "required": ["competitor"],
}

# Ordered: the first keyword found in a talking point wins.
ADVICE: tuple[tuple[str, str], ...] = (
    (
        "real-time",
        "**Use Case**: Emphasize scenarios where real-time detection prevents fraud that batch "
        "processing would miss. Mention time-sensitive transactions.",
    ),
    (
        "api",
        "**Technical Benefit**: Highlight developer experience, faster integration, better "
        "documentation, and more flexible webhooks.",
    ),
    (
        "false positive",
        "**Customer Impact**: Quantify the cost of false positives: blocked legitimate customers, "
        "support tickets, revenue loss.",
    ),
    (
        "machine learning",
        "**Innovation**: Discuss our adaptive models, continuous learning, and ability to detect "
        "new fraud patterns faster.",
    ),
    (
        "integration",
        "**Implementation**: Compare implementation timelines, complexity, and ongoing maintenance "
        "requirements.",
    ),
)
DEFAULT_ADVICE = (
    "**Positioning**: Use this point to differentiate our solution and create value in the client's context."
)


class CompetitiveIntelInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    competitor: str = Field(min_length=1)
    solution: str | None = None
    include_examples: bool = Field(default=True, alias="includeExamples")


async def handle(args: CompetitiveIntelInput, client: ResilientHttpClient | None) -> str:
    competitor = find_competitor(args.competitor)
    if competitor is None:
        return render_not_found(args.competitor)
    return render(competitor, args)


def suggest_competitors(name: str, available: list[str] | None = None) -> list[str]:
    """Closest known competitor names, best first, by case-insensitive similarity."""
    candidates = list(DEMO_COMPETITORS) if available is None else available
    by_lower = {candidate.lower(): candidate for candidate in candidates}
    matches = difflib.get_close_matches(name.lower(), list(by_lower), n=MAX_SUGGESTIONS, cutoff=SUGGESTION_CUTOFF)
    return [by_lower[match] for match in matches]


def advice_for(talking_point: str) -> str:
    lowered = talking_point.lower()
    for keyword, advice in ADVICE:
        if keyword in lowered:
            return advice
    return DEFAULT_ADVICE


def render(competitor: Competitor, args: CompetitiveIntelInput) -> str:
    points = competitor.talking_points
    summary = f"Found {len(points)} talking points for competing against {competitor.name}"
    if args.solution:
        summary += f" in the context of {args.solution}"

    lines = [f"# Competitive Intelligence: {competitor.name}", "", "## Summary", summary + ".", ""]
    lines += ["## Key Competitive Advantages", ""]
    for index, point in enumerate(points, start=1):
        lines.append(f"### {index}. {point}")
        if args.include_examples:
            lines.append(advice_for(point))
        lines.append("")

    lines += [
        "## Battle Card Tips",
        "",
        f"**When competing against {competitor.name}:**",
        "- Focus on differentiation points mentioned above",
        "- Ask discovery questions that highlight their weaknesses",
        "- Prepare demos that showcase our advantages",
        "- Have customer references ready for head-to-head comparisons",
        "",
        "## Discovery Questions",
        "",
        f"Use these questions to uncover pain points with {competitor.name}:",
        '- "What challenges are you experiencing with your current solution?"',
        '- "How satisfied are you with the implementation timeline?"',
        '- "Are there any performance or accuracy issues you\'d like to improve?"',
        '- "What would an ideal solution look like for your team?"',
        "",
    ]

    if competitor.sources:
        lines += ["## Related Content", "", "**Sources for this competitive intelligence:**"]
        for source in competitor.sources:
            label = "Play" if source.type == "play" else "Content"
            lines.append(f"- {label}: {source.name}")
        lines += ["", "*Review these materials for more detailed competitive positioning.*"]
    return "\n".join(lines) + "\n"


def render_not_found(name: str) -> str:
    lines = ["# No Competitive Intelligence Found", "", f'No competitive intelligence found for "{name}".', ""]
    suggestions = suggest_competitors(name)
    if suggestions:
        lines += ["## Did you mean?", ""]
        lines += [f"- {suggestion}" for suggestion in suggestions]
        lines.append("")

    lines += ["## Available Competitors", ""]
    lines += [f"- **{known}**" for known in DEMO_COMPETITORS]
    lines += [
        "",
        "## What to do?",
        "",
        "**If this is a new competitor:**",
        "- Research their key features and positioning",
        "- Identify their strengths and weaknesses",
        "- Develop talking points based on our advantages",
        "- Create battle cards for future reference",
        "",
        "**For immediate help:**",
        "- Use general competitive positioning plays",
        "- Focus on our core value propositions",
        "- Gather intelligence during discovery calls",
    ]
    return "\n".join(lines) + "\n"


TOOL = ToolSpec(
    name="get_competitive_intel",
    description=(
        "Get competitive intelligence and talking points for competing against specific competitors. "
        "Supports common competitor names and abbreviations."
    ),
    input_schema=INPUT_SCHEMA,
    input_model=CompetitiveIntelInput,
    handler=handle,
)
