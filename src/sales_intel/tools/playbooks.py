"""``discover_playbooks``: browse playbooks and report which play types are missing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from sales_intel.protocols.registry import ToolSpec
from sales_intel.tools.base import filter_summary, plural
from sales_intel.tools.demo_data import DEMO_PLAYBOOKS, Playbook, search_playbooks

if TYPE_CHECKING:
    from sales_intel.http.client import ResilientHttpClient

# Every play type a complete playbook library covers, in report order.
ALL_PLAY_TYPES: dict[str, tuple[str, str]] = {
    "DISCOVERY": ("Discovery", "Questions and frameworks for understanding client needs"),
    "DEMO": ("Demo", "Technical demonstrations and proof-of-concept content"),
    "VALUE_PROPOSITION": ("Value Proposition", "ROI calculators and business value content"),
    "COMPETITIVE_POSITIONING": ("Competitive Positioning", "Battle cards and differentiation content"),
    "TECHNICAL_DEEP_DIVE": ("Technical Deep Dive", "In-depth technical content for expert audiences"),
    "OBJECTION_HANDLING": ("Objection Handling", "Responses to common objections and concerns"),
    "CONTENT_DELIVERY": ("Content Delivery", "Educational and thought leadership content"),
    "PROCESS": ("Process/Workflow", "Implementation workflows and process guidance"),
}

MIN_HEALTHY_PLAYS = 6

INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "solution": {
            "type": "string",
            "description": "Filter by solution (e.g., Account Verification, Fraud Prevention, Payment Processing)",
        },
        "segment": {"type": "string", "description": "Filter by market segment (Enterprise, Mid-Market, SMB)"},
        "vertical": {"type": "string", "description": "Filter by vertical market (e.g., Banking, Fintech, Insurance)"},
        "industry": {"type": "string", "description": "Filter by industry focus"},
        "showGaps": {
            "type": "boolean",
            "description": "Include gap analysis showing missing play types",
            "default": True,
        },
    },
}


class DiscoverPlaybooksInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    solution: str | None = None
    segment: str | None = None
    vertical: str | None = None
    industry: str | None = None
    show_gaps: bool = Field(default=True, alias="showGaps")

    @property
    def has_filter(self) -> bool:
        return any((self.solution, self.segment, self.vertical, self.industry))

    def filters(self) -> str:
        return filter_summary(
            [
                ("solution", self.solution),
                ("segment", self.segment),
                ("vertical", self.vertical),
                ("industry", self.industry),
            ]
        )


async def handle(args: DiscoverPlaybooksInput, client: ResilientHttpClient | None) -> str:
    if not args.has_filter:
        return render_missing_filters()
    playbooks = search_playbooks(solution=args.solution, segment=args.segment)
    if not playbooks:
        return render_not_found(args)
    return render(playbooks, args)


def play_type_name(play_type: str) -> str:
    return ALL_PLAY_TYPES[play_type][0] if play_type in ALL_PLAY_TYPES else play_type


def covered_play_types(playbooks: list[Playbook]) -> set[str]:
    return {play_type for playbook in playbooks for play_type in playbook.play_types}


def missing_play_types(play_types: set[str] | list[str]) -> list[str]:
    return [play_type for play_type in ALL_PLAY_TYPES if play_type not in play_types]


def coverage_percent(playbooks: list[Playbook]) -> int:
    """Share of known play types covered by *playbooks*, as a rounded percentage.

    Types outside :data:`ALL_PLAY_TYPES` do not count towards coverage.
    """
    covered = covered_play_types(playbooks) & ALL_PLAY_TYPES.keys()
    return round(len(covered) / len(ALL_PLAY_TYPES) * 100)


def render(playbooks: list[Playbook], args: DiscoverPlaybooksInput) -> str:
    summary = f"Found {plural(len(playbooks), 'playbook')} matching your criteria"
    filters = args.filters()
    if filters:
        summary += f" ({filters})"

    lines = ["# Playbook Discovery", "", "## Summary", summary + ".", "", "## Available Playbooks", ""]
    for index, playbook in enumerate(playbooks, start=1):
        lines += [f"### {index}. {playbook.name}", f"- **Solution**: {playbook.solution.name}"]
        if playbook.segment:
            lines.append(f"- **Segment**: {playbook.segment.name}")
        lines += [
            f"- **Play Count**: {playbook.play_count} plays",
            f"- **Play Types**: {', '.join(playbook.play_types)}",
            f"- **Description**: {playbook.description}",
            "",
        ]

    if args.show_gaps:
        lines += render_gap_analysis(playbooks)

    lines += ["## Recommendations", "", "**Content Strategy:**"]
    lines += [f"- {tip}" for tip in recommendations(playbooks)]
    return "\n".join(lines) + "\n"


def render_gap_analysis(playbooks: list[Playbook]) -> list[str]:
    covered = covered_play_types(playbooks) & ALL_PLAY_TYPES.keys()
    missing = missing_play_types(covered)
    lines = [
        "## Gap Analysis",
        "",
        f"### Coverage Score: {coverage_percent(playbooks)}%",
        f"You have {len(covered)} out of {len(ALL_PLAY_TYPES)} possible play types.",
        "",
    ]
    if missing:
        lines.append("### Missing Play Types")
        lines += [f"- **{play_type_name(t)}**: {ALL_PLAY_TYPES[t][1]}" for t in missing]
    else:
        lines += [
            "### Complete Coverage",
            "Excellent! You have comprehensive play type coverage across all categories.",
        ]
    lines += ["", "### Playbook-Specific Analysis"]
    for playbook in playbooks:
        gaps = missing_play_types(playbook.play_types)
        if not gaps:
            continue
        line = f"- **{playbook.name}**: Missing {', '.join(play_type_name(t) for t in gaps[:3])}"
        if len(gaps) > 3:
            line += f" and {len(gaps) - 3} more"
        lines.append(line)
    lines.append("")
    return lines


def recommendations(playbooks: list[Playbook]) -> list[str]:
    tips: list[str] = []
    average = round(sum(p.play_count for p in playbooks) / len(playbooks))
    if average < MIN_HEALTHY_PLAYS:
        tips.append(f"Consider expanding playbooks (average: {average} plays per playbook)")
    covered = covered_play_types(playbooks)
    if "COMPETITIVE_POSITIONING" not in covered:
        tips.append("Add competitive positioning plays to strengthen market differentiation")
    if "PROCESS" not in covered:
        tips.append("Consider adding process/workflow plays for implementation guidance")
    if "VALUE_PROPOSITION" not in covered:
        tips.append("Include value proposition plays for ROI conversations")
    tips += [
        "Review playbook usage metrics to identify most effective content",
        "Regular updates ensure content stays current with market changes",
    ]
    return tips


def render_not_found(args: DiscoverPlaybooksInput) -> str:
    message = "No playbooks found matching your criteria"
    filters = args.filters()
    if filters:
        message += f" ({filters})"

    lines = ["# No Playbooks Found", "", message + ".", "", "## Available Options", "", "**Solutions:**"]
    lines += [f"- {name}" for name in dict.fromkeys(p.solution.name for p in DEMO_PLAYBOOKS)]
    segments = list(dict.fromkeys(p.segment.name for p in DEMO_PLAYBOOKS if p.segment))
    if segments:
        lines += ["", "**Segments:**"]
        lines += [f"- {name}" for name in segments]
    lines += [
        "",
        "## Suggestions",
        "",
        "- Try broader search criteria",
        "- Remove some filters to see more options",
        "- Consider creating new playbooks for underserved areas",
    ]
    return "\n".join(lines) + "\n"


def render_missing_filters() -> str:
    return (
        "# Missing Search Criteria\n\n"
        "Please provide at least one filter to discover playbooks:\n\n"
        "- **solution**: Filter by solution name\n"
        "- **segment**: Filter by market segment\n"
        "- **vertical**: Filter by vertical market\n"
        "- **industry**: Filter by industry focus\n\n"
        "## Example Usage\n\n"
        "```json\n"
        '{\n  "solution": "Account Verification",\n  "segment": "Enterprise",\n  "showGaps": true\n}\n'
        "```\n"
    )


TOOL = ToolSpec(
    name="discover_playbooks",
    description=(
        "Discover available playbooks and analyze content gaps. "
        "Filter by solution, segment, vertical, or industry to find relevant playbooks."
    ),
    input_schema=INPUT_SCHEMA,
    input_model=DiscoverPlaybooksInput,
    handler=handle,
)
