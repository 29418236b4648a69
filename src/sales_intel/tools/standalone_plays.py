"""``discover_standalone_plays``: browse reusable plays that live outside any playbook.

This tool only has live data. Without an API client it explains what the
feature is; when the API call fails the call fails.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from sales_intel.protocols.errors import ToolExecutionError
from sales_intel.protocols.registry import ToolSpec
from sales_intel.tools.base import Failed, fetch_outcome, plural, unwrap_text_payload
from sales_intel.tools.demo_data import Named

if TYPE_CHECKING:
    from sales_intel.http.client import ResilientHttpClient

TOOL_NAME = "discover_standalone_plays"
ENDPOINT = "/standalone-plays"

PLAY_TYPES: dict[str, str] = {
    "discovery": "Discovery",
    "demo": "Demo",
    "technical": "Technical",
    "business": "Business",
    "closing": "Closing",
}
STATUS_LABELS: dict[str, str] = {"active": "Active", "inactive": "Inactive", "draft": "Draft"}
TOP_SOLUTIONS = 5
ORGANIZE_THRESHOLD = 10

INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "solution": {
            "type": "string",
            "description": "Filter by associated solution name (e.g., Account Verification, Fraud Prevention)",
        },
        "playType": {
            "type": "string",
            "description": "Filter by play type (discovery, demo, technical, business, closing)",
        },
        "status": {"type": "string", "description": "Filter by status (active, inactive, draft)"},
        "createdBy": {"type": "string", "description": "Filter by creator name or email"},
        "search": {"type": "string", "description": "Search term to match against play names and descriptions"},
        "includeDetails": {
            "type": "boolean",
            "description": "Include detailed information about each play",
            "default": True,
        },
        "limit": {
            "type": "number",
            "description": "Maximum number of plays to return",
            "default": 20,
            "minimum": 1,
            "maximum": 100,
        },
    },
}


class StandalonePlaysInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    solution: str | None = None
    play_type: str | None = Field(default=None, alias="playType")
    status: str | None = None
    created_by: str | None = Field(default=None, alias="createdBy")
    search: str | None = None
    include_details: bool = Field(default=True, alias="includeDetails")
    limit: int = Field(default=20, ge=1, le=100)

    def request_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"limit": self.limit, "sortBy": "lastModifiedAt", "sortOrder": "desc"}
        optional = {
            "search": self.search,
            "genericPlayType": self.play_type,
            "status": self.status,
            "solution": self.solution,
            "createdBy": self.created_by,
        }
        body.update({key: value for key, value in optional.items() if value})
        return body


class Creator(BaseModel):
    name: str | None = None
    email: str | None = None


class StandalonePlay(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int | str | None = None
    name: str
    description: str | None = None
    generic_play_type: str | None = Field(default=None, alias="genericPlayType")
    status: str = "active"
    solutions: list[Named] = []
    created_by_user: Creator | None = Field(default=None, alias="createdByUser")
    last_modified_at: str | None = Field(default=None, alias="lastModifiedAt")
    detection_config: Any = Field(default=None, alias="detectionConfig")


class StandalonePlayPage(BaseModel):
    plays: list[StandalonePlay]
    total: int


def parse_plays(payload: Any) -> StandalonePlayPage:
    body = unwrap_text_payload(payload)
    if not isinstance(body, dict) or not isinstance(body.get("plays"), list):
        msg = "expected an object with a 'plays' list"
        raise ValueError(msg)
    plays = [StandalonePlay.model_validate(item) for item in body["plays"]]
    return StandalonePlayPage(plays=plays, total=body.get("total") or len(plays))


async def handle(args: StandalonePlaysInput, client: ResilientHttpClient | None) -> str:
    if client is None:
        return render_api_unavailable(args)
    outcome = await fetch_outcome(client, ENDPOINT, args.request_body(), parse=parse_plays)
    if isinstance(outcome, Failed):
        error = outcome.error
        raise ToolExecutionError(TOOL_NAME, f"{error} ({error.kind.value}, {outcome.url})") from error
    return render(outcome.data, args)


def play_type_label(play_type: str) -> str:
    return PLAY_TYPES.get(play_type) or play_type[:1].upper() + play_type[1:]


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status) or status[:1].upper() + status[1:]


def format_date(value: str) -> str:
    """``2024-01-15T10:00:00Z`` -> ``Jan 15, 2024``; unparsable values pass through."""
    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        return value
    return f"{moment:%b} {moment.day}, {moment.year}"


def _filters(args: StandalonePlaysInput) -> list[str]:
    filters: list[str] = []
    if args.solution:
        filters.append(f"solution: {args.solution}")
    if args.play_type:
        filters.append(f"type: {args.play_type}")
    if args.status:
        filters.append(f"status: {args.status}")
    if args.created_by:
        filters.append(f"created by: {args.created_by}")
    if args.search:
        filters.append(f'search: "{args.search}"')
    return filters


def render(page: StandalonePlayPage, args: StandalonePlaysInput) -> str:
    summary = f"Found {plural(page.total, 'standalone play')} in the system"
    filters = _filters(args)
    if filters:
        summary += f" (filtered by {', '.join(filters)})"
    lines = ["# Standalone Plays Discovery", "", "## Summary", summary + ".", ""]

    if not page.plays:
        lines += [
            "## No Plays Found",
            "",
            "No standalone plays match your search criteria. Try:",
            "- Removing some filters to broaden your search",
            "- Checking for typos in your search terms",
            "- Using different keywords",
        ]
        return "\n".join(lines) + "\n"

    lines += ["## Available Standalone Plays", ""]
    for index, play in enumerate(page.plays, start=1):
        lines.append(f"### {index}. {play.name}")
        lines += _play_details(play) if args.include_details else _play_summary(play)
        lines.append("")

    if len(page.plays) > 1:
        lines += render_analytics(page.plays)
    lines += ["## Recommendations", ""]
    lines += [f"- {tip}" for tip in recommendations(page.plays)]
    return "\n".join(lines) + "\n"


def _play_details(play: StandalonePlay) -> list[str]:
    lines: list[str] = []
    if play.description:
        lines.append(f"- **Description**: {play.description}")
    if play.generic_play_type:
        lines.append(f"- **Type**: {play_type_label(play.generic_play_type)}")
    lines.append(f"- **Status**: {status_label(play.status)}")
    if play.solutions:
        lines.append(f"- **Associated Solutions**: {', '.join(s.name for s in play.solutions)}")
    if play.created_by_user and (play.created_by_user.name or play.created_by_user.email):
        lines.append(f"- **Created By**: {play.created_by_user.name or play.created_by_user.email}")
    if play.last_modified_at:
        lines.append(f"- **Last Modified**: {format_date(play.last_modified_at)}")
    if play.detection_config:
        lines.append("- **Detection Configured**: Yes")
    return lines


def _play_summary(play: StandalonePlay) -> list[str]:
    details: list[str] = []
    if play.generic_play_type:
        details.append(play_type_label(play.generic_play_type))
    if play.status != "active":
        details.append(status_label(play.status))
    if play.solutions:
        details.append(plural(len(play.solutions), "solution"))
    return [f"  *{' | '.join(details)}*"] if details else []


def render_analytics(plays: list[StandalonePlay]) -> list[str]:
    total = len(plays)
    lines = ["## Analytics", ""]

    types = Counter(play.generic_play_type for play in plays if play.generic_play_type)
    if types:
        lines.append("### Play Type Distribution")
        for play_type, count in types.most_common():
            lines.append(f"- **{play_type_label(play_type)}**: {count} plays ({round(count / total * 100)}%)")
        lines.append("")

    statuses = Counter(play.status for play in plays if play.status)
    if statuses:
        lines.append("### Status Distribution")
        for status, count in statuses.most_common():
            lines.append(f"- **{status_label(status)}**: {count} plays ({round(count / total * 100)}%)")
        lines.append("")

    coverage: dict[str, set[Any]] = {}
    for play in plays:
        for solution in play.solutions:
            coverage.setdefault(solution.name, set()).add(play.id if play.id is not None else play.name)
    if coverage:
        ranked = sorted(coverage.items(), key=lambda item: len(item[1]), reverse=True)
        lines.append("### Solution Coverage")
        for name, members in ranked[:TOP_SOLUTIONS]:
            lines.append(f"- **{name}**: {len(members)} plays")
        if len(ranked) > TOP_SOLUTIONS:
            lines.append(f"- *...and {len(ranked) - TOP_SOLUTIONS} more solutions*")
        lines.append("")
    return lines


def recommendations(plays: list[StandalonePlay]) -> list[str]:
    tips: list[str] = []
    present = {play.generic_play_type for play in plays if play.generic_play_type}
    missing = [label for key, label in PLAY_TYPES.items() if key not in present]
    if missing:
        tips.append(
            f"**Content Gap Analysis**: Consider creating {', '.join(missing)} plays "
            "to complete your play type coverage"
        )

    inactive = sum(1 for play in plays if play.status == "inactive")
    if inactive:
        tips.append(
            f"**Content Audit**: Review {plural(inactive, 'inactive play')}; "
            "consider updating or archiving outdated content"
        )
    drafts = sum(1 for play in plays if play.status == "draft")
    if drafts:
        tips.append(
            f"**Content Development**: Complete {plural(drafts, 'draft play')} "
            "to make them available for playbook association"
        )
    unmapped = sum(1 for play in plays if not play.solutions)
    if unmapped:
        tips.append(
            f"**Solution Mapping**: {plural(unmapped, 'play')} need solution associations "
            "for better discoverability and AI recommendations"
        )
    if len(plays) > ORGANIZE_THRESHOLD:
        tips.append(
            f"**Organization**: With {len(plays)} standalone plays, consider implementing tags "
            "or categories for better organization"
        )

    if not tips:
        tips = [
            "Your standalone plays are well-organized and comprehensive",
            "Consider regular reviews to keep content current",
            "Monitor usage metrics to identify most effective plays",
        ]
    return tips


def render_api_unavailable(args: StandalonePlaysInput) -> str:
    lines = [
        "# Standalone Plays Discovery",
        "",
        "## API Unavailable",
        "",
        "The standalone plays API is not currently available. This tool requires:",
        "",
        "- Active connection to the sales intelligence platform",
        "- Valid API credentials",
        "- Standalone plays feature enabled",
        "",
        "## What are Standalone Plays?",
        "",
        "Standalone plays are reusable sales content components that can be:",
        "",
        "- **Associated with multiple playbooks**: One play can be used across different sales scenarios",
        "- **Independently managed**: Created, updated, and maintained separately from specific playbooks",
        "- **Team collaborative**: Shared across teams with role-based permissions (owner, editor, viewer)",
        "- **Solution-linked**: Associated with specific solutions for intelligent recommendations",
        "- **AI-discoverable**: Enhanced with detection rules and embeddings for smart matching",
        "",
        "## Play Types",
        "",
        "- **Discovery**: Questions and frameworks for understanding client needs",
        "- **Demo**: Technical demonstrations and proof-of-concept content",
        "- **Technical**: In-depth technical content for expert audiences",
        "- **Business**: ROI calculators and business value content",
        "- **Closing**: Final presentation content and decision-making frameworks",
        "",
        "## Benefits",
        "",
        "- **Consistency**: Ensure uniform messaging across all playbooks",
        "- **Efficiency**: Reuse content instead of duplicating efforts",
        "- **Collaboration**: Enable teams to contribute and maintain shared content",
        "- **Intelligence**: Get AI-powered recommendations for relevant plays",
        "- **Analytics**: Track usage and effectiveness across multiple contexts",
    ]

    criteria: list[str] = []
    if args.solution:
        criteria.append(f"- **Solution**: {args.solution}")
    if args.play_type:
        criteria.append(f"- **Play Type**: {play_type_label(args.play_type)}")
    if args.status:
        criteria.append(f"- **Status**: {status_label(args.status)}")
    if args.created_by:
        criteria.append(f"- **Created By**: {args.created_by}")
    if args.search:
        criteria.append(f'- **Search**: "{args.search}"')
    if criteria:
        lines += ["", "## Your Search Criteria", "", *criteria, ""]
        lines.append("Connect to the API to search your actual standalone plays library.")
    return "\n".join(lines) + "\n"


TOOL = ToolSpec(
    name=TOOL_NAME,
    description=(
        "Discover and analyze standalone plays: reusable sales content that can be associated with "
        "multiple playbooks. Search by solution, play type, status, creator, or keywords."
    ),
    input_schema=INPUT_SCHEMA,
    input_model=StandalonePlaysInput,
    handler=handle,
)
