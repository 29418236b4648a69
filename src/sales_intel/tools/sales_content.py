"""``find_sales_content``: natural-language search over plays and playbooks."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from sales_intel.protocols.registry import ToolSpec
from sales_intel.tools.base import Degraded, Failed, Ok, fetch_outcome, render_degraded_notice, unwrap_text_payload
from sales_intel.tools.demo_data import Play, search_plays

if TYPE_CHECKING:
    from sales_intel.http.client import ResilientHttpClient

ENDPOINT = "/find_sales_content"

PlayType = Literal[
    "DISCOVERY",
    "DEMO",
    "OBJECTION_HANDLING",
    "COMPETITIVE_POSITIONING",
    "VALUE_PROPOSITION",
    "TECHNICAL_DEEP_DIVE",
    "CONTENT_DELIVERY",
    "PROCESS",
]

PLAY_TYPE_LABELS: dict[str, str] = {
    "DISCOVERY": "Discovery",
    "DEMO": "Demo",
    "OBJECTION_HANDLING": "Objection Handling",
    "COMPETITIVE_POSITIONING": "Competitive Positioning",
    "VALUE_PROPOSITION": "Value Proposition",
    "TECHNICAL_DEEP_DIVE": "Technical Deep Dive",
    "CONTENT_DELIVERY": "Content Delivery",
    "PROCESS": "Process",
}

INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "description": (
                'Natural language search query (e.g., "account verification banking", '
                '"fraud prevention demo", "competitive positioning against EWS")'
            ),
        },
        "solution": {
            "type": "string",
            "description": 'Filter by solution name (e.g., "Account Verification", "Fraud Prevention")',
        },
        "segment": {
            "type": "string",
            "description": 'Filter by market segment (e.g., "Enterprise", "SMB", "Banking")',
        },
        "vertical": {
            "type": "string",
            "description": 'Filter by industry vertical (e.g., "Banking", "Fintech", "Wealth Management")',
        },
        "industry": {
            "type": "string",
            "description": 'Filter by specific industry (e.g., "Community Banks", "Regional Banks")',
        },
        "playType": {
            "type": "string",
            "enum": list(PLAY_TYPE_LABELS),
            "description": "Filter by play type including Process workflows for POCs, onboarding, etc.",
        },
        "competitor": {
            "type": "string",
            "description": 'Filter by competitor mentions (e.g., "Early Warning System", "EWS", "Stripe")',
        },
        "limit": {
            "type": "number",
            "minimum": 1,
            "maximum": 50,
            "default": 10,
            "description": "Maximum number of results to return (1-50, default: 10)",
        },
        "includeRelationships": {
            "type": "boolean",
            "default": False,
            "description": "Include related content and supporting materials",
        },
    },
    "required": ["query"],
    "additionalProperties": False,
}


class FindSalesContentInput(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    query: str = Field(min_length=1)
    solution: str | None = None
    segment: str | None = None
    vertical: str | None = None
    industry: str | None = None
    play_type: PlayType | None = Field(default=None, alias="playType")
    competitor: str | None = None
    limit: int = Field(default=10, ge=1, le=50)
    include_relationships: bool = Field(default=False, alias="includeRelationships")


class SearchResults(BaseModel):
    plays: list[Play] = []
    playbook_count: int = 0
    confidence: float | None = None
    query_time_ms: int | None = None
    cache_hit: bool = False
    resolved: dict[str, list[str]] = {}


def parse_search_response(payload: Any) -> SearchResults:
    """Turn the API payload into :class:`SearchResults`.

    The API wraps ``{success, data, metadata}`` as JSON text inside an
    MCP-style ``content`` list.
    """
    body = unwrap_text_payload(payload)
    if not isinstance(body, dict):
        msg = f"expected a JSON object, got {type(body).__name__}"
        raise ValueError(msg)
    if not body.get("success"):
        msg = f"search reported failure: {body.get('error') or 'Search failed'}"
        raise ValueError(msg)
    data = body.get("data") or {}
    results = data.get("results") or {}
    metadata = body.get("metadata") or data.get("metadata") or {}
    resolution = (metadata.get("entityResolution") or {}).get("resolved") or {}
    return SearchResults(
        plays=[Play.model_validate(play) for play in results.get("plays") or []],
        playbook_count=len(results.get("playbooks") or []),
        confidence=data.get("confidence"),
        query_time_ms=metadata.get("queryTime"),
        cache_hit=bool(metadata.get("cacheHit")),
        resolved={key: list(values) for key, values in resolution.items() if values},
    )


def demo_search(args: FindSalesContentInput) -> SearchResults:
    plays = search_plays(
        args.query,
        solution=args.solution,
        segment=args.segment,
        play_type=args.play_type,
    )
    return SearchResults(plays=plays[: args.limit])


async def handle(args: FindSalesContentInput, client: ResilientHttpClient | None) -> str:
    body = args.model_dump(by_alias=True, exclude_none=True)
    outcome = await fetch_outcome(
        client,
        ENDPOINT,
        body,
        parse=parse_search_response,
        fallback=lambda: demo_search(args),
    )
    match outcome:
        case Ok(data=results):
            return render(results, args)
        case Degraded(data=results):
            return render_degraded_notice(outcome) + render(results, args)
        case Failed(error=error):
            raise error


def render(results: SearchResults, args: FindSalesContentInput) -> str:
    if not results.plays and not results.playbook_count:
        return render_no_results(args)
    return render_results(results, args)


def render_results(results: SearchResults, args: FindSalesContentInput) -> str:
    plays = results.plays
    header = f"**Results:** {len(plays)} plays found"
    if results.query_time_ms is not None:
        header += f" ({results.query_time_ms}ms)"
    if results.cache_hit:
        header += " *cached*"

    lines = ["# Sales Content Search Results", "", f'**Query:** "{args.query}"', header, ""]
    if results.confidence is not None:
        lines.append(f"**Confidence:** {round(results.confidence * 100)}%")
    if results.resolved:
        identified = ", ".join(f"{kind}: {', '.join(values)}" for kind, values in results.resolved.items())
        lines.append(f"**Identified:** {identified}")
    lines += ["", "---", ""]

    for index, play in enumerate(plays, start=1):
        lines += [f"## {index}. {play.name}", ""]
        if play.playbook:
            lines.append(f"**Playbook:** {play.playbook.name}")
        if play.solution:
            lines.append(f"**Solution:** {play.solution.name}")
        if play.generic_play_type:
            lines.append(f"**Type:** {play_type_label(play.generic_play_type)}")
        if play.sequence_order:
            lines.append(f"**Sequence:** {play.sequence_order}")
        if play.generic_play_type == "PROCESS" and play.description:
            lines += _render_process_info(play.description)
        if play.description:
            lines += ["", "**Description:**", play.description]
        lines += ["", "---", ""]

    if plays:
        lines += ["## Quick Insights", ""]
        types = _unique(play_type_label(p.generic_play_type) for p in plays if p.generic_play_type)
        if types:
            lines.append(f"**Play Types Found:** {', '.join(types)}")
        solutions = _unique(p.solution.name for p in plays if p.solution)
        if solutions:
            lines.append(f"**Solutions Covered:** {', '.join(solutions)}")
        segments = _unique(p.segment.name for p in plays if p.segment)
        if segments:
            lines.append(f"**Market Segments:** {', '.join(segments)}")

    applied = _applied_filters(args)
    if applied:
        lines += ["", f"**Filters Applied:** {', '.join(applied)}"]
    return "\n".join(lines) + "\n"


def render_no_results(args: FindSalesContentInput) -> str:
    lines = [
        "# No Sales Content Found",
        "",
        f'**Query:** "{args.query}"',
        "",
        "No matching plays or playbooks were found. Try:",
        "",
        "- **Broadening your search:** Use more general terms",
        "- **Different keywords:** Try synonyms or related terms",
        "- **Removing filters:** Check if solution/segment filters are too restrictive",
        "- **Checking spelling:** Verify entity names are correct",
        "",
    ]
    if args.solution or args.segment or args.play_type:
        lines.append("**Active Filters:**")
        if args.solution:
            lines.append(f"- Solution: {args.solution}")
        if args.segment:
            lines.append(f"- Segment: {args.segment}")
        if args.play_type:
            lines.append(f"- Play Type: {play_type_label(args.play_type)}")
        lines += ["", "Try removing some filters to get broader results."]
    return "\n".join(lines) + "\n"


def play_type_label(play_type: str) -> str:
    return PLAY_TYPE_LABELS.get(play_type, play_type)


_STEP_RE = re.compile(r"\d+\.\s*([^\n]+)")
_ROLE_RE = re.compile(r"(?:owner|responsible|assigned):\s*([^\n,]+)", re.IGNORECASE)

_PROCESS_KEYWORDS = (
    ("poc", "POC Validation"),
    ("onboarding", "Client Onboarding"),
    ("implementation", "Implementation"),
    ("retro", "Retrospective Analysis"),
    ("evaluation", "Evaluation Process"),
)


def infer_process_type(description: str) -> str:
    lowered = description.lower()
    for keyword, label in _PROCESS_KEYWORDS:
        if keyword in lowered:
            return label
    return "General Process"


def extract_steps(description: str) -> list[str]:
    return [step.strip() for step in _STEP_RE.findall(description)][:5]


def extract_roles(description: str) -> list[str]:
    return [role.strip() for role in _ROLE_RE.findall(description)]


def _render_process_info(description: str) -> list[str]:
    lines = [f"**Process Type:** {infer_process_type(description)}"]
    steps = extract_steps(description)
    if steps:
        more = "..." if len(steps) > 3 else ""
        lines.append(f"**Key Steps:** {', '.join(steps[:3])}{more}")
    roles = extract_roles(description)
    if roles:
        lines.append(f"**Roles:** {', '.join(roles)}")
    return lines


def _applied_filters(args: FindSalesContentInput) -> list[str]:
    applied: list[str] = []
    if args.solution:
        applied.append(f"Solution: {args.solution}")
    if args.segment:
        applied.append(f"Segment: {args.segment}")
    if args.play_type:
        applied.append(f"Type: {play_type_label(args.play_type)}")
    if args.competitor:
        applied.append(f"Competitor: {args.competitor}")
    return applied


def _unique(values: Any) -> list[str]:
    return list(dict.fromkeys(values))


TOOL = ToolSpec(
    name="find_sales_content",
    description=(
        "Search for playbooks, plays, and sales content using natural language queries. "
        "Supports filtering by solution, market segment, play type, and more."
    ),
    input_schema=INPUT_SCHEMA,
    input_model=FindSalesContentInput,
    handler=handle,
)
