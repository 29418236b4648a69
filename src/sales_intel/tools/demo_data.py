"""Static demo dataset used when no API is configured or the API fails.

The same models parse API payloads, so demo and live data render through
the same code paths.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Named(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class Play(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int | None = None
    name: str
    generic_play_type: str | None = Field(default=None, alias="genericPlayType")
    description: str = ""
    playbook: Named | None = None
    solution: Named | None = None
    segment: Named | None = None
    sequence_order: int | None = Field(default=None, alias="sequenceOrder")


class Source(BaseModel):
    type: Literal["play", "content"]
    id: int
    name: str


class Competitor(BaseModel):
    name: str
    talking_points: list[str]
    sources: list[Source] = []


class ProcessInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    process_type: str = Field(alias="processType")
    steps: list[str] = []
    roles: list[str] = []


class Workflow(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int | None = None
    name: str
    description: str = ""
    process_info: ProcessInfo = Field(alias="processInfo")
    solution: Named


class Playbook(BaseModel):
    id: int
    name: str
    description: str
    play_count: int
    play_types: list[str]
    solution: Named
    segment: Named | None = None


DEMO_PLAYS: tuple[Play, ...] = (
    Play(
        id=1,
        name="Account Verification Discovery",
        generic_play_type="DISCOVERY",
        description=(
            "Essential discovery questions to understand client's current account verification "
            "process, pain points, and requirements. Focus on transaction volume, verification "
            "methods, false positive rates, and integration capabilities."
        ),
        playbook=Named(name="Enterprise Banking Playbook"),
        solution=Named(name="Account Verification"),
        segment=Named(name="Enterprise"),
    ),
    Play(
        id=2,
        name="Real-time Fraud Detection Demo",
        generic_play_type="DEMO",
        description=(
            "Technical demonstration showcasing real-time fraud detection capabilities, API "
            "integration, and dashboard functionality. Include comparison of detection speed vs "
            "batch processing competitors."
        ),
        playbook=Named(name="Fraud Prevention Playbook"),
        solution=Named(name="Fraud Prevention"),
        segment=Named(name="Enterprise"),
    ),
    Play(
        id=3,
        name="Payment Processing ROI Calculator",
        generic_play_type="VALUE_PROPOSITION",
        description=(
            "ROI analysis tool showing cost savings from improved transaction success rates, "
            "reduced false positives, and faster processing times for payment solutions."
        ),
        playbook=Named(name="Payment Solutions Playbook"),
        solution=Named(name="Payment Processing"),
        segment=Named(name="Mid-Market"),
    ),
    Play(
        id=4,
        name="EWS Competitive Positioning",
        generic_play_type="COMPETITIVE_POSITIONING",
        description=(
            "Battle card for competing against Early Warning System (EWS). Focus on real-time "
            "capabilities, API flexibility, and better false positive rates."
        ),
        playbook=Named(name="Enterprise Banking Playbook"),
        solution=Named(name="Account Verification"),
        segment=Named(name="Enterprise"),
    ),
    Play(
        id=5,
        name="Account Verification POC Process",
        generic_play_type="PROCESS",
        description=(
            "Step-by-step POC process for account verification: 1. Environment setup\n"
            "2. Data integration\n3. Model configuration\n4. Testing and validation\n"
            "5. Results analysis and reporting\nOwner: Solutions Engineer"
        ),
        playbook=Named(name="Technical Implementation Playbook"),
        solution=Named(name="Account Verification"),
        segment=Named(name="Enterprise"),
    ),
    Play(
        id=6,
        name="Fintech Integration Deep Dive",
        generic_play_type="TECHNICAL_DEEP_DIVE",
        description=(
            "Technical deep dive into API integration for fintech companies. Covers "
            "authentication, webhooks, rate limiting, and error handling best practices."
        ),
        playbook=Named(name="Fintech Playbook"),
        solution=Named(name="Payment Processing"),
        segment=Named(name="SMB"),
    ),
)

_EWS_POINTS = [
    "We provide real-time fraud detection while EWS uses batch processing with delays",
    "Our API is more flexible and developer-friendly than EWS legacy systems",
    "Better false positive rates mean fewer legitimate transactions get blocked",
]

DEMO_COMPETITORS: dict[str, Competitor] = {
    "Early Warning System": Competitor(
        name="Early Warning System",
        talking_points=[
            *_EWS_POINTS,
            "Our machine learning models adapt faster to new fraud patterns",
            "Integration takes weeks not months compared to EWS implementations",
        ],
        sources=[
            Source(type="play", id=4, name="EWS Competitive Positioning"),
            Source(type="content", id=1, name="EWS Battle Card"),
        ],
    ),
    "EWS": Competitor(
        name="Early Warning System",
        talking_points=list(_EWS_POINTS),
        sources=[Source(type="play", id=4, name="EWS Competitive Positioning")],
    ),
    "Plaid": Competitor(
        name="Plaid",
        talking_points=[
            "Our account verification is specifically designed for banking use cases",
            "Better fraud detection capabilities beyond just account verification",
            "More comprehensive risk assessment than Plaid's basic verification",
            "Enterprise-grade security and compliance features",
        ],
        sources=[Source(type="content", id=2, name="Plaid Competitive Analysis")],
    ),
    "Featurespace": Competitor(
        name="Featurespace",
        talking_points=[
            "Our solution offers better integration flexibility than Featurespace ARIC",
            "More transparent machine learning models with explainable AI",
            "Lower false positive rates in payment processing scenarios",
            "Better real-time performance for high-volume transactions",
        ],
        sources=[Source(type="content", id=3, name="Featurespace Battle Card")],
    ),
}

DEMO_WORKFLOWS: tuple[Workflow, ...] = (
    Workflow(
        id=1,
        name="Account Verification POC",
        description=(
            "1. Setup test environment and configure API endpoints\n"
            "2. Integrate with client's data sources\n"
            "3. Run validation tests with sample data\n"
            "4. Analyze results and provide recommendations"
        ),
        process_info=ProcessInfo(
            process_type="POC Validation",
            steps=[
                "Setup test environment and configure API endpoints",
                "Integrate with client's data sources",
                "Run validation tests with sample data",
                "Analyze results and provide recommendations",
            ],
            roles=["Technical Lead", "Solutions Engineer", "Data Analyst"],
        ),
        solution=Named(name="Account Verification"),
    ),
    Workflow(
        id=2,
        name="Fraud Prevention Implementation",
        description=(
            "Full implementation process for fraud prevention solution including model "
            "training, integration testing, and production deployment."
        ),
        process_info=ProcessInfo(
            process_type="Implementation",
            steps=[
                "Requirements gathering and system analysis",
                "Model training with client's historical data",
                "Integration development and testing",
                "Production deployment and monitoring setup",
            ],
            roles=["Project Manager", "ML Engineer", "DevOps Engineer"],
        ),
        solution=Named(name="Fraud Prevention"),
    ),
    Workflow(
        id=3,
        name="Payment Processing Onboarding",
        description=(
            "Customer onboarding workflow for payment processing solutions with compliance "
            "and integration checkpoints."
        ),
        process_info=ProcessInfo(
            process_type="Onboarding",
            steps=[
                "Compliance documentation review",
                "API key setup and authentication",
                "Integration testing and certification",
                "Go-live support and monitoring",
            ],
            roles=["Customer Success Manager", "Technical Support", "Compliance Officer"],
        ),
        solution=Named(name="Payment Processing"),
    ),
)

DEMO_PLAYBOOKS: tuple[Playbook, ...] = (
    Playbook(
        id=1,
        name="Enterprise Banking Playbook",
        description=(
            "Comprehensive playbook for enterprise banking clients focusing on account "
            "verification and fraud prevention"
        ),
        play_count=8,
        play_types=["DISCOVERY", "DEMO", "VALUE_PROPOSITION", "COMPETITIVE_POSITIONING"],
        solution=Named(name="Account Verification"),
        segment=Named(name="Enterprise"),
    ),
    Playbook(
        id=2,
        name="Fintech Playbook",
        description="Playbook tailored for fintech companies and payment processors",
        play_count=6,
        play_types=["TECHNICAL_DEEP_DIVE", "DEMO", "INTEGRATION_GUIDE"],
        solution=Named(name="Payment Processing"),
        segment=Named(name="SMB"),
    ),
    Playbook(
        id=3,
        name="Fraud Prevention Playbook",
        description="Specialized playbook for fraud detection and prevention across all market segments",
        play_count=10,
        play_types=["DISCOVERY", "DEMO", "VALUE_PROPOSITION", "PROCESS"],
        solution=Named(name="Fraud Prevention"),
        segment=Named(name="Mid-Market"),
    ),
)


def _contains(haystack: str, needle: str | None) -> bool:
    return needle is None or needle.lower() in haystack.lower()


def search_plays(
    query: str,
    *,
    solution: str | None = None,
    segment: str | None = None,
    play_type: str | None = None,
) -> list[Play]:
    """Plays matching any query term and every given filter."""
    terms = query.lower().split()
    matches: list[Play] = []
    for play in DEMO_PLAYS:
        solution_name = play.solution.name if play.solution else ""
        text = f"{play.name} {play.description} {solution_name}".lower()
        if not any(term in text for term in terms):
            continue
        if solution and not _contains(solution_name, solution):
            continue
        if segment and play.segment and not _contains(play.segment.name, segment):
            continue
        if play_type and play.generic_play_type != play_type:
            continue
        matches.append(play)
    return matches


def find_competitor(name: str) -> Competitor | None:
    """Exact key first, then case-insensitive key or display name."""
    if name in DEMO_COMPETITORS:
        return DEMO_COMPETITORS[name]
    lowered = name.strip().lower()
    for key, competitor in DEMO_COMPETITORS.items():
        if key.lower() == lowered or competitor.name.lower() == lowered:
            return competitor
    return None


def search_workflows(process_type: str, *, solution: str | None = None) -> list[Workflow]:
    return [
        workflow
        for workflow in DEMO_WORKFLOWS
        if _contains(workflow.process_info.process_type, process_type)
        and _contains(workflow.solution.name, solution)
    ]


def search_playbooks(*, solution: str | None = None, segment: str | None = None) -> list[Playbook]:
    """Playbooks matching the solution and segment filters.

    Vertical and industry are accepted by the tool but the demo playbooks
    carry no such attributes, so they do not narrow the result.
    """
    return [
        playbook
        for playbook in DEMO_PLAYBOOKS
        if _contains(playbook.solution.name, solution)
        and (playbook.segment is None or _contains(playbook.segment.name, segment))
    ]
