"""``find_process_workflows``: step-by-step guidance for POCs, onboarding and similar processes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from sales_intel.protocols.registry import ToolSpec
from sales_intel.tools.base import Degraded, Failed, Ok, fetch_outcome, plural, render_degraded_notice, unwrap_text_payload
from sales_intel.tools.demo_data import Workflow, search_workflows

if TYPE_CHECKING:
    from sales_intel.http.client import ResilientHttpClient

ENDPOINT = "/find_process_workflows"

ProcessType = Literal["poc", "implementation", "onboarding", "setup", "integration", "deployment"]

PROCESS_LABELS: dict[str, str] = {
    "poc": "POC",
    "implementation": "Implementation",
    "onboarding": "Onboarding",
    "setup": "Setup",
    "integration": "Integration",
    "deployment": "Deployment",
}

PROCESS_DESCRIPTIONS: dict[str, str] = {
    "poc": "Proof of concept validation workflows",
    "implementation": "Full solution deployment processes",
    "onboarding": "Customer onboarding and setup procedures",
    "setup": "Initial configuration and setup workflows",
    "integration": "System integration procedures",
    "deployment": "Production deployment workflows",
}

RECOMMENDATIONS: dict[str, list[str]] = {
    "poc": [
        "Define clear success criteria upfront",
        "Ensure data quality and representative sample size",
        "Schedule regular check-ins and progress reviews",
        "Plan for quick wins to maintain momentum",
    ],
    "implementation": [
        "Establish clear project governance and communication",
        "Plan for change management and user training",
        "Set up proper testing environments",
        "Define rollback procedures for risk mitigation",
    ],
    "onboarding": [
        "Provide comprehensive documentation and training",
        "Assign dedicated customer success resources",
        "Set clear expectations and timelines",
        "Schedule regular check-ins during initial period",
    ],
}
GENERAL_RECOMMENDATIONS = [
    "Involve key stakeholders from both technical and business sides",
    "Document lessons learned for future improvements",
]

INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "processType": {
            "type": "string",
            "description": "Type of process workflow to find",
            "enum": list(PROCESS_LABELS),
        },
        "solution": {
            "type": "string",
            "description": "Filter by solution (e.g., Account Verification, Fraud Prevention, Payment Processing)",
        },
        "includeRoles": {
            "type": "boolean",
            "description": "Include role assignments in workflow details",
            "default": True,
        },
    },
    "required": ["processType"],
}


class ProcessWorkflowsInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    process_type: ProcessType = Field(alias="processType")
    solution: str | None = None
    include_roles: bool = Field(default=True, alias="includeRoles")


def parse_workflows(payload: Any) -> list[Workflow]:
    body = unwrap_text_payload(payload)
    if not isinstance(body, dict) or "processType" not in body or not isinstance(body.get("workflows"), list):
        msg = "expected an object with 'processType' and a 'workflows' list"
        raise ValueError(msg)
    return [Workflow.model_validate(item) for item in body["workflows"]]


async def handle(args: ProcessWorkflowsInput, client: ResilientHttpClient | None) -> str:
    outcome = await fetch_outcome(
        client,
        ENDPOINT,
        args.model_dump(by_alias=True, exclude_none=True),
        parse=parse_workflows,
        fallback=lambda: search_workflows(args.process_type, solution=args.solution),
    )
    match outcome:
        case Ok(data=workflows):
            return render(workflows, args)
        case Degraded(data=workflows):
            return render_degraded_notice(outcome) + render(workflows, args)
        case Failed(error=error):
            raise error


def render(workflows: list[Workflow], args: ProcessWorkflowsInput) -> str:
    if not workflows:
        return render_not_found(args.process_type, args.solution)

    label = PROCESS_LABELS[args.process_type]
    summary = f"Found {plural(len(workflows), f'{args.process_type} workflow')}"
    if args.solution:
        summary += f" for {args.solution}"

    lines = [f"# Process Workflows: {label}", "", "## Summary", summary + ".", "", "## Workflows", ""]
    for index, workflow in enumerate(workflows, start=1):
        info = workflow.process_info
        lines += [
            f"### {index}. {workflow.name}",
            f"- **Solution**: {workflow.solution.name}",
            f"- **Process Type**: {info.process_type}",
        ]
        if args.include_roles and info.roles:
            lines.append(f"- **Key Roles**: {', '.join(info.roles)}")
        lines += ["", "**Process Overview:**", workflow.description, ""]
        if info.steps:
            lines.append("**Detailed Steps:**")
            lines += [f"{number}. {step}" for number, step in enumerate(info.steps, start=1)]
            lines.append("")

    lines += ["## Recommendations", "", f"**For {label} Success:**"]
    for tip in RECOMMENDATIONS.get(args.process_type, []) + GENERAL_RECOMMENDATIONS:
        lines.append(f"- {tip}")
    return "\n".join(lines) + "\n"


def render_not_found(process_type: str, solution: str | None = None) -> str:
    message = f"No workflows found for {process_type}"
    if solution:
        message += f" with {solution}"

    lines = [f"# No {process_type.upper()} Workflows Found", "", message + ".", "", "## Available Process Types", ""]
    lines += [f"- **{PROCESS_LABELS[key]}**: {text}" for key, text in PROCESS_DESCRIPTIONS.items()]
    lines += [
        "",
        "## General Process Framework",
        "",
        f"**For any {process_type} process, consider these phases:**",
        "1. **Planning**: Define scope, requirements, and success criteria",
        "2. **Preparation**: Set up environments, gather resources",
        "3. **Execution**: Implement according to plan with regular checkpoints",
        "4. **Validation**: Test and validate results against criteria",
        "5. **Documentation**: Record outcomes and lessons learned",
    ]
    return "\n".join(lines) + "\n"


TOOL = ToolSpec(
    name="find_process_workflows",
    description=(
        "Find process workflows for POCs, implementations, onboarding, and other business processes. "
        "Get step-by-step guidance for various workflow types."
    ),
    input_schema=INPUT_SCHEMA,
    input_model=ProcessWorkflowsInput,
    handler=handle,
)
