"""
Document templates and the prompt renderer.

Every prompt in the engine is addressed by a dotted template key:

    system.<agent key>          -> SYSTEM_PROMPTS
    task.<operation>            -> TASK_PROMPTS
    analysis.<operation>        -> ANALYSIS_PROMPTS
    orchestrator.<step>         -> ORCHESTRATION_PROMPTS
    document.<kind>.<name>      -> DOCUMENT_TEMPLATES

Placeholders are written as {identifier}. Braces around anything that is
not a bare identifier (JSON examples in instruction templates) are left
as-is, and substituted values are never re-scanned.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

from zenai_engine.prompts.analysis_prompts import ANALYSIS_PROMPTS
from zenai_engine.prompts.orchestration_prompts import ORCHESTRATION_PROMPTS
from zenai_engine.prompts.system_prompts import SYSTEM_PROMPTS
from zenai_engine.prompts.task_prompts import TASK_PROMPTS
from zenai_engine.utils.exceptions import ConfigurationError

PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")

PERMISSIVE = "permissive"
STRICT = "strict"


DOCUMENT_TEMPLATES = {
    "task": {
        "bug": """[BUG] {summary}

**Bug Description:**
{description}

**Steps to Reproduce:**
{steps}

**Expected Behavior:**
{expected}

**Actual Behavior:**
{actual}

**Environment:**
- Browser/Device: {environment}
- Version: {version}

**Priority Justification:**
{priority_reason}
""",
        "feature": """[FEATURE] {summary}

**Feature Description:**
{description}

**User Story:**
As a {user_type}, I want to {action} so that {benefit}.

**Acceptance Criteria:**
{criteria}

**Technical Considerations:**
{technical_notes}

**Dependencies:**
{dependencies}

**Success Metrics:**
{metrics}
""",
        "refactor": """[REFACTOR] {summary}

**Refactoring Goal:**
{goal}

**Current State:**
{current_state}

**Proposed Changes:**
{proposed_changes}

**Risks:**
{risks}

**Testing Strategy:**
{testing}
""",
    },
    "meeting": {
        "standup": """Daily Standup - {date}

1. What did you accomplish yesterday?
2. What are you working on today?
3. Any blockers?

Duration: 15 minutes
""",
        "sprintPlanning": """Sprint Planning - Sprint {number}

1. Review sprint goal
2. Prioritize backlog items
3. Estimate effort
4. Commit to sprint scope
5. Identify dependencies and risks

Duration: 2 hours
""",
        "retrospective": """Sprint Retrospective - Sprint {number}

1. What went well?
2. What could be improved?
3. Action items for next sprint

Duration: 1 hour
""",
    },
    "email": {
        "projectUpdate": """Subject: Project Update: {project_name} - {date}

Hi Team,

Here's our project update for {project_name}:

**Progress:**
- Overall completion: {progress}%
- Tasks completed: {completed_tasks}
- Tasks in progress: {in_progress_tasks}

**Highlights:**
{highlights}

**Upcoming Milestones:**
{milestones}

**Blockers & Risks:**
{blockers}

**Next Steps:**
{next_steps}

Best regards,
{sender_name}
""",
        "statusReport": """Subject: Weekly Status Report - {week_of}

**Summary:**
{summary}

**Completed:**
{completed_items}

**In Progress:**
{in_progress_items}

**Planned:**
{planned_items}

**Issues & Risks:**
{issues}

**Requests & Decisions Needed:**
{requests}
""",
    },
}


def _build_catalogue() -> Dict[str, str]:
    catalogue: Dict[str, str] = {}
    for namespace, templates in (
        ("system", SYSTEM_PROMPTS),
        ("task", TASK_PROMPTS),
        ("analysis", ANALYSIS_PROMPTS),
        ("orchestrator", ORCHESTRATION_PROMPTS),
    ):
        for key, template in templates.items():
            catalogue[f"{namespace}.{key}"] = template
    for kind, templates in DOCUMENT_TEMPLATES.items():
        for key, template in templates.items():
            catalogue[f"document.{kind}.{key}"] = template
    return catalogue


# Static catalogue; never mutated after import
PROMPT_CATALOGUE: Dict[str, str] = _build_catalogue()


def placeholders(template: str) -> List[str]:
    """Return the distinct placeholder names of a template in order of appearance."""
    seen: List[str] = []
    for name in PLACEHOLDER_PATTERN.findall(template):
        if name not in seen:
            seen.append(name)
    return seen


def render_template(template: str, variables: Mapping[str, Any], strict: bool = False) -> str:
    """
    Substitute {identifier} placeholders in a raw template string.

    Missing (or None) values render as "" unless strict is set, in which case
    a ConfigurationError names every missing variable.
    """
    if strict:
        missing = [name for name in placeholders(template) if variables.get(name) is None]
        if missing:
            raise ConfigurationError(
                f"Missing template variables: {', '.join(missing)}",
                details=f"provided={sorted(variables)}",
            )

    def _substitute(match: "re.Match[str]") -> str:
        value = variables.get(match.group(1))
        return "" if value is None else str(value)

    return PLACEHOLDER_PATTERN.sub(_substitute, template)


class PromptRenderer:
    """
    Renders catalogue templates by key.

    In permissive mode (the default) missing variables render as an empty
    string, since most prompts are built from optional fields. Strict mode
    fails closed with ConfigurationError.
    """

    def __init__(
        self,
        mode: str = PERMISSIVE,
        catalogue: Optional[Mapping[str, str]] = None,
    ) -> None:
        if mode not in (PERMISSIVE, STRICT):
            raise ConfigurationError(f"Unknown renderer mode: {mode!r}")
        self.mode = mode
        self._catalogue = dict(PROMPT_CATALOGUE if catalogue is None else catalogue)

    @property
    def strict(self) -> bool:
        return self.mode == STRICT

    def has_template(self, template_key: str) -> bool:
        return template_key in self._catalogue

    def template(self, template_key: str) -> str:
        try:
            return self._catalogue[template_key]
        except KeyError:
            raise ConfigurationError(f"Unknown template key: '{template_key}'") from None

    def render(self, template_key: str, variables: Optional[Mapping[str, Any]] = None) -> str:
        return render_template(self.template(template_key), variables or {}, strict=self.strict)

    def system_prompt(self, system_prompt_key: str) -> str:
        return self.template(f"system.{system_prompt_key}")
