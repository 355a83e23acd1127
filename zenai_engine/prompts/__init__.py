"""
Prompt catalogue module.

- SYSTEM_PROMPTS: role prompts per agent.
- TASK_PROMPTS / ANALYSIS_PROMPTS / ORCHESTRATION_PROMPTS: instruction
  templates demanding a specific output shape.
- DOCUMENT_TEMPLATES: task, meeting and e-mail bodies.
- PromptRenderer: renders any of the above by dotted key.
"""

from zenai_engine.prompts.analysis_prompts import ANALYSIS_PROMPTS
from zenai_engine.prompts.orchestration_prompts import ORCHESTRATION_PROMPTS
from zenai_engine.prompts.system_prompts import SYSTEM_PROMPTS
from zenai_engine.prompts.task_prompts import TASK_PROMPTS
from zenai_engine.prompts.templates import (
    DOCUMENT_TEMPLATES,
    PROMPT_CATALOGUE,
    PromptRenderer,
    placeholders,
    render_template,
)

__all__ = [
    "ANALYSIS_PROMPTS",
    "ORCHESTRATION_PROMPTS",
    "SYSTEM_PROMPTS",
    "TASK_PROMPTS",
    "DOCUMENT_TEMPLATES",
    "PROMPT_CATALOGUE",
    "PromptRenderer",
    "placeholders",
    "render_template",
]
