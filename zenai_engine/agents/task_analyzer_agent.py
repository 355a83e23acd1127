"""
TaskAnalyzerAgent implementation.

Estimation agent: complexity scoring, effort estimates and dependency
discovery. Runs at the analytical temperature.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from zenai_engine.agents.base_agent import BaseAgent
from zenai_engine.agents.operations import AnalyzeComplexity, EstimateEffort
from zenai_engine.config.constants import AgentType
from zenai_engine.utils.helpers import to_prompt_json

COMPLEXITY_SHAPE = {
    "complexityScore": (int, float),
    "estimatedHours": (int, float),
    "confidenceLevel": str,
}
EFFORT_SHAPE = {"totalHours": (int, float), "taskEstimates": list}


class TaskAnalyzerAgent(BaseAgent):
    """Task complexity analysis and effort estimation."""

    agent_type = AgentType.TASK_ANALYZER

    def _operations(self):
        return {
            AnalyzeComplexity: lambda op: self.analyze_complexity(op.task, op.project_context),
            EstimateEffort: lambda op: self.estimate_effort(op.tasks, op.experience, op.stack),
        }

    async def analyze_complexity(
        self,
        task: Mapping[str, Any],
        project_context: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        prompt = self._renderer.render(
            "analysis.taskComplexity",
            {
                "title": task.get("title"),
                "description": task.get("description", ""),
                "project_context": to_prompt_json(dict(project_context)) if project_context else "None provided",
            },
        )
        return await self._structured_call("analyze_complexity", prompt, COMPLEXITY_SHAPE)

    async def estimate_effort(
        self,
        tasks: Sequence[Mapping[str, Any]],
        experience: str = "mixed",
        stack: str = "not specified",
    ) -> Dict[str, Any]:
        task_list = "\n".join(
            f"- [{t.get('id', t.get('_id', i))}] {t.get('title', '')}: {t.get('description', '')}"
            for i, t in enumerate(tasks, start=1)
        )
        prompt = self._renderer.render(
            "task.estimateEffort",
            {"task_list": task_list, "experience": experience, "stack": stack},
        )
        return await self._structured_call("estimate_effort", prompt, EFFORT_SHAPE)
