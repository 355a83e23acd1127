"""
ProductManagerAgent implementation.

Planning agent: turns descriptions into structured tasks, assesses project
health, breaks epics into subtasks and prioritizes backlogs. Runs at the
generative temperature.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from zenai_engine.agents.base_agent import BaseAgent
from zenai_engine.agents.operations import (
    AnalyzeProjectHealth,
    CreateTaskFromDescription,
    PrioritizeTasks,
    SuggestTaskBreakdown,
)
from zenai_engine.config.constants import AgentType
from zenai_engine.utils.exceptions import AgentError
from zenai_engine.utils.helpers import parse_date, to_prompt_json, utc_now

TASK_SHAPE = {"title": str, "description": str, "priority": str}
HEALTH_SHAPE = {"healthScore": (int, float), "status": str, "recommendations": list}
SUBTASK_SHAPE = {"title": str, "description": str}
PRIORITIZATION_SHAPE = {"prioritizedTasks": list}


def _is_overdue(task: Mapping[str, Any]) -> bool:
    due = task.get("dueDate") or task.get("due_date")
    if not due or task.get("status") == "done":
        return False
    try:
        return parse_date(due) < utc_now()
    except ValueError as e:
        task_id = task.get("id", task.get("_id", "?"))
        raise AgentError(f"Task {task_id} has an unreadable due date: {due!r}") from e


def _task_lines(tasks: Sequence[Mapping[str, Any]]) -> str:
    return "\n".join(
        f"- [{t.get('id', t.get('_id', i))}] {t.get('title', '')}"
        f" (status={t.get('status', 'todo')}, priority={t.get('priority', 'medium')})"
        for i, t in enumerate(tasks, start=1)
    )


class ProductManagerAgent(BaseAgent):
    """Project planning, task creation and prioritization."""

    agent_type = AgentType.PRODUCT_MANAGER

    def _operations(self):
        return {
            CreateTaskFromDescription: lambda op: self.create_task_from_description(op.description, op.project),
            AnalyzeProjectHealth: lambda op: self.analyze_project_health(op.project, op.tasks),
            SuggestTaskBreakdown: lambda op: self.suggest_task_breakdown(op.title, op.description),
            PrioritizeTasks: lambda op: self.prioritize_tasks(
                op.tasks,
                factors=op.factors,
                deadline=op.deadline,
                team_size=op.team_size,
                critical_path=op.critical_path,
            ),
        }

    async def create_task_from_description(
        self,
        description: str,
        project: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Turn a free-text description into a structured task."""
        project = project or {}
        prompt = self._renderer.render(
            "task.createFromDescription",
            {
                "description": description,
                "project_name": project.get("name", "Unassigned"),
                "project_description": project.get("description", "No additional context"),
            },
        )
        return await self._structured_call("create_task_from_description", prompt, TASK_SHAPE)

    async def analyze_project_health(
        self,
        project: Mapping[str, Any],
        tasks: Sequence[Mapping[str, Any]] = (),
    ) -> Dict[str, Any]:
        """Score project health from its status and task counts."""
        total = len(tasks)
        completed = sum(1 for t in tasks if t.get("status") == "done")
        progress = project.get("progress")
        if progress is None:
            progress = round(100 * completed / total) if total else 0

        prompt = self._renderer.render(
            "analysis.projectHealth",
            {
                "name": project.get("name"),
                "status": project.get("status", "active"),
                "deadline": project.get("deadline", "none"),
                "progress": progress,
                "total_tasks": total,
                "completed_tasks": completed,
                "in_progress_tasks": sum(1 for t in tasks if t.get("status") == "in-progress"),
                "blocked_tasks": sum(1 for t in tasks if t.get("status") == "blocked"),
                "overdue_tasks": sum(1 for t in tasks if _is_overdue(t)),
            },
        )
        return await self._structured_call("analyze_project_health", prompt, HEALTH_SHAPE)

    async def suggest_task_breakdown(self, title: str, description: str = "") -> List[Dict[str, Any]]:
        """Break an epic into 3-7 subtasks."""
        prompt = self._renderer.render("task.breakdownEpic", {"title": title, "description": description})
        return await self._structured_call(
            "suggest_task_breakdown", prompt, SUBTASK_SHAPE, expect_list=True
        )

    async def prioritize_tasks(
        self,
        tasks: Sequence[Mapping[str, Any]],
        factors: Sequence[str] = ("urgency", "business impact", "dependencies"),
        deadline: Optional[str] = None,
        team_size: Optional[int] = None,
        critical_path: Sequence[str] = (),
    ) -> Dict[str, Any]:
        """Rank tasks and explain each priority."""
        prompt = self._renderer.render(
            "task.prioritizeTasks",
            {
                "factors": ", ".join(factors),
                "task_list": _task_lines(tasks),
                "deadline": deadline or "not set",
                "team_size": team_size if team_size is not None else "unknown",
                "critical_path": to_prompt_json(list(critical_path)) if critical_path else "unknown",
            },
        )
        return await self._structured_call("prioritize_tasks", prompt, PRIORITIZATION_SHAPE)
