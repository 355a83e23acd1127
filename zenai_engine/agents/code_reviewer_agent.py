"""
CodeReviewerAgent implementation.
"""

from __future__ import annotations

from typing import Any, Dict, List

from zenai_engine.agents.base_agent import BaseAgent
from zenai_engine.agents.operations import DetectSecurityIssues, ReviewCode, SuggestRefactoring
from zenai_engine.config.constants import AgentType
from zenai_engine.utils.exceptions import AgentError

REVIEW_SHAPE = {"overallScore": (int, float), "issues": list}
REFACTORING_SHAPE = {"refactoredCode": str, "changes": list}
SECURITY_ISSUE_SHAPE = {"vulnerability": str, "severity": str}


class CodeReviewerAgent(BaseAgent):
    """Code quality, security and best-practice review."""

    agent_type = AgentType.CODE_REVIEWER

    def _operations(self):
        return {
            ReviewCode: lambda op: self.review_code(op.code, op.language, op.purpose),
            SuggestRefactoring: lambda op: self.suggest_refactoring(op.code, op.language),
            DetectSecurityIssues: lambda op: self.detect_security_issues(op.code, op.language),
        }

    @staticmethod
    def _check_code(code: str) -> None:
        if not code or not code.strip():
            raise AgentError("Code review requires non-empty code")

    async def review_code(self, code: str, language: str, purpose: str = "General review") -> Dict[str, Any]:
        self._check_code(code)
        prompt = self._renderer.render(
            "analysis.codeQuality",
            {"language": language, "code": code, "purpose": purpose},
        )
        return await self._structured_call("review_code", prompt, REVIEW_SHAPE)

    async def suggest_refactoring(self, code: str, language: str) -> Dict[str, Any]:
        self._check_code(code)
        prompt = self._renderer.render("analysis.refactoring", {"language": language, "code": code})
        return await self._structured_call("suggest_refactoring", prompt, REFACTORING_SHAPE)

    async def detect_security_issues(self, code: str, language: str) -> List[Dict[str, Any]]:
        # An empty array is a valid "no issues" answer
        self._check_code(code)
        prompt = self._renderer.render("analysis.securityScan", {"language": language, "code": code})
        return await self._structured_call(
            "detect_security_issues", prompt, SECURITY_ISSUE_SHAPE, expect_list=True
        )
