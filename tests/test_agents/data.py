import json

from zenai_engine.agents.operations import (
    AnalyzeComplexity,
    AnalyzeProjectHealth,
    CreateTaskFromDescription,
    DetectSecurityIssues,
    EstimateEffort,
    ExtractActionItems,
    GenerateSummary,
    PrioritizeTasks,
    ReviewCode,
    SuggestRefactoring,
    SuggestTaskBreakdown,
)
from zenai_engine.config.constants import AgentType

TASK = {"id": "t1", "title": "Add OAuth login", "description": "Support Google and GitHub"}

SUMMARY = {
    "executiveSummary": "Release moved to Friday",
    "keyPoints": ["QA needs two more days"],
    "decisions": ["Ship on Friday"],
}

# (name, agent type, operation request, model reply, expected result)
OPERATION_CASES = [
    (
        "create task from description",
        AgentType.PRODUCT_MANAGER,
        CreateTaskFromDescription(description="Users cannot reset passwords", project={"name": "Apollo"}),
        '```json\n{"title": "Fix password reset", "description": "Reset emails fail", "priority": "high"}\n```',
        {"title": "Fix password reset", "description": "Reset emails fail", "priority": "high"},
    ),
    (
        "project health",
        AgentType.PRODUCT_MANAGER,
        AnalyzeProjectHealth(project={"name": "Apollo"}, tasks=[{"status": "done"}, {"status": "todo"}]),
        '{"healthScore": 72, "status": "at-risk", "recommendations": ["Cut scope"]}',
        {"healthScore": 72, "status": "at-risk", "recommendations": ["Cut scope"]},
    ),
    (
        "task breakdown",
        AgentType.PRODUCT_MANAGER,
        SuggestTaskBreakdown(title="Billing", description="Stripe integration"),
        '```\n[{"title": "Webhooks", "description": "Handle events"}]\n```',
        [{"title": "Webhooks", "description": "Handle events"}],
    ),
    (
        "prioritize tasks",
        AgentType.PRODUCT_MANAGER,
        PrioritizeTasks(tasks=[TASK], deadline="2026-12-01", team_size=4),
        '{"prioritizedTasks": [{"taskId": "t1", "priority": "high"}]}',
        {"prioritizedTasks": [{"taskId": "t1", "priority": "high"}]},
    ),
    (
        "analyze complexity",
        AgentType.TASK_ANALYZER,
        AnalyzeComplexity(task=TASK),
        '{"complexityScore": 6, "estimatedHours": 12.5, "confidenceLevel": "medium"}',
        {"complexityScore": 6, "estimatedHours": 12.5, "confidenceLevel": "medium"},
    ),
    (
        "estimate effort",
        AgentType.TASK_ANALYZER,
        EstimateEffort(tasks=[TASK], experience="senior", stack="python"),
        '{"totalHours": 16, "taskEstimates": []}',
        {"totalHours": 16, "taskEstimates": []},
    ),
    (
        "review code",
        AgentType.CODE_REVIEWER,
        ReviewCode(code="def f(x): return eval(x)", language="python"),
        '{"overallScore": 3, "issues": [{"severity": "critical", "message": "eval"}]}',
        {"overallScore": 3, "issues": [{"severity": "critical", "message": "eval"}]},
    ),
    (
        "suggest refactoring",
        AgentType.CODE_REVIEWER,
        SuggestRefactoring(code="x=1;y=2", language="python"),
        '{"refactoredCode": "x = 1\\ny = 2", "changes": ["split statements"]}',
        {"refactoredCode": "x = 1\ny = 2", "changes": ["split statements"]},
    ),
    (
        "no security issues",
        AgentType.CODE_REVIEWER,
        DetectSecurityIssues(code="print('hi')", language="python"),
        "[]",
        [],
    ),
    (
        "meeting summary",
        AgentType.MEETING_SUMMARIZER,
        GenerateSummary(transcript="Dana: let's ship Friday.", participants=("Dana", "Lee")),
        json.dumps(SUMMARY),
        SUMMARY,
    ),
    (
        "action items",
        AgentType.MEETING_SUMMARIZER,
        ExtractActionItems(transcript="Lee will update the changelog."),
        '[{"action": "Update changelog", "owner": "Lee"}]',
        [{"action": "Update changelog", "owner": "Lee"}],
    ),
    (
        "action items wrapped in prose",
        AgentType.MEETING_SUMMARIZER,
        ExtractActionItems(transcript="Dana ships, Lee tests."),
        'Here are the action items:\n[{"action": "ship"}, {"action": "test"}]\nLet me know if you need more.',
        [{"action": "ship"}, {"action": "test"}],
    ),
]

# (name, agent type, operation request, malformed model reply)
MALFORMED_CASES = [
    (
        "missing priority",
        AgentType.PRODUCT_MANAGER,
        CreateTaskFromDescription(description="x"),
        '{"title": "t", "description": "d"}',
    ),
    (
        "score as string",
        AgentType.TASK_ANALYZER,
        AnalyzeComplexity(task=TASK),
        '{"complexityScore": "six", "estimatedHours": 1, "confidenceLevel": "low"}',
    ),
    (
        "object where array expected",
        AgentType.CODE_REVIEWER,
        DetectSecurityIssues(code="x", language="python"),
        '{"vulnerability": "sqli", "severity": "high"}',
    ),
    (
        "array where object expected",
        AgentType.TASK_ANALYZER,
        EstimateEffort(tasks=[TASK]),
        '[{"totalHours": 1, "taskEstimates": []}]',
    ),
    (
        "prose only",
        AgentType.MEETING_SUMMARIZER,
        ExtractActionItems(transcript="nothing"),
        "There were no action items in this meeting.",
    ),
]
