# (template, variables, expected) for the raw renderer
RENDER_CASES = [
    ("Hello {name}", {"name": "Dana"}, "Hello Dana"),
    ("{a}-{b}-{a}", {"a": 1, "b": 2}, "1-2-1"),
    ("Missing {gone}!", {}, "Missing !"),
    ("None renders empty: [{value}]", {"value": None}, "None renders empty: []"),
    ('JSON {"score": 0-100} stays', {}, 'JSON {"score": 0-100} stays'),
    ("Not identifiers: {1abc} { spaced }", {}, "Not identifiers: {1abc} { spaced }"),
    ("No rescan: {x}", {"x": "{y}", "y": "boom"}, "No rescan: {y}"),
]

# Catalogue keys with the placeholders their callers supply
CATALOGUE_KEYS = [
    "task.createFromDescription",
    "task.breakdownEpic",
    "task.prioritizeTasks",
    "task.estimateEffort",
    "analysis.projectHealth",
    "analysis.taskComplexity",
    "analysis.codeQuality",
    "analysis.refactoring",
    "analysis.securityScan",
    "analysis.meetingSummary",
    "analysis.actionItems",
    "analysis.meetingReport",
    "orchestrator.routing",
    "orchestrator.synthesis",
    "orchestrator.workflowBreakdown",
    "orchestrator.workflowSummary",
    "document.task.bug",
    "document.task.feature",
    "document.task.refactor",
    "document.meeting.standup",
    "document.meeting.sprintPlanning",
    "document.meeting.retrospective",
    "document.email.projectUpdate",
    "document.email.statusReport",
]
