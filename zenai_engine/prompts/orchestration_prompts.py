"""
Prompts used by the orchestrator itself: routing, synthesis and multi-step
workflow breakdown/summary.
"""

ORCHESTRATION_PROMPTS = {
    "routing": """
Analyze this request and determine which specialized agents should handle it:

Request: "{request}"

Context:
{context}

Available agents:
{agents}

Return JSON only:
{
  "agents": ["agentName1", "agentName2"],
  "workflow": "sequential|parallel",
  "reasoning": "Why these agents",
  "expectedOutput": "What the final response should contain"
}

Use "sequential" when later agents need earlier results, "parallel" when the
agents work independently. Choose the minimum number of agents needed.""",

    "synthesis": """
Original request: "{request}"

Results from the specialized agents:
{results}

Synthesize these results into one coherent, helpful response for the user.
Resolve overlaps, keep every concrete recommendation, and do not mention the
agents by name.""",

    "workflowBreakdown": """
Break down this complex workflow into ordered, executable steps:

Workflow: "{request}"

Context:
{context}

Return a JSON array:
[{
  "order": 1,
  "action": "Specific, self-contained request for this step",
  "agent": "agent best suited for the step",
  "dependencies": []
}]""",

    "workflowSummary": """
Workflow: "{request}"

Step results:
{results}

Summarize what was accomplished, list any open issues, and state the
recommended next actions.""",
}
