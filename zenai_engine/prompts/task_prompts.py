"""
Instruction templates for planning and estimation operations.

Placeholders use the {identifier} form; JSON braces in the examples are left
untouched by the renderer.
"""

TASK_PROMPTS = {
    "createFromDescription": """
Based on this description, create a well-structured task:

Description: "{description}"
Project: {project_name}
Context: {project_description}

Extract and return JSON with:
{
  "title": "Clear, action-oriented title",
  "description": "Detailed description with acceptance criteria",
  "priority": "low|medium|high|urgent",
  "estimatedTime": <hours>,
  "tags": ["relevant", "tags"],
  "suggestedAssignee": "person or null",
  "acceptanceCriteria": ["Criterion 1", "Criterion 2"],
  "subtasks": ["Subtask 1", "Subtask 2"]
}

Return ONLY valid JSON, no additional text.""",

    "breakdownEpic": """
Break down this epic into smaller, actionable tasks:

Epic: {title}
Description: {description}

Create 3-7 subtasks that are:
- Specific and independently completable
- Can be finished in 1-3 days
- Have clear deliverables
- Properly sequenced

Return JSON array:
[{
  "title": "Task title",
  "description": "What needs to be done",
  "estimatedTime": <hours>,
  "priority": "low|medium|high",
  "dependencies": ["task title"],
  "acceptanceCriteria": ["criteria"]
}]""",

    "prioritizeTasks": """
Prioritize these tasks based on: {factors}

Tasks:
{task_list}

Context:
- Deadline: {deadline}
- Team Size: {team_size}
- Critical Path: {critical_path}

Return JSON:
{
  "prioritizedTasks": [
    {
      "taskId": "id",
      "rank": 1,
      "priority": "urgent|high|medium|low",
      "reasoning": "Why this priority",
      "suggestedOrder": 1
    }
  ],
  "recommendations": ["recommendation1", "recommendation2"]
}""",

    "estimateEffort": """
Estimate effort for these tasks:

{task_list}

Context:
- Team Experience: {experience}
- Technical Stack: {stack}

Return JSON:
{
  "totalHours": <number>,
  "taskEstimates": [
    {"taskId": "id", "hours": <number>, "confidence": "high|medium|low"}
  ],
  "criticalPath": ["taskId1", "taskId2"]
}""",
}
