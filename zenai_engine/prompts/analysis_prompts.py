"""
Instruction templates for analysis operations (project health, task
complexity, code review, meetings).
"""

ANALYSIS_PROMPTS = {
    "projectHealth": """
Analyze project health comprehensively:

PROJECT:
- Name: {name}
- Status: {status}
- Deadline: {deadline}
- Progress: {progress}%

TASKS:
- Total: {total_tasks}
- Completed: {completed_tasks}
- In Progress: {in_progress_tasks}
- Blocked: {blocked_tasks}
- Overdue: {overdue_tasks}

Provide analysis in JSON:
{
  "healthScore": 0-100,
  "status": "healthy|at-risk|critical",
  "insights": ["insight1", "insight2"],
  "risks": ["risk1", "risk2"],
  "recommendations": ["action1", "action2"]
}""",

    "taskComplexity": """
Analyze task complexity in detail:

Task: {title}
Description: {description}

Project Context:
{project_context}

Provide comprehensive analysis as JSON:
{
  "complexityScore": 1-10,
  "estimatedHours": <number>,
  "confidenceLevel": "high|medium|low",
  "skillsRequired": ["skill1", "skill2"],
  "dependencies": ["dep1", "dep2"],
  "risks": ["risk1"],
  "recommendations": ["rec1"],
  "blockers": ["blocker1"]
}""",

    "codeQuality": """
Review this {language} code:

```{language}
{code}
```

Context: {purpose}

Provide comprehensive review in JSON format:
{
  "overallScore": 0-100,
  "issues": [
    {
      "severity": "critical|high|medium|low",
      "type": "bug|security|performance|style",
      "line": <number>,
      "description": "Issue description",
      "suggestion": "How to fix",
      "example": "Code example"
    }
  ],
  "strengths": ["strength1", "strength2"],
  "recommendations": ["rec1", "rec2"]
}""",

    "refactoring": """
Suggest refactoring for this {language} code:

```{language}
{code}
```

Return JSON:
{
  "refactoredCode": "improved version",
  "changes": [
    {
      "type": "extract method|rename|simplify",
      "reason": "Why this change",
      "before": "old code",
      "after": "new code"
    }
  ],
  "impact": "low|medium|high"
}""",

    "securityScan": """
Analyze for security vulnerabilities:

```{language}
{code}
```

Return a JSON array of security issues:
[{
  "vulnerability": "SQL Injection|XSS|etc",
  "severity": "critical|high|medium|low",
  "location": "line number or function",
  "description": "detailed explanation",
  "exploitScenario": "how it could be exploited",
  "fix": "how to fix it",
  "cweId": "CWE number if applicable"
}]

Return [] if no issues are found.""",

    "meetingSummary": """
Analyze this meeting transcript and provide a comprehensive summary:

Meeting: {title}
Date: {date}
Participants: {participants}

Transcript:
{transcript}

Generate a structured summary as JSON:
{
  "executiveSummary": "2-3 sentence overview",
  "keyPoints": ["point1", "point2", "point3"],
  "decisions": ["decision1", "decision2"],
  "nextSteps": ["step1", "step2"],
  "questions": ["question1"],
  "blockers": ["blocker1"]
}""",

    "actionItems": """
Extract all action items from this transcript:

{transcript}

For each action item, identify:
- What needs to be done
- Who is responsible (if mentioned)
- When it's due (if mentioned)
- Priority level

Return a JSON array:
[{
  "action": "Description of action",
  "owner": "Person name or null",
  "dueDate": "Date or null",
  "priority": "high|medium|low",
  "context": "Brief context"
}]""",

    "meetingReport": """
Create a professional meeting report:

{summary_data}

Generate a well-formatted markdown report with sections:
- Meeting Overview
- Executive Summary
- Key Discussion Points
- Decisions Made
- Action Items (table format)
- Next Steps
- Open Questions & Blockers

Make it professional and ready to share.""",
}
