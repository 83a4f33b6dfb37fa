"""System prompts and prompt builders for the analysis, condensation and evaluation stages."""

ANALYZER_SYSTEM = """
You are an expert behavioral-interview coach. You read a candidate's resume and a job
description and decide which leadership principles the role will probe hardest.
Always respond with valid JSON only.
"""

CONDENSER_SYSTEM = """
You are a resume extraction expert. You extract only the resume content that helps a
candidate answer one specific interview question. You never invent facts.
"""

EVALUATOR_SYSTEM = """
You are an experienced HR recruiting interviewer running a behavioral interview.
You score answers with the STAR framework, ground every suggestion in the candidate's own
resume, and always respond with valid JSON only.
"""


def build_analysis_prompt(resume_text: str, job_text: str, catalog_titles: list,
                          principle_count: int, question_count: int) -> str:
    catalog = "\n".join(f"{i}. {t}" for i, t in enumerate(catalog_titles, start=1))
    return f"""
====================================================
TASK
====================================================
1. Pick the {principle_count} leadership principles most relevant to this role, chosen ONLY from
   the catalog below. Use the catalog titles exactly.
2. Give each a relevanceScore (integer 0-100) based on the job requirements. Scores do not
   need to add up to anything.
3. List 3 keyBehaviors per principle that the role needs.
4. Write {question_count} behavioral interview questions. Tag each with one of your
   {principle_count} principles and add STAR guidance: what to cover in each part, NOT a
   sample answer.

====================================================
LEADERSHIP PRINCIPLE CATALOG
====================================================
{catalog}

=== JOB DESCRIPTION ===
{job_text.strip()}

=== RESUME ===
{resume_text.strip()}

====================================================
OUTPUT (JSON only, this exact shape)
====================================================
{{
  "principles": [
    {{
      "id": "kebab-case-id",
      "title": "<catalog title>",
      "description": "<one sentence on what the principle means for this role>",
      "relevanceScore": 0,
      "keyBehaviors": ["<behavior>", "<behavior>", "<behavior>"]
    }}
  ],
  "questions": [
    {{
      "id": "q1",
      "principle": "<one of your principle titles>",
      "question": "<behavioral question>",
      "context": "<what kind of story to pick>",
      "starFramework": {{
        "situation": "<what context to set>",
        "task": "<what responsibility to state>",
        "action": "<what steps to describe>",
        "result": "<what outcome to quantify>"
      }}
    }}
  ]
}}
"""


def build_condense_prompt(resume_text: str, question_text: str, principle: str, max_words: int) -> str:
    return f"""Extract only the most relevant sections of this resume for answering the interview question below.

Question: {question_text.strip()}
Leadership Principle: {(principle or "").strip() or "Not specified"}

=== FULL RESUME ===
{resume_text.strip()}

====================================================
RULES
====================================================
1. Keep ONLY experiences, projects, skills and achievements that help answer this question
   and demonstrate this principle.
2. Copy facts verbatim: role titles, company names, dates and timeframes.
3. Preserve every number, percentage and concrete result in what you keep.
4. Do NOT add, infer or reword achievements. Extraction only.
5. Keep chronological order and enough context to tell where each item comes from.
6. Hard limit: {max_words} words. Prefer fewer, more relevant lines over coverage.

Return the condensed resume as plain text.
"""


def build_evaluation_prompt(question_text: str, transcript: str, condensed_resume: str,
                            job_text: str, principle: str) -> str:
    return f"""
You asked the candidate the question below and they answered it out loud. Analyse the answer
in the context of their resume and the job description using the STAR framework.

Question Asked: {question_text.strip()}
Leadership Principle: {principle.strip()}

=== CANDIDATE ANSWER (transcript) ===
{transcript.strip()}

=== CANDIDATE RESUME (relevant extract) ===
{condensed_resume.strip()}

=== JOB DESCRIPTION ===
{job_text.strip()}

====================================================
SECTIONS
====================================================
1) overallScore: integer 0-100 for the whole answer plus ONE line of feedback.
2) starAnalysis: score each part independently, integer 0-100, with specific feedback.
   - situation: is the context clear and are the stakes explicit?
   - task: is the objective and the candidate's ownership clear?
   - action: are the concrete steps the candidate personally took specific?
   - result: is the outcome quantified and is the durable impact shown?
3) suggestedAnswer: rewrite the answer as a model STAR answer. Each of the four parts must be
   a full, substantive paragraph built from facts in the resume extract (companies, numbers,
   dates). No generic filler and no empty parts.
4) jobAlignment: 3 to 5 bullets on why the suggested answer maps to the job description.

====================================================
OUTPUT (JSON only, this exact shape)
====================================================
{{
  "overallScore": {{"score": 0, "feedback": "<one line>"}},
  "starAnalysis": {{
    "situation": {{"score": 0, "feedback": "<text>"}},
    "task": {{"score": 0, "feedback": "<text>"}},
    "action": {{"score": 0, "feedback": "<text>"}},
    "result": {{"score": 0, "feedback": "<text>"}}
  }},
  "suggestedAnswer": {{
    "situation": "<paragraph>",
    "task": "<paragraph>",
    "action": "<paragraph>",
    "result": "<paragraph>"
  }},
  "jobAlignment": ["<bullet>", "<bullet>", "<bullet>"]
}}

Base every score and suggestion on this candidate's actual answer and resume.
"""


EVALUATION_RETRY_NOTE = """
IMPORTANT: your previous suggestedAnswer was too thin. Every STAR part (situation, task,
action, result) must be a full paragraph of at least {min_words} words using the candidate's
real resume facts.
"""
