from __future__ import annotations

import json
from typing import Dict, List, Sequence

from jobhunt.models.job import Job
from jobhunt.models.resume import Resume

RESUME_PARSE_SYSTEM_PROMPT = (
    "You are a resume parsing expert. Extract structured data from resume text. "
    "Return ONLY valid JSON, no markdown and no explanations."
)

RESUME_PARSE_USER_TEMPLATE = """Parse this resume and return JSON with this exact structure:
{{
  "fullName": "string",
  "email": "string",
  "phone": "string",
  "location": "string",
  "summary": "string",
  "skills": ["skill1", "skill2"],
  "experience": [
    {{
      "title": "string",
      "company": "string",
      "startDate": "YYYY-MM",
      "endDate": "YYYY-MM or null for current",
      "description": "string",
      "achievements": ["achievement1"]
    }}
  ],
  "education": [
    {{
      "degree": "string",
      "institution": "string",
      "graduationDate": "YYYY",
      "gpa": "string or null"
    }}
  ],
  "certifications": ["cert1", "cert2"]
}}

Use null for missing fields. Keep achievements concise and include all relevant skills.

Resume text:
{resume_text}"""

MATCH_SYSTEM_PROMPT = (
    "You are an expert resume reviewer and job matcher. "
    "You only credit a candidate with skills the resume gives evidence for. "
    "Return ONLY valid JSON."
)

MATCH_USER_TEMPLATE = """Analyze how well this candidate's resume matches the job.

RESUME:
{resume_text}

JOB TITLE: {title}
COMPANY: {company}
JOB DESCRIPTION:
{description}

JOB REQUIREMENTS:
{requirements}

Extract the important keywords and phrases from the job description. For each keyword:
- check if it appears in the resume (exact or similar terms);
- decide whether the candidate has the underlying skill even if the exact term is not used;
- decide whether the keyword could be truthfully added to the resume.

Return JSON:
{{
  "confidenceScore": 0-100,
  "matchedSkills": ["skill"],
  "missingSkills": ["skill"],
  "transferableSkills": ["skill they have that is similar to one required"],
  "keywordsDetected": [
    {{"term": "string", "inResume": false, "canAddTruthfully": true, "reasoning": "string"}}
  ],
  "strengths": ["3-5 reasons they are a good fit"],
  "gaps": ["1-3 areas that are missing or need emphasis"],
  "recommendation": "One sentence recommendation"
}}"""

TAILOR_SYSTEM_PROMPT = (
    "You are an expert resume writer specializing in honest, strategic optimization. "
    "Never invent skills, experience or achievements. Only reframe, reorder and "
    "reword existing content, and justify every change with evidence from the "
    "original resume. Return ONLY valid JSON."
)

TAILOR_USER_TEMPLATE = """Tailor this resume for the job below.

ORIGINAL RESUME:
{resume_text}

JOB TITLE: {title}
COMPANY: {company}
JOB DESCRIPTION: {description}
KEY REQUIREMENTS: {requirements}
KEYWORDS TO INTEGRATE (only if truthful): {keywords}

Rewrite the summary in the role's language where truthful, integrate keywords into
existing bullet points, put the most relevant experience first and move matching
skills to the top of the skills list. Mark keywords that cannot be applied honestly.

Return JSON:
{{
  "tailoredResume": {{
    "fullName": "", "email": "", "phone": "", "location": "", "summary": "",
    "skills": [], "experience": [], "education": []
  }},
  "changes": [
    {{"section": "string", "original": "string", "modified": "string",
      "type": "keyword-add | reorder | rephrase | emphasize",
      "explanation": "evidence from the original resume", "truthful": true}}
  ],
  "keywordsApplied": [
    {{"term": "string", "location": "string", "context": "string", "alreadyPresent": false}}
  ],
  "keywordsNotApplied": [{{"term": "string", "reason": "string"}}],
  "honestyScore": 0-100
}}"""

COVER_LETTER_USER_TEMPLATE = """Write a professional cover letter for this candidate applying to this job.

Candidate:
{resume_text}

Job:
Title: {title}
Company: {company}
Description: {description}

Keep it to 250-300 words in a professional tone. Highlight relevant experience and
skills with specific examples, show enthusiasm for the role and end with a call to
action. Return only the body of the letter (no subject line and no salutation)."""

_MAX_DESCRIPTION_CHARS = 8000


def resume_prompt_text(resume: Resume) -> str:
    """Flatten a stored resume profile into prompt text."""
    return "\n".join(
        [
            f"Name: {resume.full_name or 'N/A'}",
            f"Email: {resume.email or 'N/A'}",
            f"Phone: {resume.phone or 'N/A'}",
            f"Location: {resume.location or 'N/A'}",
            "",
            "Summary:",
            resume.summary or "N/A",
            "",
            "Skills:",
            json.dumps(resume.skills or [], ensure_ascii=False),
            "",
            "Experience:",
            json.dumps(resume.experience or [], ensure_ascii=False, indent=2),
            "",
            "Education:",
            json.dumps(resume.education or [], ensure_ascii=False, indent=2),
        ]
    )


def _job_fields(job: Job) -> Dict[str, str]:
    return {
        "title": job.title,
        "company": job.company,
        "description": (job.description or "")[:_MAX_DESCRIPTION_CHARS],
        "requirements": ", ".join(job.requirements or []) or "See description",
    }


def build_resume_parse_messages(resume_text: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": RESUME_PARSE_SYSTEM_PROMPT},
        {"role": "user", "content": RESUME_PARSE_USER_TEMPLATE.format(resume_text=resume_text)},
    ]


def build_match_messages(job: Job, resume: Resume) -> List[Dict[str, str]]:
    content = MATCH_USER_TEMPLATE.format(resume_text=resume_prompt_text(resume), **_job_fields(job))
    return [
        {"role": "system", "content": MATCH_SYSTEM_PROMPT},
        {"role": "user", "content": content},
    ]


def build_tailor_messages(job: Job, resume: Resume, keywords: Sequence[str]) -> List[Dict[str, str]]:
    content = TAILOR_USER_TEMPLATE.format(
        resume_text=resume_prompt_text(resume),
        keywords=", ".join(keywords) or "None given; use the job description",
        **_job_fields(job),
    )
    return [
        {"role": "system", "content": TAILOR_SYSTEM_PROMPT},
        {"role": "user", "content": content},
    ]


def build_cover_letter_messages(job: Job, resume: Resume) -> List[Dict[str, str]]:
    fields = _job_fields(job)
    content = COVER_LETTER_USER_TEMPLATE.format(
        resume_text=resume_prompt_text(resume),
        title=fields["title"],
        company=fields["company"],
        description=fields["description"],
    )
    return [{"role": "user", "content": content}]
