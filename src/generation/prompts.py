"""
Prompts for the two generation gateways.

Each artifact has a fixed system prompt and a user prompt template that
embeds the candidate's resume and the target job description verbatim.
"""

from typing import Tuple

from src.common.types import ArtifactKind


RESUME_SYSTEM_PROMPT = (
    "You are a helpful assistant that writes high-quality, job-tailored resumes "
    "for software and tech roles."
)

RESUME_USER_PROMPT_TEMPLATE = """
You are an expert technical recruiter and resume writer.

I will give you:
1) A candidate's current resume
2) A specific job description

Your task:
- Rewrite and improve the resume content so it is tailored specifically to the job description given.
- Focus on clear bullet points with strong action verbs and measurable impact.
- Include relevant keywords from the job description where it makes sense.
- Keep it concise and professional.
- Return the result as plain text with sections like "Summary", "Experience", "Skills".

Candidate resume:
{resume}

Job description:
{job_description}
"""


COVER_LETTER_SYSTEM_PROMPT = (
    "You write concise, effective cover letters tailored to specific roles."
)

COVER_LETTER_USER_PROMPT_TEMPLATE = """
You are an expert career coach and cover letter writer.

I will give you:
1) A candidate's resume
2) A specific job description

Your task:
- Write a tailored cover letter for this job.
- Use a professional, confident tone.
- Make it 3-5 short paragraphs.
- Reference 2-3 concrete experiences or skills from the resume.
- Avoid generic buzzwords and keep it specific to the job.

Return only the final cover letter text, no explanations.

Candidate resume:
{resume}

Job description:
{job_description}
"""


_PROMPTS = {
    ArtifactKind.RESUME: (RESUME_SYSTEM_PROMPT, RESUME_USER_PROMPT_TEMPLATE),
    ArtifactKind.COVER: (COVER_LETTER_SYSTEM_PROMPT, COVER_LETTER_USER_PROMPT_TEMPLATE),
}


def format_prompt(kind: ArtifactKind, resume: str, job_description: str) -> Tuple[str, str]:
    """
    Build the (system, user) prompt pair for one artifact.

    Inputs are inserted verbatim; no trimming or escaping is applied.
    ``str.format`` is only applied to the template, so braces inside the
    resume or job description are left untouched.
    """
    system_prompt, template = _PROMPTS[ArtifactKind(kind)]
    user_prompt = template.format(resume=resume, job_description=job_description)
    return system_prompt, user_prompt
