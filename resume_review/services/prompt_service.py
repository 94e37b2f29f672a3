"""
Prompt Service

Builds the prompts sent to the model. Pure functions, no I/O.
"""

import textwrap

SYSTEM_INSTRUCTION = "You are a senior specialist in tech resumes. Be direct and practical."

# Section headers the analysis prompt asks the model to return, in order
ANALYSIS_SECTIONS = (
    "Weaknesses",
    "What to improve",
    "ATS adjustments",
    "Suggested structure",
    "Tech-specific suggestions",
)

ANALYSIS_TEMPLATE = textwrap.dedent("""\
    You are a resume specialist for the technology field and an ATS expert.
    Analyze the resume below and answer in topics, using exactly these section headers:

    {sections}

    Text extracted from the resume:
    {resume}
""")

REWRITE_TEMPLATE = textwrap.dedent("""\
    You are a resume specialist for the technology field.

    Based on the original resume and the improvement suggestions below, produce a
    COMPLETE and IMPROVED version of the resume.

    IMPORTANT:
    - Keep ALL the information from the original resume
    - Apply ALL the suggested improvements
    - Produce the complete, finished resume, ready to use
    - Keep a professional, ATS-friendly format
    - Do not remove important information
    - Only improve and optimize what was suggested

    ORIGINAL RESUME:
    {resume}

    IMPROVEMENT SUGGESTIONS:
    {suggestions}

    Now write the complete improved resume:
""")


def _require(value: str, name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{name} must not be empty")
    return value.strip()


def build_analysis_prompt(extracted_text: str) -> str:
    resume = _require(extracted_text, "extracted_text")
    sections = "\n".join(f"- {section}" for section in ANALYSIS_SECTIONS)
    return ANALYSIS_TEMPLATE.format(sections=sections, resume=resume)


def build_rewrite_prompt(original_resume: str, prior_analysis: str) -> str:
    return REWRITE_TEMPLATE.format(
        resume=_require(original_resume, "original_resume"),
        suggestions=_require(prior_analysis, "prior_analysis"),
    )
