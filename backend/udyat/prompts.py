"""Canned assistant replies and prompt templates."""

GREETING = """Hello! 👋 I'm your AI resume assistant. I can help you:

* Create a professional resume from scratch
* Update existing resume sections
* Answer questions about resume writing
* Provide career advice and tips
* Review and improve your content

Would you like to create a new resume or have specific questions?"""

FIELD_PROMPTS = {
    "experience": """Please include:
* Your role and company
* Duration of employment
* Key responsibilities
* Notable achievements""",
    "education": """Please include:
* Degree and major
* Institution name
* Graduation year
* Relevant coursework""",
    "skills": """Please include:
* Technical skills
* Soft skills
* Tools and technologies
* Certifications""",
    "achievements": """Please include:
* Quantifiable results
* Awards and recognition
* Projects completed
* Impact made""",
    "objective": """Please include:
* Target position
* Career goals
* Value proposition
* Industry focus""",
}

# Lookup order matters: the first key contained in the question wins.
QUESTION_ANSWERS = {
    "format": """Here are some resume formatting best practices:

* Keep it to 1-2 pages
* Use clear headings and consistent formatting
* Include white space for readability
* Use bullet points for achievements
* Choose a professional font""",
    "skills": """When listing skills, remember to:

* Match skills to the job description
* Include both hard and soft skills
* Group skills by category
* Highlight proficiency levels
* Provide concrete examples""",
    "keywords": """To optimize your resume for ATS:

* Use industry-standard terms
* Include relevant technical skills
* Match keywords from job posting
* Use full terms before abbreviations
* Avoid graphics and custom fonts""",
}

SECTION_FORMAT_INSTRUCTIONS = """Format the response in markdown with:
- Clear section headings (##)
- Bullet points for achievements
- Keywords relevant to the industry
- Quantifiable results where possible
- Professional tone and language"""

GENERATION_ERROR = "Error: Failed to generate resume content. Please try again."

RESUME_ANALYSIS_PROMPT = """
You are a world-class career coach and resume analyst.
Given the following resume data, extract:
- A concise summary of what this resume is for (role, industry, seniority).
- A one-sentence value proposition for the candidate.
- 3-5 key highlights or achievements.
- The top 8-10 technical and soft skills, each with a strength percentage (0-100) and a short reason.
- The main segments of the resume (e.g. Experience, Projects) with a one-line description each.
- Work experience entries and education entries.
- A formatting assessment (score 0-100 and concrete feedback).
- Important keywords missing for the candidate's target role.
- Specific, actionable improvement suggestions.

Return ONLY a JSON object with this structure:
{{
    "summary": "string",
    "valueProposition": "string",
    "highlights": ["string"],
    "skills": [{{"name": "string", "percentage": 80, "reason": "string"}}],
    "segments": [{{"name": "string", "content": "string"}}],
    "experience": [{{"title": "string", "company": "string", "duration": "string", "highlights": ["string"]}}],
    "education": [{{"degree": "string", "institution": "string", "year": "string"}}],
    "formatting": {{"score": 75, "feedback": ["string"]}},
    "missingKeywords": ["string"],
    "improvementSuggestions": ["string"]
}}

Resume JSON:
{pdf_json}

Raw extracted text:
\"\"\"{raw_text}\"\"\"
"""

COVER_LETTER_PROMPT = """
You are a professional career assistant.
Given this candidate's resume summary: {summary}
Value proposition: {value_proposition}
Highlights: {highlights}
Skills: {skills}
Write a concise, tailored cover letter for the role "{role}" at "{company}". Make it professional, enthusiastic, and relevant to the job.
{job_instructions}
"""

COVER_LETTER_WITH_JD = """Align the letter with this job description, referencing the requirements the candidate meets:
\"\"\"{job_description}\"\"\""""

COVER_LETTER_GENERIC = "No job description was provided, so keep the letter general to the role and company."
