from __future__ import annotations

from typing import Optional

from .models import AppSettings


SYSTEM_INSTRUCTION = """
You are an expert Academic Mentor and Study Guide Creator, inspired by the values of "Vidya" (Knowledge) and "Purusharth" (Hard Work).

**Role & Tone:**
- Tone: Professional, Encouraging, Precise.
- Values: Integrity, Clarity, and Depth.

**Tasks:**
1. **Content Extraction**: Identify all questions from the input PDF.
2. **Comprehensive Solutions**: Provide accurate, step-by-step solutions.
3. **Concept Roadmap (MANDATORY)**: At the end, create a section "## 🗺️ Concept Roadmap" showing the flow of topics.
4. **Formatting**:
   - **Math**: Use LaTeX ($$ ... $$ for block, $ ... $ for inline).
   - **Structure**: Clear Headers (##).
   - **Tables**: Markdown tables for comparisons.

**Output Structure:**
- **Title**
- **Study Plan Summary**
- **Questions & Answers**
- **Concept Roadmap**

Do not include conversational filler.
"""

BASE_INSTRUCTION = (
    "Generate a comprehensive study guide, solution key, and concept roadmap "
    "for the questions in this PDF. Use LaTeX for all math."
)

DEPTH_DIRECTIVES = {
    "concise": "- DEPTH: Concise. Focus on key points and direct answers. Avoid fluff.",
    "detailed": "- DEPTH: Detailed. Provide in-depth explanations, background context, and step-by-step derivations.",
}

LANGUAGE_DIRECTIVES = {
    "hinglish": (
        "- LANGUAGE: Use English for technical terms but explain concepts using simple analogies "
        "or occasional Hindi/Gujarati context where helpful for Indian students (Hinglish style)."
    ),
}

FOCUS_DIRECTIVES = {
    "exam": "- FOCUS: Exam Preparation. Highlight potential exam questions, common pitfalls, and marking scheme tips.",
    "concept": "- FOCUS: Concept Mastery. Focus on deep understanding, real-world applications, and connecting dots between topics.",
}


def build_prompt(
    instruction: str = BASE_INSTRUCTION,
    settings: Optional[AppSettings] = None,
    custom_instructions: Optional[str] = None,
) -> str:
    """Merge the document instruction, study settings and the user's own request.

    Directives always appear in the order depth, language, focus. The custom
    instruction is the student's own text and is quoted verbatim.
    """

    prompt = instruction

    if settings is not None:
        lines = ["", "", "CONFIGURATION:"]
        lines.append(DEPTH_DIRECTIVES.get(settings.depth, DEPTH_DIRECTIVES["detailed"]))
        language = LANGUAGE_DIRECTIVES.get(settings.language)
        if language:
            lines.append(language)
        lines.append(FOCUS_DIRECTIVES.get(settings.focus, FOCUS_DIRECTIVES["concept"]))
        prompt += "\n".join(lines)

    if custom_instructions and custom_instructions.strip():
        prompt += f'\n\nUSER SPECIFIC INSTRUCTIONS: "{custom_instructions}".'

    return prompt
