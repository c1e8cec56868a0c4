"""Study Guider.

This package provides:
- PDF upload validation + page count
- Prompt assembly from study settings
- Study guide generation via Gemini (strong model with fast-model fallback)
- Audio narration via Gemini TTS
- Short explainer videos via Veo
- Markdown / DOCX / PDF export
- Local history of generated guides
"""
