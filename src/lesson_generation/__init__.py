"""
Lesson Generation Layer for the learning-path application.

Turns a topic into structured study material:
- Module lists (5-step learning paths)
- Lesson content with sections, key points and code examples
- Flashcard decks and quizzes
- Free-form tutor chat replies

Architecture: FastAPI surface + Gemini inference with model fallback,
payload recovery and per-operation retry/placeholder policy
"""

__version__ = "0.1.0"
