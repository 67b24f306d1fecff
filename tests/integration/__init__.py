"""
Integration tests for the Lesson Generation Layer.

Test components together or against real external services:
- API endpoints (FastAPI TestClient, mocked Gemini client)
- Gemini client and service operations (real calls, marked with @pytest.mark.integration)
"""
