"""
Unit tests for the Lesson Generation Layer.

Test individual components in isolation:
- Prompt builder (templates, transport directive, chat prompt)
- Model fallback cascade and error classification
- Gemini client (httpx MockTransport)
- Payload decoder, sanitizers and content validator
- Retry engine, policies and placeholders
- Service operations end to end with a scripted client
"""
