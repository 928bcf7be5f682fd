"""
Core functionality for voice-tasks.

This package contains the main logic for:
- Keyword lexicons and first-match lookups
- Task-creation utterance interpretation
- Query interpretation and filter application
- Configuration and debug tracing
"""
