"""
Test suite for voice-tasks.

This package contains tests for:
- Lexicon tables, lookups and override files
- Date and time parsing
- Task-creation and query interpretation
- Configuration and debug tracing
- The command-line interface
"""
