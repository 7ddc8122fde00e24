"""
Integration tests for codesplit.

Test components together against a real model relay:
- Resilient caller (real calls through LLM_ENDPOINT, skipped when unreachable)
- Prompt builder -> caller -> extraction round trips
- Exchange capture of real replies
"""
