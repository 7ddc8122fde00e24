"""
LLM call and response-recovery core for the codesplit file splitter.

Sends prompts to a remote model service and turns loosely structured
replies into data the splitter can act on:
- Resilient calls (relay or direct SDK transport, retry with backoff, deadline)
- Tolerant extraction of filename plans, source/test pairs and code blocks
- Optional capture of prompt/response exchanges for offline inspection

Architecture: asyncio caller + httpx/anthropic transports + pure extraction functions
"""

__version__ = "0.1.0"
