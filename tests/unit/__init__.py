"""
Unit tests for codesplit.

Test individual components in isolation:
- Data models (invariants, validation, error mapping)
- Transports (relay wire format via httpx.MockTransport, SDK errors via mocks)
- Resilient caller (retry decisions, backoff, deadline)
- Extraction (filename plans, source/test pairs, fence stripping)
- Exchange recorder, prompt builder, settings, logging
"""
