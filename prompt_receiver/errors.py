# prompt_receiver/errors.py
"""
Error taxonomy for the prompt receiver.

- InvalidInput: ingestion called with missing/blank prompt text (HTTP 400)
- UpstreamFailure: the completion API failed, timed out or answered garbage;
  recovered locally by the component generator
- "not found" is never raised: store lookups return None and the HTTP layer
  answers 404 with E_NOT_FOUND
"""

# Error codes (map to API error responses)
E_INVALID_INPUT = "E_INVALID_INPUT"
E_NOT_FOUND = "E_NOT_FOUND"
E_INVALID_ACTION = "E_INVALID_ACTION"
E_INTERNAL = "E_INTERNAL"


class InvalidInput(ValueError):
    """Prompt text missing or blank; the store is not touched."""


class UpstreamFailure(RuntimeError):
    """The completion API call did not produce usable text."""
