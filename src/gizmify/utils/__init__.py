from .redact import redact, redact_url

__all__ = [
    "redact",
    "redact_url",
]
