"""promptgate - Server-side gateway and composer for a generative-AI API."""

__version__ = "0.1.0"
