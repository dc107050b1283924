"""Chat backend forwarding prompts to a hosted LLM with optional document retrieval."""
