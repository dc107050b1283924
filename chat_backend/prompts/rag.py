"""Prompt used when answering with retrieved document context."""

RAG_HUMAN_PROMPT = (
    "Based on the following document context, please answer the question:\n\n"
    "CONTEXT:\n{context}\n\n"
    "QUESTION:\n{question}"
)

# Placed between retrieved chunks when building the context block
CONTEXT_DELIMITER = "\n\n---\n\n"
