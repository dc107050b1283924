"""LangChain pipelines used by the services."""

from .chat_chain_manager import ChatChainManager  # noqa: F401
