"""Expose commonly used model classes at the package level.

Importing these classes here allows consumers to write concise imports like::

    from chat_backend.models import ChatResponse, PromptRequest, RagChunk
"""

from .chat_request import FileUploadRequest, PromptRequest  # noqa: F401
from .chat_response import ChatResponse  # noqa: F401
from .enums import ErrorCode, Persona  # noqa: F401
from .error_response import ErrorEnvelope  # noqa: F401
from .rag_chunk import RagChunk  # noqa: F401
