"""
Types layer - the request/response data model of the Messages API.

- ContentBlock and Text for message content
- Role, Message and MessageRequest for conversation turns
- MessageResponse, StopReason and Usage for results
- Model and Cost for the model catalogue
"""

from claude_client.types.content import CacheControl, ContentBlock, Text
from claude_client.types.message import (
    Message,
    MessageRequest,
    Metadata,
    Role,
    SystemPrompt,
)
from claude_client.types.model import ZERO_COST, Cost, Model, ModelSpec, find_spec
from claude_client.types.response import MessageResponse, StopReason, Usage

__all__ = [
    "CacheControl",
    "ContentBlock",
    "Cost",
    "Message",
    "MessageRequest",
    "MessageResponse",
    "Metadata",
    "Model",
    "ModelSpec",
    "Role",
    "StopReason",
    "SystemPrompt",
    "Text",
    "Usage",
    "ZERO_COST",
    "find_spec",
]
