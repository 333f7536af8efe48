from .http import HttpAssistantClient
from .port import AssistantPort, AssistantRequest, AssistantVerdict

__all__ = [
    "AssistantPort",
    "AssistantRequest",
    "AssistantVerdict",
    "HttpAssistantClient",
]
