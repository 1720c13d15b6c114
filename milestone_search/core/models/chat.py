"""Chat domain models."""
from dataclasses import dataclass


@dataclass
class ChatMessage:
    """Chat message."""
    role: str  # "user" | "assistant" | "system"
    content: str

    @classmethod
    def from_dict(cls, data: dict) -> "ChatMessage":
        return cls(role=data["role"], content=data.get("content") or "")
