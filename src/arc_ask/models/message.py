class Message:
    """Standard message format for all LLM clients"""

    def __init__(self, role: str, content: str):
        self.role = role
        self.content = content

    @classmethod
    def from_dict(cls, data: dict) -> 'Message':
        """Create a Message from a dictionary"""
        return cls(data.get("role", "user"), str(data.get("content", "")))

    def to_api_format(self) -> dict:
        """Convert to API-compatible format"""
        return {"role": self.role, "content": self.content}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return self.role == other.role and self.content == other.content

    def __repr__(self) -> str:
        return f"Message(role={self.role!r}, content={self.content[:40]!r})"


def build_messages(system: str, user: str) -> list[Message]:
    """System message (when non-empty) followed by the user message."""
    messages = []
    if system:
        messages.append(Message("system", system))
    messages.append(Message("user", user))
    return messages
