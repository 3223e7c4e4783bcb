"""What the summary and Q&A code needs from a chat model."""

from typing import Protocol, TypedDict, runtime_checkable


class Message(TypedDict):
    role: str  # "system" | "user" | "assistant"
    content: str


def build_messages(user: str, system: str | None = None) -> list[Message]:
    """[system?, user] message list for a single-turn request."""
    messages: list[Message] = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": user})
    return messages


@runtime_checkable
class LLMBackend(Protocol):
    """
    Chat completion provider. explain_section() and answer_question() accept any object
    with this shape, so tests and other providers can stand in for OpenRouter.
    """

    def complete(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ) -> str:
        """Return the assistant reply text ('' when the reply has no content). Errors propagate."""
        ...

    @property
    def name(self) -> str:
        ...
