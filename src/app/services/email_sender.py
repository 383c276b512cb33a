from abc import ABC, abstractmethod


class IEmailSender(ABC):
    """Outbound email transport - application layer"""

    @abstractmethod
    async def send(self, to: str, subject: str, html: str, text: str) -> None:
        """
        Deliver one message.

        Implementations apply their own retry policy and raise
        EmailDispatchError once they give up.
        """
        pass
