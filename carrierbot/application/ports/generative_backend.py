from abc import ABC, abstractmethod


class GenerativeBackendPort(ABC):
    @abstractmethod
    async def generate(self, prompt: str, model: str) -> str:
        """
        Produce text for a prompt with the given model identifier.

        Raises:
            GenerativeBackendError subclasses for classified provider failures.
            Any other exception for opaque failures (classified by message).
        """
        raise NotImplementedError
