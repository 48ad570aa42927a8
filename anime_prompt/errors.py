"""Exception hierarchy shared by the prompt generator components."""

from __future__ import annotations

from typing import Optional


class AnimePromptError(RuntimeError):
    """Base class for every user-facing failure."""


# Argument errors --------------------------------------------------------------
class ArgumentError(AnimePromptError):
    """Command line arguments could not be resolved."""


class MissingValueError(ArgumentError):
    """A flag expecting a value was the last token."""

    def __init__(self, flag: str) -> None:
        self.flag = flag
        super().__init__(f"{flag} requires a value")


class NoPromptError(ArgumentError):
    """Neither a --prompt flag nor a positional keyword was supplied."""

    def __init__(self) -> None:
        super().__init__("no prompt provided; pass a keyword or --prompt TEXT")


# Credential errors ------------------------------------------------------------
class CredentialError(AnimePromptError):
    """The API credential could not be resolved or cached."""


class MissingCredentialError(CredentialError):
    def __init__(self, env_name: str) -> None:
        self.env_name = env_name
        super().__init__(
            f"API key not found. Provide it with --key or set the {env_name} environment variable"
        )


class CredentialPersistError(CredentialError):
    """Writing the credential cache failed. Never fatal on its own."""


# Generation errors ------------------------------------------------------------
class GenerationError(AnimePromptError):
    """The remote generation call did not produce a prompt."""

    def __init__(self, message: str, *, backend: Optional[str] = None) -> None:
        self.backend = backend
        prefix = f"[{backend}] " if backend else ""
        super().__init__(f"{prefix}{message}")


class NetworkError(GenerationError):
    pass


class ApiRejectedError(GenerationError):
    """Authentication, authorization or quota failure reported by the API."""


class EmptyResponseError(GenerationError):
    pass


class GenerationTimeoutError(GenerationError):
    pass


class BackendUnavailableError(GenerationError):
    """The requested backend is not registered (SDK missing or unknown name)."""
