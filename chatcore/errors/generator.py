"""Response generator failures."""


class GeneratorError(Exception):
    """Raised when the completion API call fails or returns garbage.

    Never reported to chat clients; the reply task logs it and emits the
    closing typing indicator instead.
    """


__all__ = ["GeneratorError"]
