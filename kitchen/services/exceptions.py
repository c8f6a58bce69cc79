from __future__ import annotations


class ServiceError(RuntimeError):
    """Anything a collaborator adapter can raise; routes map these to 5xx."""


class UpstreamError(ServiceError):
    """Inventory or suggestion back-end unreachable, non-2xx, or {"success": false}."""


class LLMError(ServiceError):
    """OpenAI client could not be built or the completion call failed."""


class GapLookupFailure(ServiceError):
    """The shopping collaborator could not confirm missing ingredients.

    Recoverable: the recipe is left untouched and the user may retry.
    """
