class AletheaError(Exception):
    """Base class for errors raised by this package."""


class NewsFetchError(AletheaError):
    """Headlines could not be loaded from the news API."""


class NoArticlesFound(NewsFetchError):
    pass


class ClaimSearchError(AletheaError):
    """The fact-check API call failed or returned something unreadable."""


class ArticleNotFound(AletheaError):
    pass


class VerificationInProgress(AletheaError):
    pass
