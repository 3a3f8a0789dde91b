"""
Configuration errors. Ordinary scan input never raises; only a broken term dictionary does.
"""


class TermDictionaryError(ValueError):
    """Term dictionary file is missing, unreadable, or violates the term invariants."""

    def __init__(self, message: str, source: str = ""):
        self.source = source
        super().__init__(f"{message} ({source})" if source else message)
