"""Raised when the log store rejects or fails a search.
"""


class LogSearchError(Exception):
    def __init__(self, message, status_code=None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)
