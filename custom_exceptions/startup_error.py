"""Raised by the lifespan hook when the startup task cannot prepare the service.
"""


class StartupError(Exception):
    def __init__(self, message, cause=None):
        self.message = message
        self.cause = cause
        super().__init__(self.message)
