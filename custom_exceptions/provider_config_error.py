"""Raised when the completion-service provider settings cannot be resolved.
"""


class ProviderConfigError(Exception):
    def __init__(self, message):
        self.message = message
        super().__init__(self.message)
