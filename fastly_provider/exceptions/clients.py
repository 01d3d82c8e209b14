from fastly_provider.exceptions.base import BaseProviderException


class FastlyClientError(BaseProviderException):
    pass


class MissingInputFieldError(FastlyClientError):
    def __init__(self, field_name: str):
        super().__init__(f"Missing required input field: {field_name}")
