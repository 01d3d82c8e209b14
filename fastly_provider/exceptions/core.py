from fastly_provider.exceptions.base import BaseProviderException


class SetDiffKeyException(BaseProviderException):
    pass


class SchemaValidationException(BaseProviderException):
    pass


class ResourceDataException(BaseProviderException):
    pass


class ConfigurationException(BaseProviderException):
    pass

