class BaseProviderException(Exception):
    pass
