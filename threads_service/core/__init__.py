"""
Core request handling: credentials, results and the error taxonomy.
"""

from .credentials import CredentialContext, get_credentials
from .errors import ErrorKind, ServiceError
from .result import Err, Ok, RemoteFailure, Result

__all__ = [
    'CredentialContext',
    'get_credentials',
    'ErrorKind',
    'ServiceError',
    'Err',
    'Ok',
    'RemoteFailure',
    'Result',
]
