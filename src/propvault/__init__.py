from ._version import __version__
from .config import EncryptedPropertiesSource, PBEStringEncryptor

__all__ = ["__version__", "EncryptedPropertiesSource", "PBEStringEncryptor"]
