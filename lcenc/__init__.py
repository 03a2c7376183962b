from .main import *
from .engine import DecryptionInfo
from .errors import AuthenticationOrCorruptionError, FormatError, ResourceError
from .result import Failure, Result, Success, describe_failure, run_operation
from .api_streams import decrypt, derive_key, encrypt, peek_header, read_header, write_header
from .api_files import decrypt_file, decrypted_name, encrypt_file, encrypted_name, peek_file, process_file
from .version import __version__
