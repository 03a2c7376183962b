"""File-oriented convenience wrappers."""

from .main import lcenc


def encrypt_file(path, password: str | bytes, output=None, *, chunk_size: int | None = None):
    return lcenc.encrypt_file(path, password, output, chunk_size=chunk_size)


def decrypt_file(path, password: str | bytes, output=None, *, chunk_size: int | None = None):
    return lcenc.decrypt_file(path, password, output, chunk_size=chunk_size)


def process_file(path, password: str | bytes, output=None, *, chunk_size: int | None = None):
    return lcenc.process_file(path, password, output, chunk_size=chunk_size)


def peek_file(path):
    return lcenc.peek_file(path)


def encrypted_name(name: str) -> str:
    return lcenc.encrypted_name(name)


def decrypted_name(name: str, extension: str) -> str:
    return lcenc.decrypted_name(name, extension)
