"""Stream-oriented convenience wrappers."""

from .main import lcenc


def encrypt(
    source,
    dest,
    password: str | bytes,
    original_name: str,
    *,
    chunk_size: int | None = None,
    close: bool = False,
) -> None:
    lcenc.encrypt_stream(
        source,
        dest,
        password,
        original_name,
        chunk_size=chunk_size,
        close=close,
    )


def decrypt(
    source,
    dest,
    password: str | bytes,
    *,
    chunk_size: int | None = None,
    close: bool = False,
) -> str:
    return lcenc.decrypt_stream(
        source,
        dest,
        password,
        chunk_size=chunk_size,
        close=close,
    )


def peek_header(source):
    return lcenc.peek_header(source)


def read_header(source):
    return lcenc.read_header(source)


def write_header(dest, extension: str, iv: bytes) -> None:
    lcenc.write_header(dest, extension, iv)


def derive_key(password: str | bytes, iv: bytes) -> bytes:
    return lcenc.derive_key(password, iv)
