# LCEN FILE ENCRYPTION ENGINE ->

import os as _os_module
from dataclasses import dataclass as _dataclass

from .errors import AuthenticationOrCorruptionError, FormatError, ResourceError


@_dataclass(frozen=True)
class DecryptionInfo:
    """Header fields of an LCEN container, read without touching the ciphertext."""

    extension: str
    iv: bytes


class lcenc:
    import contextlib
    import pathlib
    import tempfile
    import typing
    import os
    from cryptography.hazmat.primitives import hashes, hmac, padding
    from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

    DecryptionInfo = DecryptionInfo
    FormatError = FormatError
    AuthenticationOrCorruptionError = AuthenticationOrCorruptionError
    ResourceError = ResourceError

    ENGINE_VERSION = "1.0.0"
    MAGIC = b"LCEN"
    EXT_LEN_MAX = 255
    IV_LEN = 16
    KEY_LEN = 32
    BLOCK_BITS = 128
    HEADER_FIXED_LEN = len(MAGIC) + 1 + IV_LEN
    FILE_SUFFIX = ".lcenc"
    TEMP_PREFIX = ".lcenc-"
    STREAM_CHUNK_SIZE = 1 << 20  # 1 MiB streaming blocks
    CHUNK_SIZE_ENV = "LCENC_CHUNK_SIZE"

    @staticmethod
    def _env_int(name: str) -> "lcenc.typing.Optional[int]":
        value = _os_module.getenv(name)
        if not value:
            return None
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            return None
        if parsed <= 0:
            return None
        return parsed

    @staticmethod
    def _resolve_chunk_size(chunk_size: "int | None") -> int:
        if chunk_size is not None:
            return max(1, int(chunk_size))
        return lcenc._env_int(lcenc.CHUNK_SIZE_ENV) or lcenc.STREAM_CHUNK_SIZE

    @staticmethod
    def _coerce_password_bytes(
        password: "lcenc.typing.Union[str, bytes, bytearray, memoryview]"
    ) -> bytes:
        if isinstance(password, str):
            return password.encode("utf-8")
        if isinstance(password, (bytes, bytearray, memoryview)):
            return bytes(password)
        raise TypeError(f"Unsupported password type: {type(password)!r}")

    # --- raw I/O ------------------------------------------------------------

    @staticmethod
    def _read(stream: "lcenc.typing.BinaryIO", size: int) -> bytes:
        try:
            return stream.read(size)
        except ResourceError:
            raise
        except (OSError, ValueError) as exc:
            raise ResourceError(f"Failed to read input: {exc}") from exc

    @staticmethod
    def _write(stream: "lcenc.typing.BinaryIO", data: bytes) -> None:
        try:
            stream.write(data)
        except ResourceError:
            raise
        except (OSError, ValueError) as exc:
            raise ResourceError(f"Failed to write output: {exc}") from exc

    @staticmethod
    def _flush(stream: "lcenc.typing.BinaryIO") -> None:
        flush = getattr(stream, "flush", None)
        if flush is None:
            return
        try:
            flush()
        except (OSError, ValueError) as exc:
            raise ResourceError(f"Failed to flush output: {exc}") from exc

    @staticmethod
    def _read_exact(stream: "lcenc.typing.BinaryIO", size: int) -> bytes:
        # read() may legally return fewer bytes than asked for
        if size <= 0:
            return b""
        out = bytearray()
        while len(out) < size:
            chunk = lcenc._read(stream, size - len(out))
            if not chunk:
                break
            out.extend(chunk)
        return bytes(out)

    @staticmethod
    def _open(path: "lcenc.pathlib.Path", mode: str):
        try:
            return open(path, mode)
        except OSError as exc:
            raise ResourceError(f"Cannot open {path}: {exc}") from exc

    # --- key derivation -----------------------------------------------------

    @staticmethod
    def generate_iv() -> bytes:
        return lcenc.os.urandom(lcenc.IV_LEN)

    @staticmethod
    def derive_key(
        password: "lcenc.typing.Union[str, bytes, bytearray, memoryview]",
        iv: bytes
    ) -> bytes:
        """
        Derive the AES-256 key for one container.

        The IV is the HMAC-SHA256 key and the password is the message. This
        ordering is what the JVM and .NET implementations do, so it must not
        be swapped.
        """
        iv = bytes(iv)
        if len(iv) != lcenc.IV_LEN:
            raise ValueError(f"IV must be {lcenc.IV_LEN} bytes, got {len(iv)}")
        mac = lcenc.hmac.HMAC(iv, lcenc.hashes.SHA256())
        mac.update(lcenc._coerce_password_bytes(password))
        return mac.finalize()

    # --- header codec -------------------------------------------------------

    @staticmethod
    def extension_of(name: "lcenc.typing.Union[str, _os_module.PathLike]") -> str:
        base = lcenc.pathlib.PurePath(lcenc.os.fspath(name)).name
        _, dot, extension = base.rpartition(".")
        return extension if dot else ""

    @staticmethod
    def header_size(extension: str) -> int:
        return lcenc.HEADER_FIXED_LEN + len(extension.encode("utf-8"))

    @staticmethod
    def write_header(dest: "lcenc.typing.BinaryIO", extension: str, iv: bytes) -> None:
        ext_bytes = extension.encode("utf-8")
        if len(ext_bytes) > lcenc.EXT_LEN_MAX:
            raise ValueError(
                f"Extension is {len(ext_bytes)} bytes in UTF-8; at most {lcenc.EXT_LEN_MAX} fit in the header"
            )
        if len(iv) != lcenc.IV_LEN:
            raise ValueError(f"IV must be {lcenc.IV_LEN} bytes, got {len(iv)}")
        header = bytearray()
        header += lcenc.MAGIC
        header.append(len(ext_bytes))
        header += ext_bytes
        header += iv
        lcenc._write(dest, bytes(header))

    @staticmethod
    def read_header(source: "lcenc.typing.BinaryIO") -> DecryptionInfo:
        magic = lcenc._read_exact(source, len(lcenc.MAGIC))
        if len(magic) < len(lcenc.MAGIC):
            raise FormatError("Invalid file format: too short for an LCEN header")
        if magic != lcenc.MAGIC:
            raise FormatError("Invalid file format: magic number mismatch")
        length = lcenc._read_exact(source, 1)
        if not length:
            raise FormatError("File is corrupted: cannot read extension length")
        ext_len = length[0]
        ext_bytes = lcenc._read_exact(source, ext_len)
        if len(ext_bytes) != ext_len:
            raise FormatError("File is corrupted: extension data is incomplete")
        try:
            extension = ext_bytes.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FormatError("File is corrupted: extension is not valid UTF-8") from exc
        iv = lcenc._read_exact(source, lcenc.IV_LEN)
        if len(iv) != lcenc.IV_LEN:
            raise FormatError("File is corrupted: IV data is incomplete")
        return DecryptionInfo(extension, iv)

    @staticmethod
    def peek_header(source: "lcenc.typing.BinaryIO") -> DecryptionInfo:
        """
        Read only the header of an LCEN stream, then close the stream.

        The ciphertext is left unread; open the resource again to decrypt it.
        """
        with lcenc.contextlib.closing(source):
            return lcenc.read_header(source)

    # --- cipher pipeline ----------------------------------------------------

    class _CipherSink:
        """Pushes chunks through one AES-256-CBC/PKCS#7 session into a writer."""

        def __init__(self, dest, key: bytes, iv: bytes, *, decrypt: bool = False):
            cipher = lcenc.Cipher(lcenc.algorithms.AES(key), lcenc.modes.CBC(iv))
            self._dest = dest
            self._decrypt = decrypt
            if decrypt:
                self._context = cipher.decryptor()
                self._padding = lcenc.padding.PKCS7(lcenc.BLOCK_BITS).unpadder()
            else:
                self._context = cipher.encryptor()
                self._padding = lcenc.padding.PKCS7(lcenc.BLOCK_BITS).padder()
            self._finalized = False
            self.written = 0

        def _guard(self, step, *args) -> bytes:
            try:
                return step(*args)
            except ValueError as exc:
                if not self._decrypt:
                    raise
                raise AuthenticationOrCorruptionError(
                    "Decryption failed: wrong password or corrupted file"
                ) from exc

        def _transform(self, data: bytes) -> bytes:
            if self._decrypt:
                return self._padding.update(self._context.update(data))
            return self._context.update(self._padding.update(data))

        def _tail(self) -> bytes:
            if self._decrypt:
                plain = self._context.finalize()
                return self._padding.update(plain) + self._padding.finalize()
            return self._context.update(self._padding.finalize()) + self._context.finalize()

        def _emit(self, data: bytes) -> None:
            if data:
                lcenc._write(self._dest, data)
                self.written += len(data)

        def write(self, data: bytes) -> None:
            if self._finalized:
                raise ValueError("Cipher session already finalized")
            self._emit(self._guard(self._transform, data))

        def finalize(self) -> int:
            # the padded last block only exists after this call
            if self._finalized:
                raise ValueError("Cipher session already finalized")
            self._finalized = True
            self._emit(self._guard(self._tail))
            lcenc._flush(self._dest)
            return self.written

    @staticmethod
    def _pump(source, sink: "lcenc._CipherSink", chunk_size: int) -> int:
        while True:
            buf = lcenc._read(source, chunk_size)
            if not buf:
                break
            sink.write(buf)
        return sink.finalize()

    @staticmethod
    def encrypt_stream(
        source,
        dest,
        password: "lcenc.typing.Union[str, bytes, bytearray, memoryview]",
        original_name: "lcenc.typing.Union[str, _os_module.PathLike]",
        *,
        chunk_size: "int | None" = None,
        close: bool = False
    ) -> None:
        chunk = lcenc._resolve_chunk_size(chunk_size)
        with lcenc.contextlib.ExitStack() as stack:
            if close:
                stack.callback(source.close)
                stack.callback(dest.close)
            iv = lcenc.generate_iv()
            key = lcenc.derive_key(password, iv)
            lcenc.write_header(dest, lcenc.extension_of(original_name), iv)
            lcenc._pump(source, lcenc._CipherSink(dest, key, iv), chunk)

    @staticmethod
    def decrypt_stream(
        source,
        dest,
        password: "lcenc.typing.Union[str, bytes, bytearray, memoryview]",
        *,
        chunk_size: "int | None" = None,
        close: bool = False
    ) -> str:
        """
        Decrypt an LCEN stream into ``dest`` and return the stored extension.

        CBC with PKCS#7 has no integrity tag: a wrong password is detected
        through invalid padding, which a wrong key still produces by chance
        about once in 256 tries, yielding garbage output without an error.
        """
        chunk = lcenc._resolve_chunk_size(chunk_size)
        with lcenc.contextlib.ExitStack() as stack:
            if close:
                stack.callback(source.close)
                stack.callback(dest.close)
            info = lcenc.read_header(source)
            key = lcenc.derive_key(password, info.iv)
            lcenc._pump(source, lcenc._CipherSink(dest, key, info.iv, decrypt=True), chunk)
            return info.extension

    # --- file helpers -------------------------------------------------------

    @staticmethod
    def is_encrypted_name(name: "lcenc.typing.Union[str, _os_module.PathLike]") -> bool:
        return lcenc.os.fspath(name).lower().endswith(lcenc.FILE_SUFFIX)

    @staticmethod
    def encrypted_name(name: str) -> str:
        stem, dot, _ = name.rpartition(".")
        return f"{stem if dot else name}{lcenc.FILE_SUFFIX}"

    @staticmethod
    def decrypted_name(name: str, extension: str) -> str:
        if any(sep in extension for sep in ("/", "\\", "\x00")):
            raise FormatError(f"Stored extension {extension!r} is not a safe file name suffix")
        base = name[:-len(lcenc.FILE_SUFFIX)] if lcenc.is_encrypted_name(name) else name
        return f"{base}.{extension}".rstrip(".")

    @staticmethod
    def _require_password(password) -> None:
        if not password:
            raise ValueError("Password required")

    @staticmethod
    def _same_file(a: "lcenc.pathlib.Path", b: "lcenc.pathlib.Path") -> bool:
        return a.expanduser().resolve() == b.expanduser().resolve()

    @staticmethod
    def _remove_quietly(path: str) -> None:
        try:
            lcenc.os.remove(path)
        except FileNotFoundError:
            pass

    @staticmethod
    def _run_to_temp(directory: "lcenc.pathlib.Path", operation) -> "lcenc.typing.Tuple[str, object]":
        try:
            tmp = lcenc.tempfile.NamedTemporaryFile(
                "w+b",
                dir=directory,
                prefix=lcenc.TEMP_PREFIX,
                suffix=".tmp",
                delete=False
            )
        except OSError as exc:
            raise ResourceError(f"Cannot create output in {directory}: {exc}") from exc
        try:
            with tmp:
                result = operation(tmp)
        except BaseException:
            lcenc._remove_quietly(tmp.name)
            raise
        return tmp.name, result

    @staticmethod
    def _commit(tmp_path: str, target: "lcenc.pathlib.Path") -> None:
        try:
            lcenc.os.replace(tmp_path, target)
        except OSError as exc:
            lcenc._remove_quietly(tmp_path)
            raise ResourceError(f"Cannot write {target}: {exc}") from exc

    @staticmethod
    def encrypt_file(
        path: "lcenc.typing.Union[str, _os_module.PathLike]",
        password: "lcenc.typing.Union[str, bytes]",
        output: "lcenc.typing.Union[str, _os_module.PathLike, None]" = None,
        *,
        chunk_size: "int | None" = None
    ) -> "lcenc.pathlib.Path":
        lcenc._require_password(password)
        src = lcenc.pathlib.Path(path)
        target = lcenc.pathlib.Path(output) if output else src.with_name(lcenc.encrypted_name(src.name))
        if lcenc._same_file(src, target):
            raise ValueError(f"Refusing to overwrite input file {src}")
        with lcenc._open(src, "rb") as source:
            tmp_path, _ = lcenc._run_to_temp(
                target.parent,
                lambda handle: lcenc.encrypt_stream(source, handle, password, src.name, chunk_size=chunk_size)
            )
        lcenc._commit(tmp_path, target)
        return target

    @staticmethod
    def decrypt_file(
        path: "lcenc.typing.Union[str, _os_module.PathLike]",
        password: "lcenc.typing.Union[str, bytes]",
        output: "lcenc.typing.Union[str, _os_module.PathLike, None]" = None,
        *,
        chunk_size: "int | None" = None
    ) -> "lcenc.pathlib.Path":
        lcenc._require_password(password)
        src = lcenc.pathlib.Path(path)
        target = lcenc.pathlib.Path(output) if output else None
        directory = target.parent if target is not None else src.parent
        with lcenc._open(src, "rb") as source:
            tmp_path, extension = lcenc._run_to_temp(
                directory,
                lambda handle: lcenc.decrypt_stream(source, handle, password, chunk_size=chunk_size)
            )
        try:
            if target is None:
                target = src.with_name(lcenc.decrypted_name(src.name, extension))
            if lcenc._same_file(src, target):
                raise ValueError(f"Refusing to overwrite input file {src}")
        except BaseException:
            lcenc._remove_quietly(tmp_path)
            raise
        lcenc._commit(tmp_path, target)
        return target

    @staticmethod
    def process_file(
        path: "lcenc.typing.Union[str, _os_module.PathLike]",
        password: "lcenc.typing.Union[str, bytes]",
        output: "lcenc.typing.Union[str, _os_module.PathLike, None]" = None,
        *,
        chunk_size: "int | None" = None
    ) -> "lcenc.pathlib.Path":
        if lcenc.is_encrypted_name(path):
            return lcenc.decrypt_file(path, password, output, chunk_size=chunk_size)
        return lcenc.encrypt_file(path, password, output, chunk_size=chunk_size)

    @staticmethod
    def peek_file(path: "lcenc.typing.Union[str, _os_module.PathLike]") -> DecryptionInfo:
        return lcenc.peek_header(lcenc._open(lcenc.pathlib.Path(path), "rb"))
