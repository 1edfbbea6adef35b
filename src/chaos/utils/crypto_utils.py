import logging
import secrets
import struct
from typing import Callable

from Crypto.Cipher import Salsa20

from chaos.config.config_chaos import *
from chaos.utils.Entry import bytes_to_b64, b64_to_bytes
from chaos.utils.errors import InvalidKeyLength, InvalidNonceLength
from chaos.utils.file_utils import FileSystem, LOCAL_FS

logger = logging.getLogger(__name__)

# Any callable returning n random bytes
RandomSource = Callable[[int], bytes]

# "expand 32-byte k"
SIGMA = (0x61707865, 0x3320646e, 0x79622d32, 0x6b206574)
MASK32 = 0xffffffff


def _rotl(v: int, c: int) -> int:
    return ((v << c) & MASK32) | (v >> (32 - c))

def _quarter_round(x: list, a: int, b: int, c: int, d: int) -> None:
    x[b] ^= _rotl((x[a] + x[d]) & MASK32, 7)
    x[c] ^= _rotl((x[b] + x[a]) & MASK32, 9)
    x[d] ^= _rotl((x[c] + x[b]) & MASK32, 13)
    x[a] ^= _rotl((x[d] + x[c]) & MASK32, 18)

def hsalsa20(key: bytes, nonce16: bytes) -> bytes:
    """
    HSalsa20 core: derive a 32-byte subkey from a key and a 16-byte nonce.

    This is the first half of XSalsa20. It runs the 20 Salsa20 rounds over
    the key and nonce without the final addition of the input state, and
    outputs words 0, 5, 10, 15, 6, 7, 8, 9.

    Args:
        key: 32-byte key.
        nonce16: First 16 bytes of the 24-byte XSalsa20 nonce.

    Returns:
        32-byte subkey for plain Salsa20.
    """
    k = struct.unpack("<8I", key)
    n = struct.unpack("<4I", nonce16)
    x = [
        SIGMA[0], k[0], k[1], k[2],
        k[3], SIGMA[1], n[0], n[1],
        n[2], n[3], SIGMA[2], k[4],
        k[5], k[6], k[7], SIGMA[3],
    ]

    for _ in range(10):
        # column round
        _quarter_round(x, 0, 4, 8, 12)
        _quarter_round(x, 5, 9, 13, 1)
        _quarter_round(x, 10, 14, 2, 6)
        _quarter_round(x, 15, 3, 7, 11)
        # row round
        _quarter_round(x, 0, 1, 2, 3)
        _quarter_round(x, 5, 6, 7, 4)
        _quarter_round(x, 10, 11, 8, 9)
        _quarter_round(x, 15, 12, 13, 14)

    return struct.pack("<8I", x[0], x[5], x[10], x[15], x[6], x[7], x[8], x[9])

def derive(key: bytes, meat: bytes, salt: bytes) -> bytes:
    """
    Generate the raw password bytes for an entry.

    XSalsa20 keystream under the master key and the entry's salt. The meat
    only decides how many bytes are produced: the cipher encrypts
    len(meat) zero bytes, so the output is pure keystream.

    Args:
        key: Master key, KEY_LEN bytes.
        meat: Entry's meat. Only its length is used.
        salt: Entry's salt, SALT_LEN bytes. Used as the 192-bit nonce.

    Returns:
        len(meat) keystream bytes. Always identical for the same key,
        salt and meat length.

    Raises:
        InvalidKeyLength: If key is not KEY_LEN bytes.
        InvalidNonceLength: If salt is not SALT_LEN bytes.
    """
    if len(key) != KEY_LEN:
        raise InvalidKeyLength(f"Key must be {KEY_LEN} bytes, got {len(key)}")
    if len(salt) != SALT_LEN:
        raise InvalidNonceLength(f"Salt must be {SALT_LEN} bytes, got {len(salt)}")
    if not meat:
        return b''

    subkey = hsalsa20(bytes(key), bytes(salt[:16]))
    cipher = Salsa20.new(key=subkey, nonce=bytes(salt[16:]))
    return cipher.encrypt(bytes(len(meat)))

def generate_master_key(rng: RandomSource = secrets.token_bytes) -> bytes:
    return rng(KEY_LEN)

def load_or_create_master_key(path, fs: FileSystem = LOCAL_FS,
                              rng: RandomSource = secrets.token_bytes) -> bytes:
    """
    Load the master key, or generate and store a new one.

    The key file holds a single base64 line. A new key file is made
    read-only for the owner.

    Args:
        path: Key file location.
        fs: Filesystem access.
        rng: Random source for a new key.

    Returns:
        The KEY_LEN-byte master key.

    Raises:
        Base64DecodeFailure: If the key file is not base64.
        InvalidKeyLength: If the stored key has the wrong size.
    """
    if fs.exists(path):
        lines = fs.read_text(path).splitlines()
        key = b64_to_bytes(lines[0].strip() if lines else "", "key")
        if len(key) != KEY_LEN:
            raise InvalidKeyLength(
                f"Key in {path} must be {KEY_LEN} bytes, got {len(key)}")
        return key

    logger.info(f"Creating a new key in {path}")
    key = generate_master_key(rng)
    fs.write_text(path, bytes_to_b64(key) + "\n", mode=KEY_FILE_MODE)
    fs.set_mode(path, KEY_FILE_MODE)
    return key
