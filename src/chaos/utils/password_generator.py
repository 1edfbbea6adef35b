import secrets

from chaos.config.config_chaos import *
from chaos.utils.Entry import Entry, FormatChoice, bytes_to_b64
from chaos.utils.crypto_utils import RandomSource, derive
from chaos.utils.errors import MalformedStoreDocument


def pack(raw: bytes, format) -> str:
    """
    Turn raw bytes into printable characters, one character per byte.

    Each byte picks alphabet[byte % len(alphabet)]. For alphabets whose
    size does not divide 256 the low indexes come up slightly more often.
    Passwords already in use depend on this exact mapping.

    Args:
        raw: Keystream bytes.
        format: FormatChoice or its integer code.

    Returns:
        A string of len(raw) characters.

    Raises:
        UnknownFormat: If format is not a known code.
    """
    alphabet = FormatChoice.from_code(format).alphabet
    size = len(alphabet)
    return "".join(alphabet[byte % size] for byte in raw)

def cut(raw: bytes, format, visible_length: int) -> str:
    """
    Pack raw bytes and keep the first visible_length characters.

    Asking for more characters than there are bytes returns the whole
    packed string.
    """
    if visible_length < 0:
        raise ValueError(f"Password length cannot be negative: {visible_length}")
    return pack(raw, format)[:visible_length]

def generate_salt(rng: RandomSource = secrets.token_bytes) -> bytes:
    """Generate a new random salt of SALT_LEN bytes."""
    return rng(SALT_LEN)

def generate_meat(length: int, rng: RandomSource = secrets.token_bytes) -> bytes:
    """Generate a new random meat. Its length is the password length."""
    if length < 0:
        raise ValueError(f"Meat length cannot be negative: {length}")
    return rng(length)

def new_entry(format=DEFAULT_FORMAT, length: int = DEFAULT_LENGTH, text: str = '',
              rng: RandomSource = secrets.token_bytes) -> Entry:
    """
    Create an entry with a fresh salt and meat.

    Args:
        format: FormatChoice or its integer code.
        length: Password length in characters, 1 to MAX_LENGTH.
        text: Optional note shown next to the entry.
        rng: Random source.

    Returns:
        A new Entry. Its password differs from any earlier entry's.

    Raises:
        ValueError: If length is out of range.
        UnknownFormat: If format is not a known code.
    """
    if not 1 <= length <= MAX_LENGTH:
        raise ValueError(f"Length must be between 1 and {MAX_LENGTH}, got {length}")
    format = FormatChoice.from_code(format)

    return Entry(
        salt=bytes_to_b64(generate_salt(rng)),
        meat=bytes_to_b64(generate_meat(length, rng)),
        text=text,
        format=format,
    )

def derive_password(key: bytes, entry: Entry) -> str:
    """
    Regenerate the password of an entry.

    Args:
        key: Master key.
        entry: Entry with decodable salt and meat.

    Returns:
        The password, len(meat) characters from the entry's alphabet.

    Raises:
        Base64DecodeFailure: If the salt or the meat does not decode.
        MalformedStoreDocument: If the entry has no meat.
        InvalidKeyLength, InvalidNonceLength: On wrong key or salt sizes.
    """
    salt = entry.salt_bytes()
    meat = entry.meat_bytes()
    if not meat:
        raise MalformedStoreDocument("Entry has an empty meat")

    raw = derive(key, meat, salt)
    return cut(raw, entry.format, len(meat))
