from dataclasses import dataclass
from enum import IntEnum
import base64, binascii, string

from chaos.utils.errors import Base64DecodeFailure, MalformedStoreDocument, UnknownFormat


class FormatChoice(IntEnum):
    """
    Output alphabet of a password.

    The integer value is the code persisted in the data file.
    """
    SYMBOL_RICH = 1
    ALPHA_NUMERIC = 2
    ALPHA_ONLY = 3
    NUMERIC_ONLY = 4
    BINARY = 5

    @classmethod
    def from_code(cls, code) -> "FormatChoice":
        """
        Convert a persisted format code.

        Raises:
            UnknownFormat: If the code is not an integer in 1-5.
        """
        # bool is an int, but true/false in the data file is corruption
        if isinstance(code, bool) or not isinstance(code, int):
            raise UnknownFormat(f"Unknown format {code!r}")
        try:
            return cls(code)
        except ValueError:
            raise UnknownFormat(f"Unknown format {code!r}") from None

    @property
    def alphabet(self) -> str:
        return ALPHABETS[self]

    @property
    def description(self) -> str:
        return DESCRIPTIONS[self]


ALPHABETS = {
    # ASCII 0x21..0x7E in code point order
    FormatChoice.SYMBOL_RICH: "".join(chr(c) for c in range(0x21, 0x7F)),
    FormatChoice.ALPHA_NUMERIC: string.ascii_lowercase + string.ascii_uppercase + string.digits,
    FormatChoice.ALPHA_ONLY: string.ascii_lowercase + string.ascii_uppercase,
    FormatChoice.NUMERIC_ONLY: string.digits,
    FormatChoice.BINARY: "01",
}

DESCRIPTIONS = {
    FormatChoice.SYMBOL_RICH: "alphanumsymbol",
    FormatChoice.ALPHA_NUMERIC: "alphanum",
    FormatChoice.ALPHA_ONLY: "alpha",
    FormatChoice.NUMERIC_ONLY: "num",
    FormatChoice.BINARY: "lol",
}


@dataclass
class Entry:
    """
    Metadata of a single password.

    Nothing here is secret. The password is regenerated from the salt and
    the meat together with the master key.

    salt and meat are kept in their stored base64 form and only decoded
    when a password is derived, so a damaged entry cannot stop the rest of
    the data file from loading.
    """
    # random 24 bytes, base64
    salt: str
    # random bytes, base64. Only the decoded length matters: it is the
    # length of the password.
    meat: str
    # display only, never used in derivation
    text: str = ''
    format: FormatChoice = FormatChoice.SYMBOL_RICH

    def __post_init__(self):
        self.format = FormatChoice.from_code(self.format)

    def __repr__(self):
        return (
            f"Entry(format={self.format.name}, "
            f"length={self.length}, "
            f"text={self.text!r})"
        )

    @property
    def length(self) -> int | None:
        """Password length, or None if the meat does not decode."""
        try:
            return len(self.meat_bytes())
        except Base64DecodeFailure:
            return None

    def salt_bytes(self) -> bytes:
        return b64_to_bytes(self.salt, "salt")

    def meat_bytes(self) -> bytes:
        return b64_to_bytes(self.meat, "meat")

    def to_dict(self) -> dict:
        """
        Serialize entry to a dictionary.

        Field order is fixed: salt, meat, text, format.
        """
        return {
            "salt": self.salt,
            "meat": self.meat,
            "text": self.text,
            "format": int(self.format),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Entry":
        """
        Create an entry from stored data.

        All four fields are required. A hand-edited entry without a format
        is rejected rather than read as SYMBOL_RICH.

        Args:
            data: Stored entry data.

        Returns:
            Reconstructed Entry instance.

        Raises:
            MalformedStoreDocument: If a field is missing or has the wrong type.
            UnknownFormat: If the format code is out of range.
        """
        if not isinstance(data, dict):
            raise MalformedStoreDocument("Entry data must be an object")

        try:
            salt = data["salt"]
            meat = data["meat"]
            text = data["text"]
            code = data["format"]
        except KeyError as e:
            raise MalformedStoreDocument(f"Entry is missing {e.args[0]}") from None

        for name, value in (("salt", salt), ("meat", meat), ("text", text)):
            if not isinstance(value, str):
                raise MalformedStoreDocument(f"Entry {name} must be a string")

        return cls(
            salt=salt,
            meat=meat,
            text=text,
            format=FormatChoice.from_code(code),
        )


def bytes_to_b64(b: bytes) -> str:
    """Encode bytes as standard base64."""
    return base64.b64encode(b).decode("ascii")

def b64_to_bytes(s: str, what: str = "value") -> bytes:
    """
    Decode a standard base64 string, rejecting anything that is not base64.

    Raises:
        Base64DecodeFailure: If the string does not decode.
    """
    try:
        return base64.b64decode(s.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, AttributeError) as e:
        raise Base64DecodeFailure(f"{what} base64 decoding failed: {e}") from None
