from enum import Enum

from orbprop.src.errors import ParseError


class TextEnum(Enum):
    """Enum whose members convert to and from their exact text value."""

    def __str__(self):
        return self.value

    @classmethod
    def from_str(cls, text):
        for member in cls:
            if member.value == text:
                return member
        raise ParseError(f"{text!r} is not a valid {cls.__name__}")
