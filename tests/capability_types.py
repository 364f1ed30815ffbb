"""
Custom types used across the tests.

TextStruct carries marshal_text/unmarshal_text, BinaryStruct carries
marshal_binary/unmarshal_binary, Plain carries neither.
"""

from dataclasses import dataclass


@dataclass
class TextStruct:
    value: str = ""

    def marshal_text(self) -> bytes:
        return self.value.encode("utf-8")

    def unmarshal_text(self, data: bytes) -> None:
        self.value = data.decode("utf-8")


@dataclass
class BinaryStruct:
    value: str = ""

    def marshal_binary(self) -> bytes:
        return self.value.encode("utf-8")

    def unmarshal_binary(self, data: bytes) -> None:
        self.value = data.decode("utf-8")


@dataclass
class Plain:
    value: str = ""


@dataclass
class Prefixed:
    value: str
    prefix: str


class Celsius(float):
    """Distinct from float but of the same kind."""
    pass
