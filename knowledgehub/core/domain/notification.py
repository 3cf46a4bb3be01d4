"""Transient user-facing notifications."""

from dataclasses import dataclass
from enum import Enum


class Variant(Enum):
    """Visual weight of a notification."""

    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    """A short message shown to the user once."""

    title: str
    description: str
    variant: Variant = Variant.DEFAULT

    @property
    def is_error(self) -> bool:
        return self.variant is Variant.DESTRUCTIVE

    @classmethod
    def success(cls, description: str, title: str = "Success") -> "Notification":
        return cls(title=title, description=description)

    @classmethod
    def error(cls, description: str, title: str = "Error") -> "Notification":
        return cls(title=title, description=description, variant=Variant.DESTRUCTIVE)
