"""
People API — Bounded String Types
===================================

What:  Length-bounded string types for the fields of a new person.
How:   Each type is a NewType over str plus a smart constructor that returns the
       wrapped value or raises BoundedStringError. The *Field aliases plug the
       constructors into pydantic as after-validators, so a too-long value is
       rejected while the request body is parsed, before any handler runs.

Bounds (Unicode code points):
    PersonName  ≤ 100
    Nick        ≤ 32
    Tech        ≤ 32

Usage:
    make_nick("jsmith")           → Nick("jsmith")
    make_nick("x" * 33)           → raises BoundedStringError
    class NewPerson(BaseModel):
        nick: NickField           → 422 on violation
"""

from typing import Annotated, Callable, NewType

from pydantic import AfterValidator

PersonName = NewType("PersonName", str)
Nick = NewType("Nick", str)
Tech = NewType("Tech", str)

PERSON_NAME_MAX_LENGTH = 100
NICK_MAX_LENGTH = 32
TECH_MAX_LENGTH = 32


class BoundedStringError(ValueError):
    """A raw string exceeded the bound of the type it was converted to."""

    def __init__(self, label: str, max_length: int, actual_length: int):
        self.label = label
        self.max_length = max_length
        self.actual_length = actual_length
        super().__init__(f"{label} length must not exceed {max_length} characters")


def bounded(kind: Callable[[str], str], label: str, max_length: int) -> Callable[[str], str]:
    """
    Build the smart constructor for a bounded string type.

    The returned function leaves the content untouched: no trimming, no case
    folding. Only the length is checked.
    """

    def construct(value: str) -> str:
        if len(value) > max_length:
            raise BoundedStringError(label, max_length, len(value))
        return kind(value)

    construct.__name__ = f"make_{label.lower()}"
    return construct


make_person_name = bounded(PersonName, "Name", PERSON_NAME_MAX_LENGTH)
make_nick = bounded(Nick, "Nick", NICK_MAX_LENGTH)
make_tech = bounded(Tech, "Tech", TECH_MAX_LENGTH)

# ── Pydantic field types ──────────────────────────────────────────────────
PersonNameField = Annotated[str, AfterValidator(make_person_name)]
NickField = Annotated[str, AfterValidator(make_nick)]
TechField = Annotated[str, AfterValidator(make_tech)]
