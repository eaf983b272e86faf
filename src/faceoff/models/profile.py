"""Profile table and the filters used to query it."""

import random
from dataclasses import dataclass
from enum import Enum

from sqlmodel import Field, SQLModel


class Category(str, Enum):
    """Primary pairing axis; matchups stay within one category by default."""

    FEMALE = "female"
    MALE = "male"

    @property
    def complement(self) -> "Category":
        """The only other value of the fixed category set."""
        return Category.MALE if self is Category.FEMALE else Category.FEMALE


def new_sampling_key() -> float:
    return random.random()  # noqa: S311


class Profile(SQLModel, table=True):
    """A voteable character profile."""

    id: str = Field(primary_key=True)
    name: str = Field(index=True)
    name_key: str = Field(default="", index=True)  # casefolded name for lookups
    category: Category = Field(index=True)
    race: str = Field(default="", index=True)
    bloodline: str = Field(default="", index=True)
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    report_count: int = Field(default=0, ge=0)
    shown_in_round: bool = Field(default=False, index=True)
    sampling_key: float = Field(default_factory=new_sampling_key, index=True)


@dataclass(frozen=True)
class ProfileFilter:
    """Equality filter over profile columns; None means unconstrained."""

    category: Category | None = None
    race: str | None = None
    bloodline: str | None = None
    shown_in_round: bool | None = None
