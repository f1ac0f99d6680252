from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

TABLE_HEADER = (
    "Code  Country                           Internet Users    Literacy\n"
    "------------------------------------------------------------------"
)


def _format_indicator(value: Optional[float]) -> str:
    return f"{value:.2f}" if value is not None else "--"


class Country(BaseModel):
    """
    Country entity.

    - code: 3-letter primary key, stored uppercase (e.g. "ALB")
    - name: display name, up to 32 characters
    - internet_users / adult_literacy_rate: optional percentages, ``None``
      when no figure is known

    Construction does not enforce business rules; run
    ``utils.country_validator.validate`` before persisting.
    """
    code: Optional[str] = Field(default=None, description="Primary key, 3 letters")
    name: Optional[str] = Field(default=None, description="Country name like 'Italy'")
    internet_users: Optional[float] = Field(default=None, description="Internet users per 100 people")
    adult_literacy_rate: Optional[float] = Field(default=None, description="Adult literacy rate (%)")

    @field_validator("code", mode="before")
    @classmethod
    def _upper_code(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @classmethod
    def build(
        cls,
        code: Optional[str],
        name: Optional[str],
        internet_users: Optional[float] = None,
        adult_literacy_rate: Optional[float] = None,
    ) -> "Country":
        return cls(
            code=code,
            name=name,
            internet_users=internet_users,
            adult_literacy_rate=adult_literacy_rate,
        )

    def apply_edits(
        self,
        *,
        name: Optional[str] = None,
        internet_users: Optional[float] = None,
        adult_literacy_rate: Optional[float] = None,
    ) -> "Country":
        """Overwrite only the fields that were given; returns ``self``."""
        if name is not None:
            self.name = name
        if internet_users is not None:
            self.internet_users = internet_users
        if adult_literacy_rate is not None:
            self.adult_literacy_rate = adult_literacy_rate
        return self

    def render(self) -> str:
        return "%-3s  %-32s %10s %10s" % (
            self.code or "",
            self.name or "",
            _format_indicator(self.internet_users),
            _format_indicator(self.adult_literacy_rate),
        )

    def __str__(self) -> str:
        return self.render()

    def to_mongo(self) -> dict:
        return self.model_dump()

    @classmethod
    def from_mongo(cls, doc: dict | None) -> "Country | None":
        """Deserialize from MongoDB."""
        if not doc:
            return None
        doc = {k: v for k, v in doc.items() if k != "_id"}
        return cls(**doc)
