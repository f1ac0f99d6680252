from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from domain.models.country import Country


@dataclass
class IndicatorStatistics:
    """Min/max/average of one indicator over the countries that report it."""

    label: str
    minimum: Optional[float] = None
    minimum_country: Optional[Country] = None
    maximum: Optional[float] = None
    maximum_country: Optional[Country] = None
    average: float = 0.0
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "minimum": self.minimum,
            "minimum_country": self.minimum_country.model_dump() if self.minimum_country else None,
            "maximum": self.maximum,
            "maximum_country": self.maximum_country.model_dump() if self.maximum_country else None,
            "average": self.average,
            "count": self.count,
        }


@dataclass
class StatisticsReport:
    internet_users: IndicatorStatistics
    adult_literacy_rate: IndicatorStatistics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "internet_users": self.internet_users.to_dict(),
            "adult_literacy_rate": self.adult_literacy_rate.to_dict(),
        }
