# odds_service/models.py

from decimal import Decimal
from enum import Enum
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import HttpUrl
from pydantic import model_validator


class OddsBaseModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_encoders={Decimal: lambda v: float(v)},
    )


def build_identity_key(race_name: str, horse_number: str) -> str:
    """Key used to correlate observations of the same runner across snapshots."""
    return f"{race_name}:{horse_number}"


# --- Core Data Models ---
class OddsRecord(OddsBaseModel):
    model_config = ConfigDict(frozen=True)

    race_name: str = Field("", alias="raceName")
    horse_number: str = Field(..., min_length=1, alias="horseNumber")
    horse_name: str = Field(..., min_length=1, alias="horseName")
    win_odds: Optional[Decimal] = Field(None, gt=0, alias="winOdds")
    place_odds_min: Optional[Decimal] = Field(None, gt=0, alias="placeOddsMin")
    place_odds_max: Optional[Decimal] = Field(None, gt=0, alias="placeOddsMax")

    @model_validator(mode="after")
    def check_place_range(self) -> "OddsRecord":
        if (self.place_odds_min is None) != (self.place_odds_max is None):
            raise ValueError("place odds min and max must be present together")
        if self.place_odds_min is not None and self.place_odds_min > self.place_odds_max:
            raise ValueError("place odds min must not exceed place odds max")
        return self

    @property
    def identity_key(self) -> str:
        return build_identity_key(self.race_name, self.horse_number)


class AlertType(str, Enum):
    SUPPORT_RATE_SURGE = "SUPPORT_RATE_SURGE"
    RANK_DIVERGENCE = "RANK_DIVERGENCE"


class AlertRecord(OddsBaseModel):
    model_config = ConfigDict(frozen=True)

    horse_number: str = Field(..., alias="horseNumber")
    horse_name: str = Field(..., alias="horseName")
    alert_type: AlertType = Field(..., alias="alertType")
    value: Decimal
    race_name: str = Field("", alias="raceName")


# --- API Models ---
class FetchRequest(OddsBaseModel):
    url: HttpUrl


class FetchResponse(OddsBaseModel):
    message: str
    saved_count: int = Field(..., alias="savedCount")


class AlertsResponse(OddsBaseModel):
    alerts: List[AlertRecord]
