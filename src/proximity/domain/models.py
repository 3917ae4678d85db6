"""
Domain models (Pydantic).

Records go through two stages:
- `RawRecord`: the structural shape of one input line (coordinates still text),
- `Customer`: the converted entity, with its location in radians.

Keeping the stages separate lets a malformed line be told apart from a line whose
coordinates are not numbers.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr

from proximity.core.geo import Coordinate


class RawRecord(BaseModel):
    """One decoded input line; unknown fields are ignored."""

    user_id: StrictInt
    name: StrictStr
    latitude: StrictStr
    longitude: StrictStr


class Customer(BaseModel):
    """A customer with a location in radians."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    name: str
    location: Coordinate
