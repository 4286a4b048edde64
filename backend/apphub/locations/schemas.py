# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the location endpoints."""

from typing import List, Optional

from pydantic import BaseModel, Field


# -- Continents ------------------------------------------------------------


class ContinentIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=45)
    sort_order: int = 0
    status: bool = True


class ContinentOut(ContinentIn):
    id: int

    model_config = {"from_attributes": True}


# -- Countries -------------------------------------------------------------


class CountryIn(BaseModel):
    continent_id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=45)
    sort_order: int = 0
    status: bool = True
    currency: Optional[str] = Field(None, max_length=45)
    flag: Optional[str] = None
    phone_code: Optional[str] = Field(None, max_length=100)
    nationality: Optional[str] = Field(None, max_length=100)


class CountryOut(CountryIn):
    id: int

    model_config = {"from_attributes": True}


# -- States ----------------------------------------------------------------


class StateIn(BaseModel):
    country_id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=45)
    sort_order: int = 0
    status: bool = True


class StateOut(StateIn):
    id: int

    model_config = {"from_attributes": True}


# -- Districts -------------------------------------------------------------


class DistrictIn(BaseModel):
    state_id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=45)
    sort_order: int = 0
    status: bool = True


class DistrictOut(DistrictIn):
    id: int

    model_config = {"from_attributes": True}


# Response list aliases used by the router
CountryList = List[CountryOut]
StateList = List[StateOut]
DistrictList = List[DistrictOut]
