# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the admin pick lists."""

from typing import Optional

from pydantic import BaseModel, Field


# -- Categories ------------------------------------------------------------


class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: Optional[str] = Field(None, max_length=45)
    sort_order: int = 0
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    code: Optional[str] = Field(None, max_length=45)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryOut(CategoryIn):
    id: int

    model_config = {"from_attributes": True}


# -- Languages -------------------------------------------------------------


class LanguageIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=10)
    speakers: Optional[str] = Field(None, max_length=50)
    is_active: bool = True


class LanguageUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    code: Optional[str] = Field(None, min_length=1, max_length=10)
    speakers: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None


class LanguageOut(LanguageIn):
    id: int

    model_config = {"from_attributes": True}


# -- Education levels ------------------------------------------------------


class EducationIn(BaseModel):
    level: str = Field(..., min_length=1, max_length=100)
    is_active: bool = True


class EducationUpdate(BaseModel):
    level: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


class EducationOut(EducationIn):
    id: int

    model_config = {"from_attributes": True}


# -- Professions -----------------------------------------------------------


class ProfessionIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=100)
    is_active: bool = True


class ProfessionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


class ProfessionOut(ProfessionIn):
    id: int

    model_config = {"from_attributes": True}
