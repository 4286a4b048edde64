# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Location reference data – continents, countries, states and districts.

Every level exposes the same admin-only surface:

    GET    /admin/<plural>               list, ordered by sort_order then name
    GET    /admin/<plural>/{id}          one row (404 if missing)
    POST   /admin/<plural>               create (parent must exist → 400)
    PUT    /admin/<plural>/{id}          replace fields
    PUT    /admin/<plural>/{id}/status   flip the active flag
    DELETE /admin/<plural>/{id}          delete (409 while children exist)

plus the filtered lists used by the cascading pickers in the admin UI.
"""

from dataclasses import dataclass
from typing import Optional, Type

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from apphub.database import Base, get_db
from apphub.core.security import require_admin
from apphub.models.location import Continent, Country, District, State
from apphub.locations.schemas import (
    ContinentIn,
    ContinentOut,
    CountryIn,
    CountryList,
    CountryOut,
    DistrictIn,
    DistrictList,
    DistrictOut,
    StateIn,
    StateList,
    StateOut,
)

router = APIRouter(prefix="/admin", tags=["locations"], dependencies=[Depends(require_admin)])


@dataclass
class _Level:
    label: str                       # "Country"
    plural: str                      # "countries" – URL segment
    model: Type[Base]
    schema_in: Type[BaseModel]
    schema_out: Type[BaseModel]
    parent_field: Optional[str] = None
    parent: Optional["_Level"] = None
    child: Optional["_Level"] = None


_continent = _Level("Continent", "continents", Continent, ContinentIn, ContinentOut)
_country = _Level("Country", "countries", Country, CountryIn, CountryOut, "continent_id", _continent)
_state = _Level("State", "states", State, StateIn, StateOut, "country_id", _country)
_district = _Level("District", "districts", District, DistrictIn, DistrictOut, "state_id", _state)
_continent.child, _country.child, _state.child = _country, _state, _district


def _get_or_404(db: Session, level: _Level, row_id: int):
    row = db.get(level.model, row_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{level.label} not found")
    return row


def _check_parent(db: Session, level: _Level, body: BaseModel) -> None:
    if level.parent is None:
        return
    if db.get(level.parent.model, getattr(body, level.parent_field)) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{level.parent.label} not found",
        )


def _ordered(query, model):
    return query.order_by(model.sort_order.asc(), model.name.asc(), model.id.asc())


def _register(level: _Level) -> None:
    """Attach the CRUD routes for one level of the hierarchy."""
    base = f"/{level.plural}"
    model = level.model
    schema_in = level.schema_in
    schema_out = level.schema_out

    @router.get(base, response_model=list[schema_out], name=f"list_{level.plural}")
    def list_rows(db: Session = Depends(get_db)):
        return _ordered(db.query(model), model).all()

    @router.get(base + "/{row_id}", response_model=schema_out, name=f"get_{level.plural}")
    def get_row(row_id: int, db: Session = Depends(get_db)):
        return _get_or_404(db, level, row_id)

    @router.post(base, response_model=schema_out, status_code=status.HTTP_201_CREATED,
                 name=f"create_{level.plural}")
    def create_row(body: schema_in, db: Session = Depends(get_db)):
        _check_parent(db, level, body)
        row = model(**body.model_dump())
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    @router.put(base + "/{row_id}", response_model=schema_out, name=f"update_{level.plural}")
    def update_row(row_id: int, body: schema_in, db: Session = Depends(get_db)):
        row = _get_or_404(db, level, row_id)
        _check_parent(db, level, body)
        for field, value in body.model_dump().items():
            setattr(row, field, value)
        db.commit()
        db.refresh(row)
        return row

    @router.put(base + "/{row_id}/status", response_model=schema_out, name=f"toggle_{level.plural}")
    def toggle_status(row_id: int, db: Session = Depends(get_db)):
        row = _get_or_404(db, level, row_id)
        row.status = not row.status
        db.commit()
        db.refresh(row)
        return row

    @router.delete(base + "/{row_id}", name=f"delete_{level.plural}")
    def delete_row(row_id: int, db: Session = Depends(get_db)):
        row = _get_or_404(db, level, row_id)
        child = level.child
        if child is not None:
            in_use = (
                db.query(child.model)
                .filter(getattr(child.model, child.parent_field) == row.id)
                .count()
            )
            if in_use:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Cannot delete {level.label.lower()} with existing {child.plural}",
                )
        db.delete(row)
        db.commit()
        return {"detail": f"{level.label} deleted successfully"}


# -- Filtered lists for the cascading pickers -------------------------------


@router.get("/countries/by-continent/{continent_id}", response_model=CountryList)
def countries_by_continent(continent_id: int, db: Session = Depends(get_db)):
    return _ordered(db.query(Country).filter(Country.continent_id == continent_id), Country).all()


@router.get("/states/by-country/{country_id}", response_model=StateList)
def states_by_country(country_id: int, db: Session = Depends(get_db)):
    return _ordered(db.query(State).filter(State.country_id == country_id), State).all()


@router.get("/districts/by-state/{state_id}", response_model=DistrictList)
def districts_by_state(state_id: int, db: Session = Depends(get_db)):
    return _ordered(db.query(District).filter(District.state_id == state_id), District).all()


@router.get("/districts/by-country/{country_id}", response_model=DistrictList)
def districts_by_country(country_id: int, db: Session = Depends(get_db)):
    q = (
        db.query(District)
        .join(State, District.state_id == State.id)
        .filter(State.country_id == country_id)
    )
    return _ordered(q, District).all()


for _level in (_continent, _country, _state, _district):
    _register(_level)
