# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Location reference data: continent → country → state → district."""

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey

from apphub.database import Base


class Continent(Base):
    __tablename__ = "continents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    code = Column(String(45), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    status = Column(Boolean, nullable=False, default=True)


class Country(Base):
    __tablename__ = "countries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    continent_id = Column(
        Integer,
        ForeignKey("continents.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    name = Column(String(100), nullable=False)
    code = Column(String(45), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    status = Column(Boolean, nullable=False, default=True)
    currency = Column(String(45), nullable=True)
    flag = Column(Text, nullable=True)
    phone_code = Column(String(100), nullable=True)
    nationality = Column(String(100), nullable=True)


class State(Base):
    __tablename__ = "states"

    id = Column(Integer, primary_key=True, autoincrement=True)
    country_id = Column(
        Integer,
        ForeignKey("countries.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    name = Column(String(100), nullable=False)
    code = Column(String(45), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    status = Column(Boolean, nullable=False, default=True)


class District(Base):
    __tablename__ = "districts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    state_id = Column(
        Integer,
        ForeignKey("states.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    name = Column(String(100), nullable=False)
    code = Column(String(45), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    status = Column(Boolean, nullable=False, default=True)
