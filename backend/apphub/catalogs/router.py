# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Admin pick lists – app categories, languages, education levels and
professions.  Each is a flat table served by the shared CRUD routes under
/admin/<plural>; only admins may read or change them.
"""

from fastapi import APIRouter, Depends

from apphub.core.crud import Resource, register_resource
from apphub.core.security import require_admin
from apphub.models.catalog import Category, EducationLevel, Language, Profession
from apphub.catalogs.schemas import (
    CategoryIn,
    CategoryOut,
    CategoryUpdate,
    EducationIn,
    EducationOut,
    EducationUpdate,
    LanguageIn,
    LanguageOut,
    LanguageUpdate,
    ProfessionIn,
    ProfessionOut,
    ProfessionUpdate,
)

router = APIRouter(prefix="/admin", tags=["catalogs"], dependencies=[Depends(require_admin)])

CATALOGS = (
    Resource("Category", "categories", Category, CategoryIn, CategoryUpdate, CategoryOut,
             order_by=("sort_order", "name")),
    Resource("Language", "languages", Language, LanguageIn, LanguageUpdate, LanguageOut,
             order_by=("name",)),
    Resource("Education level", "education", EducationLevel, EducationIn, EducationUpdate, EducationOut,
             order_by=("level",)),
    Resource("Profession", "professions", Profession, ProfessionIn, ProfessionUpdate, ProfessionOut,
             order_by=("category", "name"), filters=("category",)),
)

for _catalog in CATALOGS:
    register_resource(router, _catalog)
