# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Corporate content – ads, popup ads, terms and conditions, about-us pages,
galleries (with their images), contact details, social links, feedback
and awards.

Open to the admin and corporate roles.  Rows belong to the account that
created them: a corporate account works only on its own rows, an admin
sees and edits everyone's.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from apphub.database import get_db
from apphub.core.crud import Resource, get_visible_or_404, register_resource
from apphub.core.logger import logger
from apphub.core.security import get_current_account, require_roles
from apphub.models.account import Account
from apphub.models.corporate import (
    AboutUs,
    Award,
    ContactInfo,
    CorporateAd,
    Feedback,
    Gallery,
    GalleryImage,
    PopupAd,
    SocialLink,
    TermsConditions,
)
from apphub.corporate import schemas as s

router = APIRouter(
    prefix="/corporate",
    tags=["corporate"],
    dependencies=[Depends(require_roles("admin", "corporate"))],
)

GALLERIES = Resource("Gallery", "galleries", Gallery, s.GalleryIn, s.GalleryUpdate, s.GalleryOut,
                     order_by=("name",), owned=True)

CONTENT = (
    Resource("Ad", "ads", CorporateAd, s.AdIn, s.AdUpdate, s.AdOut,
             owned=True, filters=("ad_type",)),
    Resource("Popup ad", "popup-ads", PopupAd, s.PopupAdIn, s.PopupAdUpdate, s.PopupAdOut,
             owned=True),
    Resource("Terms and conditions", "terms-conditions", TermsConditions,
             s.TermsIn, s.TermsUpdate, s.TermsOut, owned=True),
    Resource("About us", "about-us", AboutUs, s.AboutUsIn, s.AboutUsUpdate, s.AboutUsOut,
             owned=True),
    GALLERIES,
    Resource("Contact details", "contact-us", ContactInfo, s.ContactIn, s.ContactUpdate, s.ContactOut,
             owned=True),
    Resource("Social link", "social-links", SocialLink, s.SocialLinkIn, s.SocialLinkUpdate,
             s.SocialLinkOut, order_by=("platform",), owned=True),
    Resource("Feedback", "feedback", Feedback, s.FeedbackIn, s.FeedbackUpdate, s.FeedbackOut,
             owned=True, filters=("status", "feedback_type"), toggle=False),
    Resource("Award", "awards", Award, s.AwardIn, s.AwardUpdate, s.AwardOut, owned=True),
)


# -- Gallery images -----------------------------------------------------------


@router.get("/galleries/{gallery_id}/images", response_model=list[s.GalleryImageOut])
def list_gallery_images(
    gallery_id: int,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    gallery = get_visible_or_404(db, GALLERIES, gallery_id, account)
    return (
        db.query(GalleryImage)
        .filter(GalleryImage.gallery_id == gallery.id)
        .order_by(GalleryImage.sort_order.asc(), GalleryImage.id.asc())
        .all()
    )


@router.post(
    "/galleries/{gallery_id}/images",
    response_model=list[s.GalleryImageOut],
    status_code=status.HTTP_201_CREATED,
)
def add_gallery_images(
    gallery_id: int,
    body: s.GalleryImagesRequest,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """Append one or more images to a gallery; returns the new rows."""
    gallery = get_visible_or_404(db, GALLERIES, gallery_id, account)
    added = [GalleryImage(gallery_id=gallery.id, **image.model_dump()) for image in body.images]
    db.add_all(added)
    db.commit()
    for image in added:
        db.refresh(image)
    logger.info("%d image(s) added to gallery %d by account_id=%d", len(added), gallery.id, account.id)
    return added


@router.delete("/galleries/{gallery_id}/images/{image_id}")
def delete_gallery_image(
    gallery_id: int,
    image_id: int,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    gallery = get_visible_or_404(db, GALLERIES, gallery_id, account)
    image = (
        db.query(GalleryImage)
        .filter(GalleryImage.id == image_id, GalleryImage.gallery_id == gallery.id)
        .first()
    )
    if image is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    db.delete(image)
    db.commit()
    return {"detail": "Image deleted successfully"}


for _resource in CONTENT:
    register_resource(router, _resource)
