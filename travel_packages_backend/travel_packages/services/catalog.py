"""Read-only package catalog, plus the insert path used for out-of-band provisioning."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from travel_packages.core.errors import BackendUnavailableError, InvalidIdentifierError, NotFoundError
from travel_packages.db.models import (
    Package,
    PackageActivity,
    PackageFlight,
    PackageHotel,
    PackageImage,
    PackageItineraryDay,
    PackagePolicy,
)
from travel_packages.schemas.packages import PackageCreate, PackageRead

logger = logging.getLogger(__name__)

_FULL_DOCUMENT = (
    selectinload(Package.flights),
    selectinload(Package.hotels),
    selectinload(Package.activities),
    selectinload(Package.policies),
    selectinload(Package.itinerary),
    selectinload(Package.images),
)


def parse_package_id(raw: str) -> uuid.UUID:
    """Parse a package id, raising InvalidIdentifierError if it is not a UUID."""
    try:
        return uuid.UUID(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidIdentifierError("Invalid package id") from exc


# PUBLIC_INTERFACE
def list_by_destination(db: Session, destination: str) -> list[PackageRead]:
    """This is a public function.

    Return every package whose destination equals `destination` exactly
    (case-sensitive), in insertion order. No match yields an empty list.
    """
    if destination == "":
        return []

    stmt = (
        select(Package)
        .where(Package.destination == destination)
        .options(*_FULL_DOCUMENT)
        .order_by(Package.created_at.asc(), Package.id.asc())
    )
    try:
        rows = db.execute(stmt).scalars().all()
    except SQLAlchemyError as exc:
        raise BackendUnavailableError() from exc

    return [PackageRead.model_validate(row) for row in rows]


# PUBLIC_INTERFACE
def get_by_id(db: Session, package_id: str) -> PackageRead:
    """This is a public function.

    Fetch one package with all of its sub-documents.

    Raises:
        InvalidIdentifierError: `package_id` is not a well-formed UUID.
        NotFoundError: no package has that id.
        BackendUnavailableError: the store query failed.
    """
    pk = parse_package_id(package_id)
    try:
        package = db.execute(select(Package).where(Package.id == pk).options(*_FULL_DOCUMENT)).scalars().first()
    except SQLAlchemyError as exc:
        raise BackendUnavailableError() from exc

    if package is None:
        raise NotFoundError("Package not found")
    return PackageRead.model_validate(package)


# PUBLIC_INTERFACE
def create_package(db: Session, payload: PackageCreate) -> PackageRead:
    """This is a public function.

    Insert a package and its nested sub-documents. Only used for provisioning
    (CLI and tests); the HTTP API is read-only.
    """
    package = Package(
        destination=payload.destination,
        name=payload.name,
        duration=payload.duration,
        transfers=payload.transfers,
        meals=payload.meals,
        price=payload.price,
        img=payload.img,
        created_at=datetime.now(timezone.utc),
        flights=PackageFlight(**payload.flights.model_dump()),
        hotels=PackageHotel(**payload.hotels.model_dump()),
        activities=[PackageActivity(**a.model_dump()) for a in payload.activities],
        policies=[PackagePolicy(**p.model_dump()) for p in payload.policies],
        itinerary=[PackageItineraryDay(**d.model_dump()) for d in payload.itinerary],
        images=[PackageImage(url=url) for url in payload.img_urls],
    )
    db.add(package)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise BackendUnavailableError() from exc

    logger.info("Created package id=%s destination=%s", package.id, package.destination)
    return PackageRead.model_validate(package)
