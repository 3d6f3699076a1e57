from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from travel_packages.db.session import get_db
from travel_packages.schemas.packages import PackageRead
from travel_packages.services import catalog

router = APIRouter(prefix="/api", tags=["Packages"])


@router.get(
    "/packages/{destination}",
    response_model=list[PackageRead],
    summary="List packages by destination",
    description="All packages whose destination matches exactly (case-sensitive). Unknown destinations return [].",
    operation_id="list_packages_by_destination",
)
def list_packages_by_destination(destination: str, db: Session = Depends(get_db)) -> list[PackageRead]:
    """List packages for a destination.

    Args:
        destination: Exact destination string.
        db: SQLAlchemy Session (FastAPI dependency).

    Returns:
        list[PackageRead]: Matching packages, possibly empty.
    """
    return catalog.list_by_destination(db, destination)


@router.get(
    "/package/{package_id}",
    response_model=PackageRead,
    summary="Get package",
    description="Get a single package, with its flight, hotel, activities, policies and itinerary.",
    operation_id="get_package",
    responses={404: {"description": "Package not found"}, 500: {"description": "Malformed package id or store failure"}},
)
def get_package(package_id: str, db: Session = Depends(get_db)) -> PackageRead:
    """Get package by id.

    Args:
        package_id: Package UUID, as sent by the client.
        db: SQLAlchemy Session (FastAPI dependency).

    Returns:
        PackageRead: The package document.

    Raises:
        NotFoundError: 404 if no package has this id.
        InvalidIdentifierError: 500 if the id is not a UUID.
    """
    return catalog.get_by_id(db, package_id)
