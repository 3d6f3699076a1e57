from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from travel_packages.db.session import Base


class User(Base):
    """ORM model for `users`."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # Uniqueness lives in the database so concurrent signups cannot both succeed.
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    username: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    sessions: Mapped[list["AuthSession"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class AuthSession(Base):
    """ORM model for `sessions`: a server-side login session keyed by its opaque token."""

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped["User"] = relationship(back_populates="sessions")


Index("idx_sessions_user", AuthSession.user_id)
Index("idx_sessions_expires_at", AuthSession.expires_at)


class Package(Base):
    """ORM model for `packages`.

    Sub-documents live in their own tables: exactly one flight and one hotel
    per package, and ordered lists of activities, policies, itinerary days
    and image URLs (ordered by their `position` column).
    """

    __tablename__ = "packages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    destination: Mapped[str | None] = mapped_column(String(200), nullable=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    duration: Mapped[str | None] = mapped_column(String(100), nullable=True)
    transfers: Mapped[str | None] = mapped_column(Text, nullable=True)
    meals: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[str | None] = mapped_column(String(100), nullable=True)
    img: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    flights: Mapped["PackageFlight | None"] = relationship(
        back_populates="package",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    hotels: Mapped["PackageHotel | None"] = relationship(
        back_populates="package",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    activities: Mapped[list["PackageActivity"]] = relationship(
        order_by="PackageActivity.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    policies: Mapped[list["PackagePolicy"]] = relationship(
        order_by="PackagePolicy.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    itinerary: Mapped[list["PackageItineraryDay"]] = relationship(
        order_by="PackageItineraryDay.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    images: Mapped[list["PackageImage"]] = relationship(
        order_by="PackageImage.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def img_urls(self) -> list[str]:
        return [image.url for image in self.images]


# Exact-match destination lookups.
Index("idx_packages_destination", Package.destination)


class PackageFlight(Base):
    """ORM model for `package_flights`."""

    __tablename__ = "package_flights"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("packages.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    flight_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    departure_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    return_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    package: Mapped["Package"] = relationship(back_populates="flights")


class PackageHotel(Base):
    """ORM model for `package_hotels`."""

    __tablename__ = "package_hotels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("packages.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    check_in: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    check_out: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    booking_details: Mapped[str | None] = mapped_column(Text, nullable=True)

    package: Mapped["Package"] = relationship(back_populates="hotels")


class PackageActivity(Base):
    """ORM model for `package_activities`."""

    __tablename__ = "package_activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("packages.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    img: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


Index("idx_package_activities_package_position", PackageActivity.package_id, PackageActivity.position)


class PackagePolicy(Base):
    """ORM model for `package_policies`."""

    __tablename__ = "package_policies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("packages.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


Index("idx_package_policies_package_position", PackagePolicy.package_id, PackagePolicy.position)


class PackageItineraryDay(Base):
    """ORM model for `package_itinerary_days`."""

    __tablename__ = "package_itinerary_days"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("packages.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    day: Mapped[int | None] = mapped_column(Integer, nullable=True)
    date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    hotel: Mapped[str | None] = mapped_column(String(200), nullable=True)
    hotel_stars: Mapped[str | None] = mapped_column(String(50), nullable=True)
    car: Mapped[str | None] = mapped_column(String(200), nullable=True)
    sightseeing: Mapped[str | None] = mapped_column(Text, nullable=True)


Index("idx_package_itinerary_package_position", PackageItineraryDay.package_id, PackageItineraryDay.position)


class PackageImage(Base):
    """ORM model for `package_images` (the package's `imgUrls`)."""

    __tablename__ = "package_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("packages.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)


Index("idx_package_images_package_position", PackageImage.package_id, PackageImage.position)
