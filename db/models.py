from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Numeric, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.database import Base

# 7 decimal places is ~1cm at the equator.
Coordinate = Numeric(10, 7, asdecimal=False)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class UserMap(TimestampMixin, Base):
    __tablename__ = "user_maps"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    access_code: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )


class CameraPin(TimestampMixin, Base):
    __tablename__ = "camera_pins"

    id: Mapped[int] = mapped_column(primary_key=True)
    camera_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hls_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    camera_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    latitude: Mapped[float] = mapped_column(Coordinate, nullable=False)
    longitude: Mapped[float] = mapped_column(Coordinate, nullable=False)
    direction: Mapped[float] = mapped_column(Float, nullable=False)
    user_map_id: Mapped[int | None] = mapped_column(
        ForeignKey("user_maps.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    image_link: Mapped[str | None] = mapped_column(String(255), nullable=True)

    animal_pins: Mapped[list["AnimalPin"]] = relationship(back_populates="camera_pin")


class AnimalPin(TimestampMixin, Base):
    __tablename__ = "animal_pins"

    id: Mapped[int] = mapped_column(primary_key=True)
    animal_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    stray_status: Mapped[str | None] = mapped_column(String(255), nullable=True)
    breed: Mapped[str | None] = mapped_column(String(255), nullable=True)
    collar: Mapped[str | None] = mapped_column(String(255), nullable=True)
    picture: Mapped[str | None] = mapped_column(String(255), nullable=True)
    camera: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Null coordinates mark pins stored for detections without a known camera.
    latitude: Mapped[float | None] = mapped_column(Coordinate, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Coordinate, nullable=True)
    detection_id: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    user_map_id: Mapped[int | None] = mapped_column(
        ForeignKey("user_maps.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    camera_pin_id: Mapped[int | None] = mapped_column(
        ForeignKey("camera_pins.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    camera_pin: Mapped[CameraPin | None] = relationship(back_populates="animal_pins")
