"""
Database persistence layer for user tracking data.

This module holds the SQLAlchemy tables behind recipehub.tracking: goals, daily
logs, meal entries, meal schedules, recipe ratings, shopping lists, weight logs
and water logs.

The engine is created lazily from DATABASE_URL (default: a SQLite file in the
working directory). Any SQLAlchemy URL works; Postgres needs the `postgres`
extra (psycopg2-binary).

For SQLite:
- check_same_thread is disabled, since FastAPI runs sync endpoints in a thread pool
- In-memory URLs ("sqlite://", "sqlite:///:memory:") share one connection (StaticPool)
  so every session sees the same database

Uniqueness enforced here (and relied on by the upsert helpers in tracking):
- user_goals: one row per user_id
- daily_logs, weight_logs: one row per (user_id, date)
- recipe_ratings: one row per (user_id, recipe_id)
"""

import logging
import os
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text,
    UniqueConstraint, create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///recipehub.db"

Base = declarative_base()

# Database engine and session factory (created on first use)
engine = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserGoalsRow(Base):
    """Nutrition and hydration targets - one row per user."""
    __tablename__ = "user_goals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), unique=True, index=True, nullable=False)
    daily_calorie_target = Column(Integer, nullable=False, default=2000)
    water_target_ml = Column(Integer, nullable=False, default=2000)
    preferred_diet_type = Column(String(100), nullable=True)
    protein_target_g = Column(Integer, nullable=False, default=150)
    carbs_target_g = Column(Integer, nullable=False, default=250)
    fat_target_g = Column(Integer, nullable=False, default=65)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


class DailyLogRow(Base):
    """Per-day totals, recomputed from meal entries and water logs."""
    __tablename__ = "daily_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    total_calories = Column(Float, nullable=False, default=0)
    total_protein = Column(Float, nullable=False, default=0)
    total_carbs = Column(Float, nullable=False, default=0)
    total_fat = Column(Float, nullable=False, default=0)
    water_intake_ml = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_log_user_date"),
    )


class MealEntryRow(Base):
    """A logged (eaten) meal."""
    __tablename__ = "meal_entries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False)
    date = Column(String(10), nullable=False)
    meal_type = Column(String(20), nullable=False)
    recipe_id = Column(String(255), nullable=False)
    recipe_title = Column(String(500), nullable=False)
    quantity = Column(Float, nullable=False, default=1)
    calories = Column(Float, nullable=False, default=0)
    protein = Column(Float, nullable=False, default=0)
    carbs = Column(Float, nullable=False, default=0)
    fat = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index("idx_meal_entry_user_date", "user_id", "date"),
    )


class MealScheduleRow(Base):
    """A planned meal on a future (or past) day."""
    __tablename__ = "meal_schedules"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False)
    date = Column(String(10), nullable=False)
    meal_type = Column(String(20), nullable=False)
    recipe_id = Column(String(255), nullable=False)
    source = Column(String(20), nullable=True)  # spoonacular | mealdb
    recipe_title = Column(String(500), nullable=False)
    recipe_image = Column(String(1000), nullable=True)
    servings = Column(Integer, nullable=False, default=1)
    calories = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index("idx_meal_schedule_user_date", "user_id", "date"),
    )


class RecipeRatingRow(Base):
    """Rating (1-5), favorite flag and notes - one row per (user, recipe)."""
    __tablename__ = "recipe_ratings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    recipe_id = Column(String(255), nullable=False)
    source = Column(String(20), nullable=True)
    rating = Column(Integer, nullable=False)
    is_favorite = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_recipe_rating_user_recipe"),
    )


class ShoppingListRow(Base):
    """Named backend shopping list."""
    __tablename__ = "shopping_lists"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    items = relationship(
        "ShoppingListItemRow",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        order_by="ShoppingListItemRow.id",
    )


class ShoppingListItemRow(Base):
    __tablename__ = "shopping_list_items"

    id = Column(Integer, primary_key=True, index=True)
    shopping_list_id = Column(Integer, ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False, index=True)
    ingredient_name = Column(String(500), nullable=False)
    quantity = Column(String(100), nullable=True)
    category = Column(String(100), nullable=False, default="other")
    is_checked = Column(Boolean, nullable=False, default=False)
    recipe_id = Column(String(255), nullable=True)
    recipe_title = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    shopping_list = relationship("ShoppingListRow", back_populates="items")


class WeightLogRow(Base):
    __tablename__ = "weight_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    date = Column(String(10), nullable=False)
    weight_kg = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_weight_log_user_date"),
    )


class WaterLogRow(Base):
    __tablename__ = "water_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False)
    date = Column(String(10), nullable=False)
    amount_ml = Column(Integer, nullable=False)
    logged_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index("idx_water_log_user_date", "user_id", "date"),
    )


def configure_engine(database_url: Optional[str] = None):
    """
    (Re)create the engine and bind the session factory to it.

    Args:
        database_url: SQLAlchemy URL (optional, reads DATABASE_URL or uses the SQLite default)

    Returns:
        The new Engine
    """
    global engine

    url = database_url or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
    kwargs = {"pool_pre_ping": True, "echo": False}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool

    if engine is not None:
        engine.dispose()
    engine = create_engine(url, **kwargs)
    SessionLocal.configure(bind=engine)
    logger.info("Database engine configured (%s)", engine.url.render_as_string(hide_password=True))
    return engine


def get_engine():
    if engine is None:
        configure_engine()
    return engine


def init_db() -> None:
    """
    Initialize database tables (create if they don't exist).

    This function is safe to call multiple times - it only creates tables
    that don't already exist.

    Raises:
        Exception: If database connection fails or table creation fails
    """
    try:
        Base.metadata.create_all(bind=get_engine())
        logger.info("Database tables initialized (or already exist)")
    except Exception as e:
        logger.error("Failed to initialize database tables: %s", e)
        raise


def reset_db() -> None:
    """Drop and recreate every table (tests and local resets only)."""
    bound = get_engine()
    Base.metadata.drop_all(bind=bound)
    Base.metadata.create_all(bind=bound)


def get_db_session():
    """
    Get a database session bound to the configured engine.

    Callers own the session and must close it.

    Returns:
        SQLAlchemy Session object
    """
    get_engine()
    return SessionLocal()
