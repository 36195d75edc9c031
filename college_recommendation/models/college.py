from sqlalchemy import JSON, Boolean, Column, Float, Integer, String, Text, DateTime

from .base import Base


class RecCollege(Base):
    """Institution Catalog row. Nested data (courses, cutoffs, placements) is stored as JSON."""
    __tablename__ = "rec_colleges"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, index=True)
    city = Column(String)
    state = Column(String, index=True)
    institution_type = Column(String, index=True)
    established_year = Column(Integer)
    autonomous = Column(Boolean, default=False)
    nirf_rank = Column(Integer)
    annual_fees = Column(Float)
    website = Column(String)
    courses = Column(JSON)
    cutoffs = Column(JSON)
    placement_stats = Column(JSON)
    facilities = Column(JSON)
    notes = Column(Text)
    updated_at = Column(DateTime)

    @classmethod
    def upsert(cls, db, entry: dict):
        obj = db.get(cls, entry["id"])
        fields = {k: v for k, v in entry.items() if k != "id" and hasattr(cls, k)}
        if obj:
            for key, value in fields.items():
                setattr(obj, key, value)
        else:
            obj = cls(id=entry["id"], **fields)
            db.add(obj)
        return obj
