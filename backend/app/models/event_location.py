from sqlalchemy import Column, String, Integer
from app.db.base import Base, BaseModel

class EventLocation(Base, BaseModel):
    __tablename__ = "event_locations"

    location = Column(String, nullable=False)
    date = Column(String, nullable=True)
    time = Column(String, nullable=True)
    venue = Column(String, nullable=True)
    status = Column(String, nullable=False, default="upcoming")  # upcoming, available, closed, walk-in
    pos = Column(Integer, nullable=True)  # 1 = top
    max_capacity = Column(Integer, nullable=True)
    created_at = Column(String, nullable=True)
    updated_at = Column(String, nullable=True)

    def __repr__(self):
        return f"<EventLocation {self.location} ({self.status})>"
