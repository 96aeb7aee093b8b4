from sqlalchemy import Column, String, Integer, Text, JSON
from app.db.base import Base, BaseModel

class SurveyResponse(Base, BaseModel):
    __tablename__ = "survey_responses"

    name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    contact_number = Column(String, nullable=True)
    event_location_id = Column(String, nullable=True)
    user_id = Column(String, nullable=True)
    feedback = Column(Text, nullable=True)
    marketing = Column(Integer, nullable=True)  # 1 = opted in
    ratings = Column(JSON, nullable=True)  # {"presenter-JaydenKok": 5, "session-app": 4, ...}
    submitted = Column(String, nullable=True)

    def __repr__(self):
        return f"<SurveyResponse {self.email} ({self.submitted})>"
