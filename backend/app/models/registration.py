from sqlalchemy import Column, String, Boolean, DateTime, Index
from app.db.base import Base, BaseModel

class Registration(Base, BaseModel):
    __tablename__ = "registrations"

    # Identity
    id_number = Column(String, nullable=False)  # NNNNNN-NN-NNNN, not unique
    id_type = Column(String, nullable=True)

    # Registration form
    full_name = Column(String, nullable=True)
    email_address = Column(String, nullable=True)
    contact_number = Column(String, nullable=True)
    customer_type = Column(String, nullable=True)
    dealer_company_name = Column(String, nullable=True)
    tshirt_size = Column(String, nullable=True)
    app_downloaded = Column(Boolean, nullable=True)
    location_id = Column(String, nullable=True)
    created_at = Column(String, nullable=True)  # ISO-8601
    updated_at = Column(String, nullable=True)

    # Check-in
    status = Column(String, nullable=True)
    check_time_stamp = Column(DateTime(timezone=True), nullable=True)

    # Gift redemption
    redeemed_gift = Column(Boolean, nullable=True)
    redemption_time_stamp = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("ix_registrations_id_number", "id_number"),)

    def __repr__(self):
        return f"<Registration {self.full_name} ({self.id_number})>"
