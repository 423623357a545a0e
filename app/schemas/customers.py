"""Schemas for customer CRUD."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, model_validator


class CreatorOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str

    class Config:
        from_attributes = True


class DocumentOut(BaseModel):
    id: int
    document_type: str
    file_name: str
    file_size: int | None = None
    file_type: str | None = None
    uploaded_at: datetime

    class Config:
        from_attributes = True


REQUIRED_CUSTOMER_FIELDS = ("first_name", "last_name", "email", "phone", "business_name", "country")


class CustomerBase(BaseModel):
    address: str | None = None
    city: str | None = Field(None, max_length=50)
    state: str | None = Field(None, max_length=50)
    postal_code: str | None = Field(None, max_length=20)
    business_type: str | None = Field(None, max_length=50)
    business_reg_number: str | None = Field(None, max_length=50)
    tin_number: str | None = Field(None, max_length=50)
    vat_number: str | None = Field(None, max_length=50)
    activities: str | None = None


class CustomerCreate(CustomerBase):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20)
    business_name: str = Field(..., min_length=1, max_length=100)
    country: str | None = Field(None, max_length=50)


class CustomerUpdate(CustomerBase):
    """
    Partial update; omitted fields keep their current value.

    Optional fields sent as null are cleared. Required fields cannot be null.
    """

    first_name: str | None = Field(None, min_length=1, max_length=50)
    last_name: str | None = Field(None, min_length=1, max_length=50)
    email: EmailStr | None = None
    phone: str | None = Field(None, min_length=1, max_length=20)
    business_name: str | None = Field(None, min_length=1, max_length=100)
    country: str | None = Field(None, max_length=50)

    @model_validator(mode="after")
    def check_required_not_null(self) -> "CustomerUpdate":
        cleared = sorted(
            name for name in REQUIRED_CUSTOMER_FIELDS
            if name in self.model_fields_set and getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"Cannot clear required fields: {', '.join(cleared)}")
        return self


class CustomerOut(CustomerBase):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    country: str
    business_name: str
    creator: CreatorOut
    documents: list[DocumentOut] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomersListResponse(BaseModel):
    total: int
    customers: list[CustomerOut]
