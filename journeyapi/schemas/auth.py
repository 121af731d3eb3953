from pydantic import BaseModel, Field


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class DeviceRegisterRequest(BaseModel):
    device_id: str = Field(..., min_length=8, max_length=128, description="Stable device identifier")


class DeviceRegisterResponse(BaseModel):
    user_id: int
    access_token: str
    token_type: str = "bearer"
    is_new_user: bool


class TokenData(BaseModel):
    user_id: int
    device_id: str
