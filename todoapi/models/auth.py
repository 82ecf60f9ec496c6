from pydantic import BaseModel, ConfigDict, Field

AUTH_ACCESS = "auth"


class TokenEntry(BaseModel):
    """A session token stored on the user it was issued to."""

    access: str = AUTH_ACCESS
    token: str


class CredentialsPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = Field(..., description="Email address identifying the user")
    password: str = Field(..., description="Plain-text password")


class UserResponse(BaseModel):
    """Public view of a user. The password hash and tokens are never included."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="User ID")
    email: str
