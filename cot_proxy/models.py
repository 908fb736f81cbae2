from pydantic import BaseModel


class SuccessResponse(BaseModel):
    success: bool = True
    destination: str
    size: int


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class HealthResponse(BaseModel):
    status: str = "running"
    service: str
    version: str
