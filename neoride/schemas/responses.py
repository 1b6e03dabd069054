from pydantic import BaseModel, Field


# ============================================================================
# Stats Schemas
# ============================================================================

class StatsResponseSchema(BaseModel):
    """Aggregate counts returned by GET /api/stats"""
    totalCustomers: int = Field(..., ge=0, description="Number of customer documents")
    totalDrivers: int = Field(..., ge=0, description="Number of driver documents")
    approvedDrivers: int = Field(..., ge=0, description="Drivers with status=approved")
    pendingDrivers: int = Field(..., ge=0, description="Drivers with status=pending")

    class Config:
        json_schema_extra = {
            "example": {
                "totalCustomers": 120,
                "totalDrivers": 34,
                "approvedDrivers": 25,
                "pendingDrivers": 6
            }
        }


# ============================================================================
# Generic Schemas
# ============================================================================

class MessageResponseSchema(BaseModel):
    """Plain confirmation message"""
    message: str

    class Config:
        json_schema_extra = {
            "example": {"message": "Customer deleted successfully"}
        }
