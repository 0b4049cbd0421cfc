from pydantic import BaseModel, Field


class CurrencySchema(BaseModel):
    code: str = Field(..., min_length=3, max_length=3)
    symbol: str = Field(..., min_length=1, max_length=5)
