"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, EmailStr
from datetime import datetime
from typing import Any, Dict, List, Optional
from credit_simulator.domain.models import CreditType


class CreditSimulationRequest(BaseModel):
    """Request body for POST /v1/credit/simulate"""

    product_type: CreditType
    amount: float = Field(..., gt=0, description="Requested amount")
    monthly_income: float = Field(..., gt=0, description="Net monthly income")
    age: int = Field(..., ge=18, le=100)
    tenure_months: int = Field(..., ge=0, description="Employment tenure in months")
    term_months: int = Field(..., gt=0)
    appraisal_value: Optional[float] = Field(None, gt=0)
    expected_inflation: Optional[float] = Field(None, ge=0, description="Expected annual inflation, percent")


class UVAProjectionSchema(BaseModel):
    """Single projected period"""

    period: int
    payment: float
    income_percentage: float


class CreditResultSchema(BaseModel):
    """Evaluated product offer"""

    id: str
    institution: str
    product: str
    monthly_payment: float
    income_percentage: float
    rate: float
    total_financial_cost: float
    max_term_months: int
    ltv: Optional[float] = None
    observations: List[str] = []
    is_uva: bool = False
    exceeds_payment_ratio: bool = False
    uva_projection: Optional[List[UVAProjectionSchema]] = None


class SkippedProductSchema(BaseModel):
    product_id: str
    reason: str


class CreditSimulationResponse(BaseModel):
    """Response for POST /v1/credit/simulate"""

    product_type: CreditType
    results: List[CreditResultSchema]
    skipped: List[SkippedProductSchema]


class MortgageSimulationRequest(BaseModel):
    """Request body for POST /v1/mortgage/simulate"""

    property_value: float = Field(..., gt=0)
    monthly_income: float = Field(..., gt=0)
    desired_term_months: int = Field(..., gt=0)
    user_profile: str = ""
    credit_destination: str = "otro"


class MortgageResultSchema(BaseModel):
    institution: str
    product: str
    amount_to_finance: float
    down_payment_required: float
    initial_installment: float
    max_allowed_installment: float
    desired_term_months: int
    recommended_term_months: Optional[int] = None
    max_term_months: int
    status: str
    monthly_rate: float
    annual_rate: float
    total_financial_cost: float
    institution_code: int


class MortgageSimulationResponse(BaseModel):
    """Response for POST /v1/mortgage/simulate"""

    results: List[MortgageResultSchema]
    message: Optional[str] = None


class AmortizationRequest(BaseModel):
    """Request body for POST /v1/amortization. Zero inputs yield an empty schedule."""

    principal: float = Field(..., ge=0)
    periodic_rate: float = Field(..., ge=0, description="Rate per period as a fraction")
    periods: int = Field(..., ge=0, le=600)


class AmortizationRowSchema(BaseModel):
    period: int
    installment: float
    principal: float
    interest: float
    balance: float


class AmortizationResponse(BaseModel):
    installment: Optional[float] = None
    total_interest: float
    rows: List[AmortizationRowSchema]


class UVAProjectionRequest(BaseModel):
    """Request body for POST /v1/uva-projection"""

    initial_payment: float = Field(..., ge=0)
    annual_inflation: float = Field(..., ge=0, description="Percent")
    periods: int = Field(..., ge=0, le=600)
    income: float = Field(..., ge=0)


class UVAProjectionResponse(BaseModel):
    rows: List[UVAProjectionSchema]


class CurrencyConversionRequest(BaseModel):
    """Request body for POST /v1/currency/convert"""

    amount: float
    payment_currency: str = Field(..., min_length=3, max_length=3)
    contract_currency: str = Field(..., min_length=3, max_length=3)
    exchange_rate: Optional[float] = None


class CurrencyConversionResponse(BaseModel):
    original_amount: float
    original_currency: str
    converted_amount: float
    converted_currency: str
    exchange_rate: Optional[float] = None
    requires_conversion: bool


class InvestmentItemSchema(BaseModel):
    id: str
    name: str = ""
    is_selected: bool = False
    amount: float = 0.0


class CreditLineSchema(BaseModel):
    type: str = "personal"
    total_amount: float = 0.0
    interest_rate: float = 0.0
    term_months: int = 0
    monthly_payment: float = 0.0


class ProgressRequest(BaseModel):
    """Request body for POST /v1/simulator/progress"""

    items: List[InvestmentItemSchema] = []
    credit_lines: List[CreditLineSchema] = []
    estimated_monthly_income: float = 0.0


class ProgressResponse(BaseModel):
    is_configuration_complete: bool
    is_financing_complete: bool
    is_results_ready: bool
    next_step: Optional[str] = None
    progress: int


class ComparisonItemSchema(CreditResultSchema):
    added_at: datetime


class ComparisonResponse(BaseModel):
    """Response for /v1/comparison/{session_id}"""

    session_id: str
    items: List[ComparisonItemSchema]


class SaveSimulationRequest(BaseModel):
    """Request body for POST /v1/simulations"""

    email: EmailStr
    simulation_data: Dict[str, Any]
    analysis_results: Optional[Dict[str, Any]] = None


class SaveSimulationResponse(BaseModel):
    success: bool = True
    reference_number: str
    simulation_id: str


class SimulationRecordResponse(BaseModel):
    """Response for GET /v1/simulations/{reference_number}"""

    simulation_id: str
    reference_number: str
    user_email: str
    simulation_data: Dict[str, Any]
    analysis_results: Optional[Dict[str, Any]] = None
    profile_status: str
    profile_step: int
    created_at: str
