"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple


class CreditType(str, Enum):
    """Product family, one catalog table each"""

    MORTGAGE = "mortgage"
    PERSONAL = "personal"
    COLLATERALIZED = "collateralized"


@dataclass(frozen=True)
class CreditFormData:
    """Applicant profile submitted to the simulator"""

    product_type: CreditType
    amount: float
    monthly_income: float
    age: int
    tenure_months: int
    term_months: int
    appraisal_value: Optional[float] = None
    expected_inflation: Optional[float] = None  # annual, percent


@dataclass(frozen=True)
class CreditProduct:
    """Catalog entry for a single loan product.

    Ratios and rates are fractions (0.3 for 30%). Numeric fields are None
    when the catalog row lacks them.
    """

    id: str
    family: CreditType
    institution_code: Optional[int]
    institution_name: str
    name: str
    denomination: Optional[str] = None
    min_income: Optional[float] = None
    min_tenure_months: Optional[float] = None
    max_payment_to_income: Optional[float] = None
    max_annual_rate: Optional[float] = None
    max_total_financial_cost: Optional[float] = None
    max_amount: Optional[float] = None
    min_amount: Optional[float] = None
    max_term_months: Optional[int] = None
    max_age: Optional[float] = None
    max_ltv: Optional[float] = None
    reference_payment: Optional[float] = None
    reference_amount: float = 10_000
    beneficiaries: Optional[str] = None
    fund_destination: Optional[str] = None


@dataclass(frozen=True)
class CreditResult:
    """Output of evaluating one product against a profile"""

    id: str
    institution: str
    product: str
    monthly_payment: float
    income_percentage: float
    rate: float
    total_financial_cost: float
    max_term_months: int
    ltv: Optional[float]
    observations: Tuple[str, ...]
    is_uva: bool
    exceeds_payment_ratio: bool
    product_data: Optional[CreditProduct] = None


@dataclass(frozen=True)
class SkippedProduct:
    """Product left out of an evaluation, with the reason"""

    product_id: str
    reason: str


@dataclass(frozen=True)
class EvaluationOutcome:
    """Qualified results plus the skip log"""

    results: List[CreditResult]
    skipped: List[SkippedProduct]


@dataclass(frozen=True)
class ComparisonItem:
    """Result selected for side-by-side comparison"""

    result: CreditResult
    added_at: datetime = field(compare=False)

    @property
    def id(self) -> str:
        return self.result.id


@dataclass(frozen=True)
class AmortizationRow:
    """Single period in a French-system schedule"""

    period: int
    installment: float
    principal: float
    interest: float
    balance: float


@dataclass(frozen=True)
class UVAProjection:
    """Projected payment for one period under constant inflation"""

    period: int
    payment: float
    income_percentage: float


@dataclass
class InvestmentItem:
    """Line item of the investment wizard"""

    id: str
    name: str
    is_selected: bool = False
    amount: float = 0.0
    advance_percentage: float = 0.0
    advance_amount: float = 0.0
    finance_balance: float = 0.0
    credit_type: str = "personal"  # personal | capital | mortgage


@dataclass
class CreditLine:
    """Financing line configured in the investment wizard"""

    type: str  # personal | capital | mortgage
    total_amount: float
    interest_rate: float
    term_months: int
    monthly_payment: float = 0.0


@dataclass(frozen=True)
class SimulatorProgress:
    """Derived wizard completion state"""

    is_configuration_complete: bool
    is_financing_complete: bool
    is_results_ready: bool
    next_step: Optional[str]
    progress: int


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of converting a payment between currencies"""

    original_amount: float
    original_currency: str
    converted_amount: float
    converted_currency: str
    exchange_rate: Optional[float]
    requires_conversion: bool


@dataclass(frozen=True)
class MortgageFormData:
    """Property-driven mortgage request"""

    property_value: float
    monthly_income: float
    desired_term_months: int
    user_profile: str = ""
    credit_destination: str = "otro"


@dataclass(frozen=True)
class MortgageSimulationResult:
    """Best-effort financing plan for one mortgage product"""

    institution: str
    product: str
    amount_to_finance: float
    down_payment_required: float
    initial_installment: float
    max_allowed_installment: float
    desired_term_months: int
    recommended_term_months: Optional[int]
    max_term_months: int
    status: str  # VIABLE | NO_VIABLE_EXTENDER | NO_VIABLE
    monthly_rate: float  # percent
    annual_rate: float  # percent
    total_financial_cost: float  # percent
    institution_code: int
    product_data: CreditProduct
