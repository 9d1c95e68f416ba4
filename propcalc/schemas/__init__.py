"""
Input and result models for the calculation engine.
"""

from propcalc.schemas.mortgage import (
    AffordabilityInput,
    AffordabilityResult,
    AmortizationEntry,
    FlexibleMortgageInput,
    MortgageCalculationInput,
    MortgageCalculationResult,
    PaymentBreakdown,
)
from propcalc.schemas.rental import (
    BreakEvenAnalysis,
    CashFlow,
    EnhancedMetrics,
    ExitAnalysis,
    InvestmentSummary,
    Metrics,
    OperatingExpenses,
    ProjectedReturns,
    RentalPropertyExpenses,
    RentalPropertyInput,
    RentalPropertyResult,
    SensitivityAnalysis,
    SensitivityResult,
    YearlyProjection,
)
from propcalc.schemas.strategies import (
    AirbnbInput,
    BRRRRInput,
    BRRRRResult,
    CommercialNOIInput,
    CommercialNOIResult,
    ComparativeAnalysisInput,
    ComparativeAnalysisResult,
    FixAndFlipInput,
    FixAndFlipResult,
    HardMoneyInput,
    HardMoneyResult,
    HouseHackingInput,
    HouseHackingResult,
    LandDevelopmentInput,
    LandDevelopmentResult,
    MaximumAllowableOfferInput,
    MaximumAllowableOfferResult,
    PrivateLendingInput,
    PrivateLendingResult,
    ScenarioComparison,
    ShortTermRentalResult,
    SyndicationDistribution,
    SyndicationInput,
    SyndicationResult,
    ValueAddInput,
    ValueAddResult,
    WholesaleInput,
    WholesaleResult,
)

__all__ = [
    "AffordabilityInput",
    "AffordabilityResult",
    "AmortizationEntry",
    "FlexibleMortgageInput",
    "MortgageCalculationInput",
    "MortgageCalculationResult",
    "PaymentBreakdown",
    "BreakEvenAnalysis",
    "CashFlow",
    "EnhancedMetrics",
    "ExitAnalysis",
    "InvestmentSummary",
    "Metrics",
    "OperatingExpenses",
    "ProjectedReturns",
    "RentalPropertyExpenses",
    "RentalPropertyInput",
    "RentalPropertyResult",
    "SensitivityAnalysis",
    "SensitivityResult",
    "YearlyProjection",
    "AirbnbInput",
    "BRRRRInput",
    "BRRRRResult",
    "CommercialNOIInput",
    "CommercialNOIResult",
    "ComparativeAnalysisInput",
    "ComparativeAnalysisResult",
    "FixAndFlipInput",
    "FixAndFlipResult",
    "HardMoneyInput",
    "HardMoneyResult",
    "HouseHackingInput",
    "HouseHackingResult",
    "LandDevelopmentInput",
    "LandDevelopmentResult",
    "MaximumAllowableOfferInput",
    "MaximumAllowableOfferResult",
    "PrivateLendingInput",
    "PrivateLendingResult",
    "ScenarioComparison",
    "ShortTermRentalResult",
    "SyndicationDistribution",
    "SyndicationInput",
    "SyndicationResult",
    "ValueAddInput",
    "ValueAddResult",
    "WholesaleInput",
    "WholesaleResult",
]
