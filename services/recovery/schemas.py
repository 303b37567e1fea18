"""Pydantic schemas for recovery evaluation inputs."""

from datetime import date
from typing import Any, List, Optional
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from common.enums import (
    AppealLevel,
    AppealStatus,
    AssetLevel,
    BenefitStatus,
    DSHFacilityClass,
    EncounterType,
    EnrollmentStatus,
    FacilityType,
    IncomeLevel,
    InsuranceStatus,
    Likelihood,
    MedicaidScope,
    MedicaidStatus,
    MedicareStatus,
    NotificationType,
    PatientCategory,
)

logger = logging.getLogger(__name__)


class DiscountTier(BaseModel):
    """One sliding-scale tier of a hospital FAP."""

    fpl_range: str = Field(..., min_length=1)  # e.g. "201-300% FPL"
    discount: float = Field(..., ge=0, le=100)

    model_config = ConfigDict(frozen=True)


class HospitalFAPPolicy(BaseModel):
    """Hospital financial assistance policy thresholds."""

    free_care_fpl_threshold: float = Field(..., ge=0)
    discounted_care_fpl_threshold: float = Field(..., ge=0)
    discount_percentages: List[DiscountTier] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class NotificationRecord(BaseModel):
    """A 501(r) notification sent to the patient."""

    type: NotificationType
    date_sent: date
    delivery_method: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class AppealAttempt(BaseModel):
    """A previous appeal of a denied claim."""

    level: AppealLevel
    submitted_date: date
    resolved_date: Optional[date] = None
    status: AppealStatus
    amount_recovered: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class DSHAuditInput(BaseModel):
    """Cost report figures for a DSH audit fiscal year."""

    fiscal_year: int
    total_patient_days: float = Field(0, ge=0)
    medicare_part_a_days: float = Field(0, ge=0)
    medicare_ssi_days: float = Field(0, ge=0)
    medicaid_days: float = Field(0, ge=0)  # includes dual eligible days
    dual_eligible_days: float = Field(0, ge=0)
    total_operating_costs: float = Field(0, ge=0)
    medicaid_payments: float = Field(0, ge=0)
    medicare_payments: float = Field(0, ge=0)
    uncompensated_care_costs: float = Field(0, ge=0)
    charity_care_at_cost: float = Field(0, ge=0)
    bad_debt_at_cost: float = Field(0, ge=0)
    dsh_payments_received: float = Field(0, ge=0)
    facility_type: DSHFacilityClass = DSHFacilityClass.URBAN

    model_config = ConfigDict(frozen=True)


class RecoveryInput(BaseModel):
    """Facts about one hospital encounter, plus optional extension fields."""

    # Patient demographics
    state_of_residence: str = Field(..., min_length=2, max_length=2)
    state_of_service: str = Field(..., min_length=2, max_length=2)
    date_of_service: date

    # Encounter
    encounter_type: EncounterType
    length_of_stay: Optional[int] = Field(None, ge=0)  # Inpatient days
    total_charges: float = Field(..., ge=0)

    # Coverage on date of service
    insurance_status_on_dos: InsuranceStatus
    high_cost_sharing: bool = False
    medicaid_status: MedicaidStatus = MedicaidStatus.UNKNOWN
    medicaid_termination_date: Optional[date] = None
    medicare_status: MedicareStatus = MedicareStatus.NONE
    ssi_status: BenefitStatus = BenefitStatus.UNKNOWN
    ssdi_status: BenefitStatus = BenefitStatus.UNKNOWN

    # Financial screening
    household_income: IncomeLevel
    household_size: int = 1
    estimated_assets: AssetLevel = AssetLevel.UNKNOWN

    # Disability screening
    disability_likelihood: Likelihood = Likelihood.LOW
    ssi_eligibility_likely: bool = False
    ssdi_eligibility_likely: bool = False

    # Facility
    facility_type: Optional[FacilityType] = None
    facility_state: str = Field(..., min_length=2, max_length=2)

    emergency_service: bool = False
    medically_necessary: bool = True

    # Medicare age eligibility
    date_of_birth: Optional[date] = None
    has_esrd: Optional[bool] = None
    dialysis_start_date: Optional[date] = None
    has_als: Optional[bool] = None
    ssdi_effective_date: Optional[date] = None

    # MAGI (monthly amounts)
    gross_monthly_income: Optional[float] = None
    child_support_received: Optional[float] = Field(None, ge=0)
    ssi_benefits: Optional[float] = Field(None, ge=0)
    workers_compensation: Optional[float] = Field(None, ge=0)
    veterans_benefits: Optional[float] = Field(None, ge=0)
    other_excluded_income: Optional[float] = Field(None, ge=0)

    # Presumptive eligibility
    is_qualified_hpe_entity: Optional[bool] = None
    patient_category: Optional[PatientCategory] = None

    # Retroactive coverage
    application_date: Optional[date] = None

    # Charity care 501(r)
    hospital_fap_policy: Optional[HospitalFAPPolicy] = None
    account_age: Optional[int] = Field(None, ge=0)  # days since date of service
    notifications_sent: List[NotificationRecord] = Field(default_factory=list)
    is_emergency_service: Optional[bool] = None

    # Dual eligible
    medicare_part_a: Optional[EnrollmentStatus] = None
    medicare_part_b: Optional[EnrollmentStatus] = None
    medicare_part_d: Optional[EnrollmentStatus] = None
    has_medicare_advantage: bool = False
    has_dsnp: bool = False
    has_pace: bool = False
    has_lis: bool = False
    medicaid_scope_of_benefits: Optional[MedicaidScope] = None

    # Denial analysis
    denial_code: Optional[str] = None
    rarc_code: Optional[str] = None
    denial_reason: Optional[str] = None
    denial_date: Optional[date] = None
    payer_id: Optional[str] = None
    original_claim_amount: Optional[float] = Field(None, ge=0)
    prior_appeals: int = Field(0, ge=0)

    # Hospital cost report for DSH audit
    dsh_audit: Optional[DSHAuditInput] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("state_of_residence", "state_of_service", "facility_state")
    @classmethod
    def upper_state_code(cls, value: str) -> str:
        return value.upper()

    @field_validator("household_size")
    @classmethod
    def coerce_household_size(cls, value: int) -> int:
        if value < 1:
            logger.debug(f"Household size {value} coerced to 1")
            return 1
        return value


class PEValidationRequest(BaseModel):
    """Raw presumptive eligibility fields to validate."""

    is_qualified_hpe_entity: Any = None
    patient_category: Any = None
    gross_monthly_income: Any = None
    household_size: Any = None
    state_of_residence: Any = None
    application_date: Any = None


class PEValidationResponse(BaseModel):
    """Result of presumptive eligibility input validation."""

    valid: bool
    errors: List[str]
