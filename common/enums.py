"""Enumerations for recovery evaluation inputs, statuses and categories."""

from enum import Enum

# encounter facts
class EncounterType(str, Enum):
    """Simplified encounter types."""

    INPATIENT = "inpatient"
    OBSERVATION = "observation"
    ED = "ed"
    OUTPATIENT = "outpatient"


class InsuranceStatus(str, Enum):
    """Insurance status on the date of service."""

    UNINSURED = "uninsured"
    UNDERINSURED = "underinsured"
    MEDICAID = "medicaid"
    MEDICARE = "medicare"
    COMMERCIAL = "commercial"


class MedicaidStatus(str, Enum):
    """Patient Medicaid enrollment status."""

    ACTIVE = "active"
    PENDING = "pending"
    RECENTLY_TERMINATED = "recently_terminated"
    NEVER = "never"
    UNKNOWN = "unknown"


class MedicareStatus(str, Enum):
    """Patient Medicare enrollment status."""

    ACTIVE_PART_A = "active_part_a"
    ACTIVE_PART_B = "active_part_b"
    PENDING = "pending"
    NONE = "none"


class BenefitStatus(str, Enum):
    """SSI / SSDI benefit status."""

    RECEIVING = "receiving"
    PENDING = "pending"
    DENIED = "denied"
    NEVER_APPLIED = "never_applied"
    UNKNOWN = "unknown"


class IncomeLevel(str, Enum):
    """Household income bracket relative to FPL, ordered low to high."""

    UNDER_FPL = "under_fpl"
    FPL_138 = "fpl_138"
    FPL_200 = "fpl_200"
    FPL_250 = "fpl_250"
    FPL_300 = "fpl_300"
    FPL_400 = "fpl_400"
    OVER_400_FPL = "over_400_fpl"


class AssetLevel(str, Enum):
    """Estimated countable assets."""

    UNDER_2000 = "under_2000"
    FROM_2000_TO_5000 = "2000_5000"
    FROM_5000_TO_10000 = "5000_10000"
    OVER_10000 = "over_10000"
    UNKNOWN = "unknown"


class Likelihood(str, Enum):
    """Disability likelihood from upstream screening."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FacilityType(str, Enum):
    """Hospital designation relevant to DSH."""

    PUBLIC_HOSPITAL = "public_hospital"
    DSH_HOSPITAL = "dsh_hospital"
    SAFETY_NET = "safety_net"
    CRITICAL_ACCESS = "critical_access"
    STANDARD = "standard"


class ApplicantCategory(str, Enum):
    """MAGI applicant categories used by non-expansion thresholds."""

    ADULT = "adult"
    PARENT_CARETAKER = "parent_caretaker"
    PREGNANT_WOMAN = "pregnant_woman"
    CHILD = "child"
    FORMER_FOSTER_YOUTH = "former_foster_youth"


class PatientCategory(str, Enum):
    """Presumptive eligibility patient categories."""

    ADULT = "adult"
    CHILD = "child"
    PREGNANT = "pregnant"
    FORMER_FOSTER_CARE = "former_foster_care"
    PARENT_CARETAKER = "parent_caretaker"


# pathway statuses
class MedicaidRecoveryStatus(str, Enum):
    """Medicaid pathway outcome."""

    CONFIRMED = "confirmed"
    LIKELY = "likely"
    POSSIBLE = "possible"
    UNLIKELY = "unlikely"


class MedicareRecoveryStatus(str, Enum):
    """Medicare pathway outcome."""

    ACTIVE_ON_DOS = "active_on_dos"
    FUTURE_LIKELY = "future_likely"
    UNLIKELY = "unlikely"


class RelevanceLevel(str, Enum):
    """DSH relevance band."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AuditReadiness(str, Enum):
    """How well an encounter is documented for DSH audit."""

    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


class FactorImpact(str, Enum):
    """Direction of a scoring factor."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class StateProgramArchetype(str, Enum):
    """State indigent-care program families."""

    UC_POOL_1115 = "1115_uc_pool"
    LIP_POOL_1115 = "1115_lip_pool"
    CHARITY_CARE_REIMB = "charity_care_reimb"
    INDIGENT_CARE_POOL = "indigent_care_pool"
    ALL_PAYER_UC_POOLING = "all_payer_uc_pooling"
    HEALTH_SAFETY_NET = "health_safety_net"
    UNKNOWN = "unknown"


# charity care / 501(r)
class FAPEligibility(str, Enum):
    """Financial assistance policy eligibility outcome."""

    FREE = "free"
    DISCOUNTED = "discounted"
    NOT_ELIGIBLE = "not_eligible"


class ComplianceStatus(str, Enum):
    """501(r) compliance state of an account."""

    COMPLIANT = "compliant"
    AT_RISK = "at_risk"
    NON_COMPLIANT = "non_compliant"


class NotificationType(str, Enum):
    """501(r) patient notifications."""

    PLAIN_LANGUAGE_SUMMARY = "plain_language_summary"
    FAP_APPLICATION = "fap_application"
    ECA_120_DAY_NOTICE = "eca_120_day_notice"
    ECA_30_DAY_WRITTEN_NOTICE = "eca_30_day_written_notice"
    PRESUMPTIVE_ELIGIBILITY_SCREENING = "presumptive_eligibility_screening"
    FAP_DETERMINATION_NOTICE = "fap_determination_notice"


# DSH audit
class DSHFacilityClass(str, Enum):
    """Facility classes for DSH qualification."""

    URBAN = "urban"
    RURAL = "rural"
    SOLE_COMMUNITY = "sole_community"
    CRITICAL_ACCESS = "critical_access"


# denials
class PayerType(str, Enum):
    """Payer categories."""

    MEDICARE = "medicare"
    MEDICAID = "medicaid"
    COMMERCIAL = "commercial"


class DenialCategory(str, Enum):
    """Normalized denial categories."""

    ELIGIBILITY = "eligibility"
    AUTHORIZATION = "authorization"
    MEDICAL_NECESSITY = "medical_necessity"
    CODING = "coding"
    TIMELY_FILING = "timely_filing"
    DUPLICATE = "duplicate"
    BUNDLING = "bundling"
    COORDINATION_OF_BENEFITS = "coordination_of_benefits"
    TECHNICAL = "technical"
    CONTRACT = "contract"
    PATIENT_RESPONSIBILITY = "patient_responsibility"
    OTHER = "other"


class AppealLevel(str, Enum):
    """Appeal levels, in escalation order."""

    FIRST = "first"
    SECOND = "second"
    THIRD = "third"
    EXTERNAL = "external"
    ALJ = "alj"  # Administrative Law Judge


class AppealStatus(str, Enum):
    """Status of an appeal attempt."""

    PENDING = "pending"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    DENIED = "denied"
    PARTIAL = "partial"


# dual eligible
class EnrollmentStatus(str, Enum):
    """Medicare part enrollment."""

    ENROLLED = "enrolled"
    NOT_ENROLLED = "not_enrolled"
    PENDING = "pending"
    TERMINATED = "terminated"


class DualMedicaidStatus(str, Enum):
    """Medicaid status as seen by dual-eligible coordination."""

    ACTIVE = "active"
    PENDING = "pending"
    INACTIVE = "inactive"
    SPEND_DOWN = "spend_down"


class MedicaidScope(str, Enum):
    """Medicaid scope of benefits for Medicare beneficiaries."""

    FULL = "full"
    QMB = "qmb"
    SLMB = "slmb"
    QI = "qi"
    LIMITED = "limited"


class DualCategory(str, Enum):
    """Dual-eligible categories."""

    FULL_DUAL = "full_dual"
    QMB_ONLY = "qmb_only"  # Qualified Medicare Beneficiary
    SLMB_ONLY = "slmb_only"  # Specified Low-Income Medicare Beneficiary
    QI = "qi"  # Qualifying Individual
    QDWI = "qdwi"  # Qualified Disabled Working Individual
    PARTIAL_DUAL = "partial_dual"
    NOT_DUAL = "not_dual"


class PrimaryPayer(str, Enum):
    """Primary payer for dual coordination."""

    MEDICARE = "medicare"
    MEDICAID = "medicaid"
    MEDICARE_ADVANTAGE = "medicare_advantage"
    PACE = "pace"


class SSDIEnrollment(str, Enum):
    """SSDI status for Medicare age eligibility."""

    RECEIVING = "receiving"
    PENDING = "pending"
    NONE = "none"
