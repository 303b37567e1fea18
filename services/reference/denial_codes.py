"""Claim adjustment reason (CARC), remark (RARC) and group code reference."""

from types import MappingProxyType
from typing import List, NamedTuple, Optional, Tuple

from common.enums import DenialCategory


class CARCCode(NamedTuple):
    """A claim adjustment reason code and how it is usually worked."""

    code: str
    description: str
    category: DenialCategory
    appealable: bool
    base_recovery_rate: float  # share of billed amount typically recovered on appeal
    documentation: Tuple[str, ...]
    resolutions: Tuple[str, ...]
    urgency: str  # high | medium | low


class RARCCode(NamedTuple):
    code: str
    description: str
    action_required: str


class CARCGroup(NamedTuple):
    code: str
    name: str
    description: str


CARC_GROUPS = MappingProxyType({
    "CO": CARCGroup("CO", "Contractual Obligation", "Amount for which the provider is financially liable"),
    "PR": CARCGroup("PR", "Patient Responsibility", "Amount that may be billed to patient/insured"),
    "OA": CARCGroup("OA", "Other Adjustment", "May not be billed to patient"),
    "CR": CARCGroup("CR", "Correction/Reversal", "Correction to a prior claim"),
    "PI": CARCGroup("PI", "Payer Initiated Reduction", "Reduction initiated by payer"),
})


def _carc(code, description, category, appealable, rate, documentation, resolutions, urgency):
    return CARCCode(
        code, description, category, appealable, rate, tuple(documentation), tuple(resolutions), urgency
    )


CARC_CODES = MappingProxyType({
    "1": _carc(
        "1", "Deductible amount", DenialCategory.PATIENT_RESPONSIBILITY, False, 0, [],
        ["Bill patient for deductible", "Verify deductible accumulator", "Check for secondary insurance"],
        "low",
    ),
    "2": _carc(
        "2", "Coinsurance amount", DenialCategory.PATIENT_RESPONSIBILITY, False, 0, [],
        ["Bill patient for coinsurance", "Verify benefit percentage", "Check for secondary insurance"],
        "low",
    ),
    "3": _carc(
        "3", "Co-payment amount", DenialCategory.PATIENT_RESPONSIBILITY, False, 0, [],
        ["Collect copay from patient", "Verify copay amount with plan"],
        "low",
    ),
    "4": _carc(
        "4", "Procedure code inconsistent with modifier or other procedure code",
        DenialCategory.CODING, True, 0.65,
        ["Operative report", "Medical records", "Coding rationale"],
        ["Review modifier usage", "Add missing modifier", "Correct procedure code",
         "Appeal with documentation"],
        "medium",
    ),
    "5": _carc(
        "5", "Procedure code inconsistent with place of service",
        DenialCategory.CODING, True, 0.60,
        ["Medical records", "Place of service documentation"],
        ["Verify place of service", "Correct billing code", "Appeal with medical records"],
        "medium",
    ),
    "16": _carc(
        "16", "Claim/service lacks information or has submission/billing error",
        DenialCategory.TECHNICAL, True, 0.80,
        ["Corrected claim form", "Missing information"],
        ["Review claim for errors", "Resubmit with corrections", "Contact payer for specifics"],
        "medium",
    ),
    "18": _carc(
        "18", "Duplicate claim/service", DenialCategory.DUPLICATE, True, 0.30,
        ["Explanation of distinct services", "Medical records"],
        ["Verify original claim status", "Review for different dates", "Check ICN numbers"],
        "low",
    ),
    "22": _carc(
        "22", "Coordination of Benefits - payment made by primary payer",
        DenialCategory.COORDINATION_OF_BENEFITS, True, 0.50,
        ["Primary payer EOB", "COB information"],
        ["Submit to primary payer", "Obtain EOB from primary", "Resubmit as secondary"],
        "medium",
    ),
    "26": _carc(
        "26", "Expenses incurred prior to coverage", DenialCategory.ELIGIBILITY, True, 0.25,
        ["Eligibility verification", "Coverage dates documentation"],
        ["Verify coverage dates", "Check for retroactive eligibility", "Appeal with enrollment info"],
        "medium",
    ),
    "27": _carc(
        "27", "Expenses incurred after coverage terminated", DenialCategory.ELIGIBILITY, True, 0.25,
        ["Eligibility verification", "Coverage dates documentation"],
        ["Verify termination date", "Check COBRA status", "Appeal with coverage documentation"],
        "medium",
    ),
    "29": _carc(
        "29", "Timely filing limit", DenialCategory.TIMELY_FILING, True, 0.20,
        ["Proof of timely submission", "Clearinghouse reports"],
        ["Document prior submission attempts", "Request exception", "Provide proof of timely filing"],
        "high",
    ),
    "50": _carc(
        "50", "Medical necessity - non-covered services", DenialCategory.MEDICAL_NECESSITY, True, 0.45,
        ["Medical records", "Physician attestation", "Clinical guidelines"],
        ["Request peer-to-peer", "Submit clinical notes", "Provide published guidelines"],
        "high",
    ),
    "55": _carc(
        "55", "Procedure/treatment/service not covered", DenialCategory.CONTRACT, True, 0.30,
        ["Contract documentation", "Medical necessity letter"],
        ["Submit clinical trial data", "Request external review", "Provide published studies"],
        "high",
    ),
    "96": _carc(
        "96", "Non-covered charges", DenialCategory.CONTRACT, True, 0.35,
        ["Contract review", "Coverage determination"],
        ["Review accompanying RARC", "Verify covered benefits", "Appeal based on specific reason"],
        "medium",
    ),
    "97": _carc(
        "97", "Benefit for this service is included in payment for another service",
        DenialCategory.BUNDLING, True, 0.40,
        ["Unbundling rationale", "Medical records", "Modifier documentation"],
        ["Review bundling edits", "Verify distinct service", "Appeal with modifier documentation"],
        "medium",
    ),
    "109": _carc(
        "109", "Claim not covered by this payer", DenialCategory.ELIGIBILITY, True, 0.30,
        ["Eligibility verification", "Primary payer information"],
        ["Verify correct payer", "Check patient eligibility", "Resubmit to correct payer"],
        "medium",
    ),
    "197": _carc(
        "197", "Precertification/authorization/notification absent",
        DenialCategory.AUTHORIZATION, True, 0.50,
        ["Retroactive auth request", "Medical necessity", "Urgency documentation"],
        ["Request retroactive authorization", "Submit authorization documentation",
         "Appeal with medical necessity"],
        "high",
    ),
    "204": _carc(
        "204", "Service not authorized on the date(s) of service",
        DenialCategory.AUTHORIZATION, True, 0.45,
        ["Authorization documentation", "Date correction request"],
        ["Verify benefit coverage", "Check alternative coverage", "Appeal for exception"],
        "medium",
    ),
})

UNKNOWN_CARC_RECOVERY_RATE = 0.30


def _rarc(code, description, action_required):
    return RARCCode(code, description, action_required)


RARC_CODES = MappingProxyType({
    code.code: code for code in (
        _rarc("M1", "X-ray not taken within the past 12 months or near the start of treatment",
              "Provide recent X-ray documentation"),
        _rarc("M2", "Not paid separately when the patient is an inpatient",
              "Review inpatient billing rules"),
        _rarc("M3", "Equipment is the same or similar to equipment already being used",
              "Document need for additional equipment"),
        _rarc("M4", "Alert: You may appeal this decision", "Consider filing an appeal"),
        _rarc("M5", "Not covered unless submitted with other code(s) from this list",
              "Review required code combinations"),
        _rarc("M6", "Alert: You may be subject to penalties for late filing",
              "Submit future claims timely"),
        _rarc("M7", "Missing, incomplete, or invalid modifier", "Add or correct modifier"),
        _rarc("M10", "Patient home program is a requirement", "Document home program compliance"),
        _rarc("M12", "Diagnosis and procedure do not match for this patient",
              "Review diagnosis-procedure relationship"),
        _rarc("M15", "Missing/incomplete/invalid authorization number",
              "Submit valid authorization number"),
        _rarc("M16", "Alert: Please see our website, provider manual, or call us for more details",
              "Review payer resources for guidance"),
        _rarc("M20", "Missing/incomplete/invalid HCPCS", "Submit valid HCPCS code"),
        _rarc("M21", "Missing/incomplete/invalid place of service", "Correct place of service code"),
        _rarc("M24", "Missing/incomplete/invalid number of units", "Submit correct unit count"),
        _rarc("M27", "Missing/incomplete/invalid entitlement number or SSN",
              "Verify patient identifier"),
        _rarc("M32", "Alert: This is a conditional payment", "Track for potential recovery"),
        _rarc("M36", "This claim was denied for filing past the timely filing deadline",
              "Submit timely filing proof or appeal"),
        _rarc("M38", "Missing/incomplete/invalid rendering provider primary identifier",
              "Submit valid NPI"),
        _rarc("M39", "Missing/incomplete/invalid referring provider primary identifier",
              "Submit valid referring NPI"),
        _rarc("M40", "Missing/incomplete/invalid service facility primary identifier",
              "Submit valid facility NPI"),
        _rarc("M50", "Missing/incomplete/invalid Claim Received Date", "Verify claim receipt"),
        _rarc("M51", "Missing/incomplete/invalid procedure code(s)", "Submit valid procedure codes"),
        _rarc("M61", "Missing/incomplete/invalid referring/ordering provider primary identifier "
              "for this claim/service", "Add referring provider NPI"),
        _rarc("M76", "Missing/incomplete/invalid diagnosis or condition", "Submit valid diagnosis"),
        _rarc("M77", "Missing/incomplete/invalid place of service", "Correct place of service"),
        _rarc("M79", "Missing/incomplete/invalid charge amount", "Submit valid charges"),
        _rarc("M80", "Not covered when performed during the same session/date as a previously "
              "processed service", "Review bundling rules"),
        _rarc("M81", "You are required to code this service using a HCPCS code",
              "Use appropriate HCPCS code"),
        _rarc("N1", "You may appeal this decision", "File appeal if appropriate"),
        _rarc("N4", "Missing/incomplete/invalid prior Insurance information",
              "Submit primary insurance EOB"),
        _rarc("N115", "This decision was based on a coverage/program guideline",
              "Review coverage guidelines"),
        _rarc("N130", "Consult your explanation of benefits or call customer service",
              "Contact payer for details"),
        _rarc("N432", "Alert: Adjustment based on a Recovery Audit",
              "Review audit findings and appeal if appropriate"),
    )
})


def get_carc_code(code: str) -> Optional[CARCCode]:
    return CARC_CODES.get(code)


def get_rarc_code(code: str) -> Optional[RARCCode]:
    return RARC_CODES.get(code.upper())


def get_carc_group(code: str) -> Optional[CARCGroup]:
    return CARC_GROUPS.get(code.upper())


def get_resolution_actions(code: str) -> List[str]:
    carc = get_carc_code(code)
    return list(carc.resolutions) if carc else []
