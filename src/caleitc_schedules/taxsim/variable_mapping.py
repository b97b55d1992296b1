"""TAXSIM-35 codes and the output-field lookup table.

TAXSIM returns positionally numbered columns (v10, v22, ...). The
schedule pipeline only needs a handful of them; OUTPUT_FIELDS fixes
which numbered fields make up each named benefit.

Reference: https://taxsim.nber.org/taxsim35/
"""

from typing import Dict, Tuple


# Supported tax years for TAXSIM-35
TAXSIM_MIN_YEAR = 1960
TAXSIM_MAX_YEAR = 2023

# Columns in standard TAXSIM CSV input format
TAXSIM_INPUT_COLUMNS = [
    "taxsimid", "year", "state", "mstat", "page", "sage", "depx",
    "age1", "age2", "age3",
    "pwages", "swages", "psemp", "ssemp", "dividends", "intrec",
    "stcg", "ltcg", "otherprop", "nonprop", "pensions", "gssi",
    "pui", "sui", "transfers", "rentpaid", "proptax", "otheritem",
    "childcare", "mortgage", "scorp", "pbusinc", "pprofinc",
    "sbusinc", "sprofinc", "idtl",
]

# Numbered outputs (idtl=2) used by the benefit schedules
TAXSIM_OUTPUT_VARS: Dict[int, str] = {
    10: "Federal AGI",
    22: "Child Tax Credit (non-refundable)",
    23: "Additional Child Tax Credit (refundable)",
    25: "Earned Income Credit",
    39: "State EITC",
}

# Named benefit -> numbered TAXSIM fields summed to produce it
OUTPUT_FIELDS: Dict[str, Tuple[int, ...]] = {
    "federal_eitc": (25,),
    "state_eitc": (39,),
    "child_tax_credit": (22, 23),
}

# Filing status mapping. TAXSIM-35 infers head of household from
# dependents when mstat is 1.
FILING_STATUS_TO_MSTAT: Dict[str, int] = {
    "SINGLE": 1,
    "HEAD_OF_HOUSEHOLD": 1,
    "JOINT": 2,
    "MARRIED_FILING_JOINTLY": 2,
    "SEPARATE": 6,
    "MARRIED_FILING_SEPARATELY": 6,
    "DEPENDENT": 8,
}

# State FIPS codes
STATE_FIPS: Dict[str, int] = {
    "AL": 1, "AK": 2, "AZ": 4, "AR": 5, "CA": 6, "CO": 8, "CT": 9, "DE": 10,
    "DC": 11, "FL": 12, "GA": 13, "HI": 15, "ID": 16, "IL": 17, "IN": 18,
    "IA": 19, "KS": 20, "KY": 21, "LA": 22, "ME": 23, "MD": 24, "MA": 25,
    "MI": 26, "MN": 27, "MS": 28, "MO": 29, "MT": 30, "NE": 31, "NV": 32,
    "NH": 33, "NJ": 34, "NM": 35, "NY": 36, "NC": 37, "ND": 38, "OH": 39,
    "OK": 40, "OR": 41, "PA": 42, "RI": 44, "SC": 45, "SD": 46, "TN": 47,
    "TX": 48, "UT": 49, "VT": 50, "VA": 51, "WA": 53, "WV": 54, "WI": 55,
    "WY": 56,
}


def output_column(index: int) -> str:
    """Column name TAXSIM uses for a numbered output field."""
    return f"v{index}"


def get_filing_status_code(filing_status: str) -> int:
    """Convert filing status string to TAXSIM mstat code.

    Args:
        filing_status: Filing status string (e.g., "single", "JOINT")

    Returns:
        TAXSIM mstat code (1, 2, 6, or 8)
    """
    return FILING_STATUS_TO_MSTAT.get(filing_status.upper(), 1)


def get_state_code(state: str) -> int:
    """Convert state abbreviation to FIPS code.

    Args:
        state: Two-letter state abbreviation (e.g., "CA", "NY")

    Returns:
        State FIPS code (0 for no state tax)
    """
    return STATE_FIPS.get(state.upper(), 0)
