"""
Candidate element paths for every extracted field.

Bureaus name the same data differently, so each field maps to an ordered list
of candidates; the first candidate yielding non-empty text wins. A `Joined`
candidate concatenates several paths (e.g. first + last name).

Two tag dialects are covered:
- simple "CreditReport" documents (Applicant / Score / Accounts / Summary)
- Experian-style "INProfileResponse" documents (Current_Applicant_Details,
  SCORE, CAIS_Account, TotalCAPS_Summary)

Paths of report-level fields are evaluated from the root element; paths of
account-level fields are evaluated from each account element.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple, Union


@dataclass(frozen=True)
class Joined:
    """Candidate built from several paths, joining their non-empty texts"""

    paths: Tuple[str, ...]
    separator: str = " "


Candidate = Union[str, Joined]


BASIC_DETAILS_PATHS: Dict[str, List[Candidate]] = {
    "name": [
        "//Applicant/Name",
        "//Applicant/n",
        "//Applicant/FullName",
        Joined(("//Applicant/FirstName", "//Applicant/MiddleName", "//Applicant/LastName")),
        Joined(
            (
                "//Current_Applicant_Details/First_Name",
                "//Current_Applicant_Details/Middle_Name1",
                "//Current_Applicant_Details/Last_Name",
            )
        ),
        Joined(("//CAIS_Holder_Details/First_Name_Non_Normalized", "//CAIS_Holder_Details/Surname_Non_Normalized")),
    ],
    "mobile_phone": [
        "//Applicant/Telephone/Number",
        "//Applicant/Phone/Number",
        "//Applicant/MobilePhone",
        "//Applicant/Mobile",
        "//Current_Applicant_Details/MobilePhoneNumber",
        "//CAIS_Holder_Phone_Details/Telephone_Number",
    ],
    "pan": [
        "//Applicant/Identifier/PAN",
        "//Applicant/PAN",
        "//Current_Applicant_Details/IncomeTaxPan",
        "//CAIS_Holder_Details/Income_TAX_PAN",
        "//CAIS_Holder_ID_Details/Income_TAX_PAN",
    ],
}

SCORE_PATHS: List[Candidate] = [
    "//Score/Value",
    "//Score/Score",
    "//SCORE/BureauScore",
    "//CreditScore",
]

# Explicit bureau-computed summary figures. Counts and amounts are kept apart
# because only amounts are decimals.
SUMMARY_COUNT_PATHS: Dict[str, List[Candidate]] = {
    "total_accounts": [
        "//Summary/TotalAccounts",
        "//ReportSummary/TotalAccounts",
        "//CAIS_Summary/Credit_Account/CreditAccountTotal",
    ],
    "active_accounts": [
        "//Summary/ActiveAccounts",
        "//ReportSummary/ActiveAccounts",
        "//CAIS_Summary/Credit_Account/CreditAccountActive",
    ],
    "closed_accounts": [
        "//Summary/ClosedAccounts",
        "//ReportSummary/ClosedAccounts",
        "//CAIS_Summary/Credit_Account/CreditAccountClosed",
    ],
    "last_7_days_enquiries": [
        "//Summary/Last7DaysEnquiries",
        "//ReportSummary/Last7DaysEnquiries",
        "//TotalCAPS_Summary/TotalCAPSLast7Days",
    ],
}

SUMMARY_AMOUNT_PATHS: Dict[str, List[Candidate]] = {
    "current_balance_amount": [
        "//Summary/CurrentBalanceAmount",
        "//ReportSummary/CurrentBalanceAmount",
        "//CAIS_Summary/Total_Outstanding_Balance/Outstanding_Balance_All",
    ],
    "secured_accounts_amount": [
        "//Summary/SecuredAccountsAmount",
        "//ReportSummary/SecuredAccountsAmount",
        "//CAIS_Summary/Total_Outstanding_Balance/Outstanding_Balance_Secured",
    ],
    "unsecured_accounts_amount": [
        "//Summary/UnsecuredAccountsAmount",
        "//ReportSummary/UnsecuredAccountsAmount",
        "//CAIS_Summary/Total_Outstanding_Balance/Outstanding_Balance_UnSecured",
    ],
}

# The first collection path matching at least one element defines the account list
ACCOUNT_COLLECTION_PATHS: List[str] = [
    "//Accounts/Account",
    "//CreditAccounts/CreditAccount",
    "//Tradelines/Tradeline",
    "//CAIS_Account/CAIS_Account_DETAILS",
]

ACCOUNT_TEXT_PATHS: Dict[str, List[Candidate]] = {
    "type": ["AccountType", "Account_Type", "Type"],
    "bank": ["Institution", "Bank", "Lender", "Subscriber_Name"],
    "account_number": ["AccountNumber", "Account_Number"],
    "address": [
        "Address",
        Joined(
            (
                "CAIS_Holder_Address_Details/First_Line_Of_Address_non_normalized",
                "CAIS_Holder_Address_Details/Second_Line_Of_Address_non_normalized",
                "CAIS_Holder_Address_Details/Third_Line_Of_Address_non_normalized",
                "CAIS_Holder_Address_Details/City_non_normalized",
                "CAIS_Holder_Address_Details/State_non_normalized",
                "CAIS_Holder_Address_Details/ZIP_Postal_Code_non_normalized",
            ),
            separator=", ",
        ),
    ],
    "status": ["Status", "AccountStatus", "Account_Status"],
}

ACCOUNT_AMOUNT_PATHS: Dict[str, List[Candidate]] = {
    "current_balance": ["CurrentBalance", "Current_Balance", "Balance"],
    "amount_overdue": ["AmountOverdue", "Amount_Overdue", "Amount_Past_Due"],
}

# Every match of a plain path contributes one address
APPLICANT_ADDRESS_PATHS: List[Candidate] = [
    "//Applicant/Address",
    "//Applicant/Addresses/Address",
    Joined(
        (
            "//Current_Applicant_Address_Details/FlatNoPlotHouseNo",
            "//Current_Applicant_Address_Details/BldgNoSocietyName",
            "//Current_Applicant_Address_Details/RoadNoNameAreaLocality",
            "//Current_Applicant_Address_Details/City",
            "//Current_Applicant_Address_Details/PINCode",
        ),
        separator=", ",
    ),
]
