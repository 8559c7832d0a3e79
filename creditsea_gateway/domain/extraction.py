"""Extraction engine - maps loosely structured bureau XML onto the CreditReport model"""

import logging
import re
import unicodedata
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence, Union

from creditsea_gateway.domain.field_paths import (
    ACCOUNT_AMOUNT_PATHS,
    ACCOUNT_COLLECTION_PATHS,
    ACCOUNT_TEXT_PATHS,
    APPLICANT_ADDRESS_PATHS,
    BASIC_DETAILS_PATHS,
    SCORE_PATHS,
    SUMMARY_AMOUNT_PATHS,
    SUMMARY_COUNT_PATHS,
    Candidate,
    Joined,
)
from creditsea_gateway.domain.models import BasicDetails, CreditAccount, CreditReport, ReportSummary
from creditsea_gateway.domain.summary import merge_summary
from creditsea_gateway.domain.xml_tree import TreeNode, clean_text, first_text, flattened_text, parse_document, select

logger = logging.getLogger(__name__)

_CURRENCY_CODE = re.compile(r"^(?:rs\.?|inr)|(?:rs\.?|inr)$", re.IGNORECASE)
# Plain decimal literals only: no exponents, no special values
_PLAIN_DECIMAL = re.compile(r"^[+-]?\d{1,30}(?:\.\d{1,30})?$")
_PHONE_NOISE = re.compile(r"[^\d+]")


# =============================================================================
# COERCION
# =============================================================================


def _to_decimal(text: str) -> Optional[Decimal]:
    """Strip separators, whitespace and currency symbols, then parse. None on failure."""
    stripped = "".join(
        ch for ch in text if not ch.isspace() and ch != "," and unicodedata.category(ch) != "Sc"
    )
    stripped = _CURRENCY_CODE.sub("", stripped)
    if not _PLAIN_DECIMAL.match(stripped):
        return None
    try:
        return Decimal(stripped)
    except InvalidOperation:
        return None


def parse_amount(text: Optional[str]) -> Decimal:
    """Amounts are lenient to zero: absent or unparseable values become 0."""
    if text is None:
        return Decimal(0)
    value = _to_decimal(text)
    return value if value is not None else Decimal(0)


def parse_score(text: Optional[str]) -> Optional[int]:
    """The score is lenient to null: absent or unparseable values become None."""
    if text is None:
        return None
    value = _to_decimal(text)
    return int(value) if value is not None else None


def parse_count(text: Optional[str]) -> int:
    return int(parse_amount(text))


def normalize_phone(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    return _PHONE_NOISE.sub("", text) or None


# =============================================================================
# CANDIDATE RESOLUTION
# =============================================================================


def candidate_texts(node: TreeNode, candidate: Candidate, flatten: bool = False) -> List[str]:
    """All non-empty values a single candidate yields, in document order."""
    if isinstance(candidate, Joined):
        parts = [first_text(node, [path]) for path in candidate.paths]
        joined = candidate.separator.join(part for part in parts if part)
        return [joined] if joined else []

    texts = []
    for match in select(node, candidate):
        text = flattened_text(match) if flatten else clean_text(match.text())
        if text is not None:
            texts.append(text)
    return texts


def resolve(node: TreeNode, candidates: Sequence[Candidate], flatten: bool = False) -> Optional[str]:
    """Value of the first candidate that yields non-empty text."""
    for candidate in candidates:
        texts = candidate_texts(node, candidate, flatten)
        if texts:
            return texts[0]
    return None


def find_accounts(root: TreeNode) -> List[TreeNode]:
    for path in ACCOUNT_COLLECTION_PATHS:
        matches = select(root, path)
        if matches:
            return matches
    return []


# =============================================================================
# SECTION EXTRACTORS
# =============================================================================


def extract_basic_details(root: TreeNode) -> BasicDetails:
    return BasicDetails(
        name=resolve(root, BASIC_DETAILS_PATHS["name"]),
        mobile_phone=normalize_phone(resolve(root, BASIC_DETAILS_PATHS["mobile_phone"])),
        pan=resolve(root, BASIC_DETAILS_PATHS["pan"]),
        credit_score=parse_score(resolve(root, SCORE_PATHS)),
    )


def extract_account(node: TreeNode) -> CreditAccount:
    return CreditAccount(
        type=resolve(node, ACCOUNT_TEXT_PATHS["type"]),
        bank=resolve(node, ACCOUNT_TEXT_PATHS["bank"]),
        account_number=resolve(node, ACCOUNT_TEXT_PATHS["account_number"]),
        address=resolve(node, ACCOUNT_TEXT_PATHS["address"], flatten=True),
        status=resolve(node, ACCOUNT_TEXT_PATHS["status"]),
        current_balance=parse_amount(resolve(node, ACCOUNT_AMOUNT_PATHS["current_balance"])),
        amount_overdue=parse_amount(resolve(node, ACCOUNT_AMOUNT_PATHS["amount_overdue"])),
    )


def extract_explicit_summary(root: TreeNode) -> ReportSummary:
    """Summary figures present in the document. Absent fields stay None."""
    values = {}
    for field_name, candidates in SUMMARY_COUNT_PATHS.items():
        text = resolve(root, candidates)
        values[field_name] = None if text is None else parse_count(text)
    for field_name, candidates in SUMMARY_AMOUNT_PATHS.items():
        text = resolve(root, candidates)
        values[field_name] = None if text is None else parse_amount(text)
    return ReportSummary(**values)


def collect_addresses(root: TreeNode, accounts: List[CreditAccount]) -> List[str]:
    """Applicant addresses, then account addresses, first occurrence kept."""
    found = []
    for candidate in APPLICANT_ADDRESS_PATHS:
        found.extend(candidate_texts(root, candidate, flatten=True))
    found.extend(a.address for a in accounts if a.address)

    addresses: List[str] = []
    for address in found:
        if address not in addresses:
            addresses.append(address)
    return addresses


# =============================================================================
# ENTRY POINT
# =============================================================================


def extract(raw_markup: Union[str, bytes]) -> CreditReport:
    """
    Extract a normalized credit report from raw bureau XML.

    Missing optional fields never fail extraction; only markup that cannot be
    parsed does.

    Raises:
        ParseError: If the markup is empty or not well-formed
    """
    root = parse_document(raw_markup)

    accounts = [extract_account(node) for node in find_accounts(root)]
    report = CreditReport(
        basic_details=extract_basic_details(root),
        report_summary=merge_summary(extract_explicit_summary(root), accounts),
        credit_accounts=accounts,
        addresses=collect_addresses(root, accounts),
    )

    logger.debug(
        "Report extracted",
        extra={
            "step": "extract",
            "root_tag": root.tag,
            "account_count": len(accounts),
            "address_count": len(report.addresses),
        },
    )
    return report
