"""Slip text parsing - turn OCR lines into a category and amount"""

from typing import List
from jodjod_api.domain.models import SlipReading
from jodjod_api.domain.exceptions import SlipReadError

# Frequent OCR misreads on bank slips
OCR_REPLACEMENTS = {
    "unn": "bath",
}

TRANSFER_SLIP_LINE_COUNT = 13
TRANSFER_AMOUNT_LINE = 9
BILL_PAYMENT_AMOUNT_LINE = 11


def fix_ocr_text(text: str) -> str:
    """Apply known OCR corrections to a single line"""
    for keyword, value in OCR_REPLACEMENTS.items():
        if keyword in text:
            text = text.replace(keyword, value)
    return text


def parse_slip_lines(lines: List[str]) -> SlipReading:
    """
    Extract category and amount from the text lines of a slip.

    Layout rules:
    - 13 lines: transfer slip, amount leads line 10
    - otherwise: bill payment slip, amount leads line 12

    Raises:
        SlipReadError: If the amount line is missing or not a number
    """
    fixed = [fix_ocr_text(line) for line in lines]

    if len(fixed) == TRANSFER_SLIP_LINE_COUNT:
        category, index = "transfer", TRANSFER_AMOUNT_LINE
    else:
        category, index = "bill payment", BILL_PAYMENT_AMOUNT_LINE

    if index >= len(fixed):
        raise SlipReadError(f"Slip has {len(fixed)} lines, amount line {index + 1} missing")

    token = fixed[index].split(" ")[0].replace(",", "")
    try:
        amount = float(token)
    except ValueError as e:
        raise SlipReadError(f"Unreadable slip amount: {token!r}") from e

    return SlipReading(category=category, amount=amount)
