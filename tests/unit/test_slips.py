"""Unit tests for slip text parsing and the S3/Textract slip reader"""

import pytest
from datetime import datetime
from unittest.mock import MagicMock
from botocore.exceptions import ClientError
from jodjod_api.domain.slips import fix_ocr_text, parse_slip_lines
from jodjod_api.domain.exceptions import SlipReadError
from jodjod_api.infrastructure.clients.slip_reader import SlipReader


def transfer_slip_lines(amount_line: str = "1,250.00 unn") -> list[str]:
    lines = [f"line {i}" for i in range(13)]
    lines[9] = amount_line
    return lines


def bill_slip_lines(amount_line: str = "89.50 unn") -> list[str]:
    lines = [f"line {i}" for i in range(15)]
    lines[11] = amount_line
    return lines


def test_fix_ocr_text_replaces_known_misreads():
    assert fix_ocr_text("500.00 unn") == "500.00 bath"
    assert fix_ocr_text("no change") == "no change"


def test_parse_transfer_slip():
    reading = parse_slip_lines(transfer_slip_lines())

    assert reading.category == "transfer"
    assert reading.amount == 1250.0


def test_parse_bill_payment_slip():
    reading = parse_slip_lines(bill_slip_lines())

    assert reading.category == "bill payment"
    assert reading.amount == 89.5


def test_parse_short_slip_raises():
    with pytest.raises(SlipReadError):
        parse_slip_lines(["only", "three", "lines"])


def test_parse_unreadable_amount_raises():
    with pytest.raises(SlipReadError):
        parse_slip_lines(transfer_slip_lines("amount: ???"))


def test_slip_reader_upload_object_key():
    s3 = MagicMock()
    reader = SlipReader(s3_client=s3, textract_client=MagicMock(), bucket="slips-bucket")

    key = reader.upload(7, "receipt.jpg", b"img", datetime(2024, 1, 10, 12, 0, 5))

    assert key == f"{reader.slip_path}/7_20240110120005_receipt.jpg"
    s3.put_object.assert_called_once_with(Bucket="slips-bucket", Key=key, Body=b"img")


def test_slip_reader_upload_failure_raises():
    s3 = MagicMock()
    s3.put_object.side_effect = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
    reader = SlipReader(s3_client=s3, textract_client=MagicMock(), bucket="b")

    with pytest.raises(SlipReadError):
        reader.upload(1, "x.jpg", b"", datetime(2024, 1, 1))


def test_slip_reader_detect_lines_keeps_line_blocks():
    textract = MagicMock()
    textract.detect_document_text.return_value = {
        "Blocks": [
            {"BlockType": "PAGE"},
            {"BlockType": "LINE", "Text": "first"},
            {"BlockType": "WORD", "Text": "first"},
            {"BlockType": "LINE", "Text": "second"},
        ]
    }
    reader = SlipReader(s3_client=MagicMock(), textract_client=textract, bucket="b")

    assert reader.detect_lines("slips/key.jpg") == ["first", "second"]
    textract.detect_document_text.assert_called_once_with(
        Document={"S3Object": {"Bucket": "b", "Name": "slips/key.jpg"}}
    )
