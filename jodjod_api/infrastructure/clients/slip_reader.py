"""S3 + Textract client for storing slip images and reading their text"""

from datetime import datetime
from typing import List
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from jodjod_api.config import settings
from jodjod_api.domain.exceptions import SlipReadError


class SlipReader:
    """Client for slip image storage and text detection"""

    def __init__(self, s3_client=None, textract_client=None, bucket: str | None = None):
        self.bucket = bucket or settings.aws_bucket
        self.slip_path = settings.aws_bucket_slip_path
        self.s3 = s3_client or boto3.client("s3", **self._client_kwargs())
        self.textract = textract_client or boto3.client("textract", **self._client_kwargs())

    @staticmethod
    def _client_kwargs() -> dict:
        kwargs = {"region_name": settings.aws_region}
        if settings.aws_access_key_id and settings.aws_secret_access_key:
            kwargs["aws_access_key_id"] = settings.aws_access_key_id
            kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
        return kwargs

    def object_key(self, spender_id: int, filename: str, now: datetime) -> str:
        return f"{self.slip_path}/{spender_id}_{now.strftime('%Y%m%d%H%M%S')}_{filename}"

    def upload(self, spender_id: int, filename: str, body: bytes, now: datetime) -> str:
        """
        Store slip image in the bucket.

        Returns:
            Object key of the stored image

        Raises:
            SlipReadError: If the upload fails
        """
        key = self.object_key(spender_id, filename, now)
        try:
            self.s3.put_object(Bucket=self.bucket, Key=key, Body=body)
        except (BotoCoreError, ClientError) as e:
            raise SlipReadError("failed to upload slip file to S3") from e
        return key

    def detect_lines(self, object_key: str) -> List[str]:
        """
        Run text detection on a stored slip and return its LINE blocks in order.

        Raises:
            SlipReadError: If Textract rejects the document
        """
        try:
            result = self.textract.detect_document_text(
                Document={"S3Object": {"Bucket": self.bucket, "Name": object_key}}
            )
        except (BotoCoreError, ClientError) as e:
            raise SlipReadError("failed to detect document text") from e

        return [
            block.get("Text", "")
            for block in result.get("Blocks", [])
            if block.get("BlockType") == "LINE"
        ]
