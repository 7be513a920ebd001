"""
S3Client - S3/MinIO object access for banner sets.
"""

import logging
from typing import Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .errors import AssetNotFound
from .s3_config import S3Config

NOT_FOUND_CODES = {'404', 'NoSuchKey', 'NotFound'}


class S3Client:
    """
    Wrapper for S3/MinIO operations.

    The underlying boto3 client is thread-safe and shared by all
    invocations; every call names its bucket explicitly.
    """

    def __init__(self, config: S3Config, logger: Optional[logging.Logger] = None):
        """
        Initialize S3 client.

        Args:
            config: S3 configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        self._client = boto3.client(
            's3',
            endpoint_url=config.endpoint,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            config=Config(
                signature_version='s3v4',
                s3={'addressing_style': 'path'}
            ),
            verify=config.verify_ssl
        )

    @property
    def client(self):
        """Return the underlying boto3 client."""
        return self._client

    @staticmethod
    def _is_not_found(error: ClientError) -> bool:
        return error.response.get('Error', {}).get('Code') in NOT_FOUND_CODES

    def object_exists(self, bucket: str, key: str) -> bool:
        """Check if an object exists in S3."""
        try:
            self._client.head_object(Bucket=bucket, Key=key)
            return True
        except ClientError as e:
            if self._is_not_found(e):
                return False
            raise

    def get_object_metadata(self, bucket: str, key: str) -> Optional[dict]:
        """Get size, content type and user metadata for an S3 object."""
        try:
            response = self._client.head_object(Bucket=bucket, Key=key)
            return {
                'size': response['ContentLength'],
                'content_type': response.get('ContentType', 'application/octet-stream'),
                'metadata': dict(response.get('Metadata', {})),
            }
        except ClientError as e:
            if self._is_not_found(e):
                return None
            raise

    def download_object(self, bucket: str, key: str) -> bytes:
        """
        Download an object from S3.

        Raises:
            AssetNotFound: If the object does not exist
        """
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
        except ClientError as e:
            if self._is_not_found(e):
                raise AssetNotFound(bucket, key) from e
            raise
        return response['Body'].read()

    def upload_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str = 'application/octet-stream',
        metadata: Optional[Dict[str, str]] = None
    ) -> None:
        """Upload an object to S3."""
        self._client.put_object(
            Bucket=bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
            Metadata=metadata or {}
        )

    def delete_object(self, bucket: str, key: str) -> None:
        """Delete an object from S3 (no error if it is already gone)."""
        self._client.delete_object(Bucket=bucket, Key=key)
