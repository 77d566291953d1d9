import asyncio
import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError
import os

from http_screenshotter.console import console
from http_screenshotter.models import StoredArtifact


class S3Error(Exception):
    pass


class S3Client:
    def __init__(self, config):
        session = (
            boto3.Session(profile_name=config.aws_profile)
            if config.aws_profile
            else boto3.Session()
        )

        # Configure client with s3v4 signature and path-style addressing
        boto_config = BotoConfig(
            retries=dict(max_attempts=3),
            signature_version="s3v4",
            s3={"addressing_style": "path"},
        )

        client_args = {
            "service_name": "s3",
            "config": boto_config,
        }

        if config.aws_endpoint_url:
            client_args.update(
                {
                    "endpoint_url": config.aws_endpoint_url,
                    "aws_access_key_id": config.aws_access_key_id,
                    "aws_secret_access_key": (
                        config.aws_secret_access_key.get_secret_value()
                        if config.aws_secret_access_key
                        else None
                    ),
                    "region_name": config.aws_region,
                }
            )

        self.s3 = session.client(**client_args)
        self.config = config

    async def upload_file(self, filepath: str, key: str | None = None) -> None:
        """Upload a file to the configured bucket

        Args:
            filepath: Path to the file to upload
            key: Optional object key. If not provided, uses basename of filepath
        """
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"File not found: {filepath}")

        if key is None:
            key = os.path.basename(filepath)

        size = os.path.getsize(filepath)
        if size > self.config.max_file_size_mb * 1024 * 1024:
            raise ValueError(
                f"File size exceeds maximum allowed size of {self.config.max_file_size_mb} mb"
            )

        await asyncio.to_thread(self._upload, filepath, key)

    def _upload(self, filepath: str, key: str) -> None:
        try:
            with open(filepath, "rb") as file:
                self.s3.upload_fileobj(
                    file,
                    self.config.aws_bucket_name,
                    key,
                    ExtraArgs={"ContentType": "image/png"},
                )
        except ClientError as e:
            raise S3Error(f"Failed to upload file to S3: {str(e)}") from e

    def file_exists(self, key: str) -> bool:
        """Check if an object exists in the bucket.

        Args:
            key: The object key in the bucket.

        Returns:
            bool: True if the object exists, False otherwise.
        """
        try:
            self.s3.head_object(Bucket=self.config.aws_bucket_name, Key=key)
            return True
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code")
            if error_code in ["404", "NoSuchKey", "NotFound"]:
                return False
            raise S3Error(f"Error checking object existence: {str(e)}") from e

    async def mirror(self, artifact: StoredArtifact) -> bool:
        """Upload a stored artifact under its content-addressed key.

        Returns False when the bucket already holds that content.
        """
        key = f"{artifact.hash}.png"
        if await asyncio.to_thread(self.file_exists, key):
            console.log(f"s3://{self.config.aws_bucket_name}/{key} already exists")
            return False
        await self.upload_file(artifact.path, key)
        console.log(f"Uploaded {artifact.path} to s3://{self.config.aws_bucket_name}/{key}")
        return True
