"""
S3-based state store.

The whole state lives in one object: {prefix}/state.json
Body format: {"address": "<base64 bytes>", ...}

A batch is a read-merge-put of that single object. S3 PUT of one object is
atomic, so readers observe all of a batch or none of it. The PUT is
conditional on the ETag that was read (If-None-Match: * when the object does
not exist yet), so a batch never overwrites one committed in between.
"""

import base64
import binascii
import json
import os
from typing import Dict, Iterable, Mapping, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..core.canonical import canonical_json_bytes
from ..core.errors import StoreUnavailable
from .store import StateStore


class S3StateStore(StateStore):
    """
    Single-object state store on S3 (or MinIO, localstack, ...).

    Writes are optimistic: when another writer commits between our read and
    our PUT, the batch is rejected with StoreUnavailable and nothing is
    written. The caller re-runs the transaction against the new state.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "state",
        endpoint_url: Optional[str] = None,
        region: str = "us-east-1",
    ) -> None:
        """
        Initialize S3 state store.

        Args:
            bucket: S3 bucket name
            prefix: Key prefix (default: "state")
            endpoint_url: S3 endpoint URL (for MinIO, localstack, etc.)
            region: AWS region (default: us-east-1)

        Raises:
            StoreUnavailable: If the client cannot be created or the bucket is not accessible
        """
        self.bucket = bucket
        self.prefix = prefix.rstrip("/")
        self.key = f"{self.prefix}/state.json"

        try:
            self.s3_client = boto3.client("s3", endpoint_url=endpoint_url, region_name=region)
        except (BotoCoreError, ValueError) as e:
            raise StoreUnavailable(f"Failed to create S3 client: {e}") from e

        if os.getenv("MOJI_S3_SKIP_BUCKET_CHECK", "").lower() != "true":
            try:
                self.s3_client.head_bucket(Bucket=bucket)
            except (BotoCoreError, ClientError) as e:
                code = getattr(e, "response", {}).get("Error", {}).get("Code", "Unknown")
                raise StoreUnavailable(f"Bucket '{bucket}' not accessible (code: {code})") from e

    def _load(self) -> Tuple[Dict[str, bytes], Optional[str]]:
        """Return the current state and the ETag it was read at (None if absent)."""
        try:
            response = self.s3_client.get_object(Bucket=self.bucket, Key=self.key)
            etag = response.get("ETag")
            body = response["Body"].read().decode("utf-8")
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in ("NoSuchKey", "404"):
                return {}, None
            raise StoreUnavailable(f"Failed to read s3://{self.bucket}/{self.key}: {e}") from e
        except BotoCoreError as e:
            raise StoreUnavailable(f"Failed to read s3://{self.bucket}/{self.key}: {e}") from e

        try:
            raw = json.loads(body)
            return {address: base64.b64decode(value) for address, value in raw.items()}, etag
        except (ValueError, AttributeError, binascii.Error) as e:
            raise StoreUnavailable(f"Corrupt state object s3://{self.bucket}/{self.key}: {e}") from e

    def _put(self, state: Mapping[str, bytes], etag: Optional[str]) -> None:
        """
        Write the state object only if it is still the version read at `etag`.

        Raises:
            StoreUnavailable: On conflict (another writer committed in between)
                or any S3 failure. Nothing is written in either case.
        """
        doc = {address: base64.b64encode(value).decode("ascii") for address, value in state.items()}
        condition = {"IfMatch": etag.strip('"')} if etag else {"IfNoneMatch": "*"}
        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=self.key,
                Body=canonical_json_bytes(doc),
                ContentType="application/json",
                **condition,
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in ("PreconditionFailed", "412", "ConditionalRequestConflict", "409"):
                raise StoreUnavailable(
                    f"Conflicting write to s3://{self.bucket}/{self.key}; batch not applied"
                ) from e
            raise StoreUnavailable(f"Failed to write s3://{self.bucket}/{self.key}: {e}") from e
        except BotoCoreError as e:
            raise StoreUnavailable(f"Failed to write s3://{self.bucket}/{self.key}: {e}") from e

    def get(self, address: str) -> Optional[bytes]:
        return self._load()[0].get(address)

    def get_many(self, addresses: Iterable[str]) -> Dict[str, bytes]:
        state, _ = self._load()
        return {a: state[a] for a in addresses if a in state}

    def set_batch(self, entries: Mapping[str, bytes]) -> None:
        state, etag = self._load()
        state.update(entries)
        self._put(state, etag)

    def delete_batch(self, addresses: Iterable[str]) -> None:
        state, etag = self._load()
        for address in addresses:
            state.pop(address, None)
        self._put(state, etag)

    def items(self, prefix: str = "") -> Dict[str, bytes]:
        return {k: v for k, v in self._load()[0].items() if k.startswith(prefix)}
