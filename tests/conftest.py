"""
Shared test fixtures for s3-meta-sync.

S3 is mocked in-process with moto; ``fake_store`` is an in-memory blob
store for tests that need to inject failures.
"""
import os
from unittest.mock import patch

import boto3
import pytest
from moto import mock_aws

from s3_meta_sync.exceptions import ObjectNotFound
from s3_meta_sync.services.aws.operations import S3Operations
from s3_meta_sync.services.blob_store import BlobStore
from s3_meta_sync.services.sync_engine import Syncer
from s3_meta_sync.utils.config_loader import SyncConfig

BUCKET = "test-bucket"


class FakeBlobStore(BlobStore):
    """Dict-backed blob store that can be told to fail."""

    def __init__(self):
        self.objects = {}
        self.calls = []
        self._failures = {}

    def fail(self, method, error, times=1):
        """Make the next *times* calls to *method* raise *error*."""
        self._failures[method] = [error] * times

    def _maybe_fail(self, method):
        pending = self._failures.get(method)
        if pending:
            raise pending.pop(0)

    def list(self, bucket, prefix=""):
        self.calls.append(("list", bucket, prefix))
        start = f"{prefix}/" if prefix else ""
        return sorted(k for (b, k) in self.objects if b == bucket and k.startswith(start))

    def get(self, bucket, key):
        self.calls.append(("get", bucket, key))
        self._maybe_fail("get")
        try:
            return self.objects[(bucket, key)]
        except KeyError:
            raise ObjectNotFound(bucket, key)

    def put(self, bucket, key, data):
        self.calls.append(("put", bucket, key))
        self._maybe_fail("put")
        self.objects[(bucket, key)] = bytes(data)

    def delete(self, bucket, key):
        self.calls.append(("delete", bucket, key))
        self._maybe_fail("delete")
        self.objects.pop((bucket, key), None)


@pytest.fixture
def aws_env():
    """Fake credentials so nothing can reach a real account."""
    with patch.dict(
        os.environ,
        {
            "AWS_ACCESS_KEY_ID": "testing",
            "AWS_SECRET_ACCESS_KEY": "testing",
            "AWS_DEFAULT_REGION": "us-east-1",
        },
    ):
        yield


@pytest.fixture
def s3_client(aws_env):
    """Mock S3 with moto and create the test bucket."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield client


@pytest.fixture
def store(s3_client):
    return S3Operations(s3_client)


@pytest.fixture
def syncer(store):
    return Syncer(store, SyncConfig(key="testing", secret="testing"))


@pytest.fixture
def fake_store():
    return FakeBlobStore()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the test inside an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_file(root, relative_path, content):
    """Create a file (and parents) below *root* with bytes or text content."""
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, str):
        content = content.encode("utf-8")
    path.write_bytes(content)
    return path


@pytest.fixture
def make_file():
    return write_file


def download(client, key):
    """Fetch an object's bytes from the mocked bucket, or None if missing."""
    try:
        return client.get_object(Bucket=BUCKET, Key=key)["Body"].read()
    except client.exceptions.NoSuchKey:
        return None


@pytest.fixture
def remote_object(s3_client):
    return lambda key: download(s3_client, key)


@pytest.fixture
def uploaded_structure(workdir, syncer, make_file):
    """``foo/xxx`` containing ``yyy\\n`` synced to ``test-bucket:bar``."""
    make_file(workdir, "foo/xxx", "yyy\n")
    syncer.sync("foo", f"{BUCKET}:bar")
    return workdir
