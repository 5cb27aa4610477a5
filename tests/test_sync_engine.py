"""End-to-end tests for Syncer against a moto-mocked bucket."""
import ssl
from unittest.mock import patch

import pytest

from s3_meta_sync.exceptions import ConfigurationError, MetadataFormatError, RemoteWithoutMetadata, TransferFailure
from s3_meta_sync.models import META_FILE, Direction
from s3_meta_sync.services.sync_engine import Syncer
from s3_meta_sync.utils.config_loader import SyncConfig

BUCKET = "test-bucket"
FOO_MD5 = b"---\nxxx: 0976fb571ada412514fe67273780c510\n"


class TestSyncLocalToRemote:

    def test_uploads_files(self, uploaded_structure, remote_object):
        assert remote_object("bar/xxx") == b"yyy\n"
        assert remote_object(f"bar/{META_FILE}") == FOO_MD5

    def test_writes_local_metadata(self, uploaded_structure):
        assert (uploaded_structure / "foo" / META_FILE).read_bytes() == FOO_MD5

    def test_reports_counts(self, workdir, syncer, make_file):
        make_file(workdir, "foo/xxx", "yyy\n")
        make_file(workdir, "foo/sub/zzz", "zzz\n")

        result = syncer.sync("foo", f"{BUCKET}:bar")

        assert result.direction is Direction.UPLOAD
        assert result.uploaded == 2
        assert result.deleted == 0
        assert result.summary() == "Uploading: 2 Deleting: 0"

    def test_removes_obsolete_files(self, uploaded_structure, syncer, make_file, remote_object):
        (uploaded_structure / "foo" / "xxx").unlink()
        make_file(uploaded_structure, "foo/zzz", "yyy\n")

        result = syncer.sync("foo", f"{BUCKET}:bar")

        assert result.deleted == 1
        assert remote_object("bar/xxx") is None
        assert remote_object("bar/zzz") == b"yyy\n"

    def test_does_not_upload_or_delete_when_nothing_changed(self, uploaded_structure, syncer):
        with patch.object(syncer.executor, "upload_file", wraps=syncer.executor.upload_file) as upload, \
                patch.object(syncer.executor, "delete_remote_file") as delete:
            result = syncer.sync("foo", f"{BUCKET}:bar")

        upload.assert_called_once()
        assert upload.call_args.args[:2] == ("foo", META_FILE)
        delete.assert_not_called()
        assert result.summary() == "Uploading: 0 Deleting: 0"

    def test_upload_to_bucket_root(self, workdir, syncer, make_file, remote_object):
        make_file(workdir, "foo/xxx", "yyy\n")

        syncer.sync("foo", f"{BUCKET}:")

        assert remote_object("xxx") == b"yyy\n"
        assert remote_object(META_FILE) == FOO_MD5

    def test_parallel_upload(self, workdir, store, make_file, remote_object):
        for i in range(10):
            make_file(workdir, f"foo/d{i % 3}/f{i}", f"content {i}")
        syncer = Syncer(store, SyncConfig(key="k", secret="s", parallel=4))

        result = syncer.sync("foo", f"{BUCKET}:bar")

        assert result.uploaded == 10
        assert remote_object("bar/d1/f4") == b"content 4"
        assert syncer.sync("foo", f"{BUCKET}:bar").uploaded == 0


class TestSyncRemoteToLocal:

    def test_fails_when_remote_has_no_metadata(self, uploaded_structure, syncer):
        with pytest.raises(RemoteWithoutMetadata):
            syncer.sync(f"{BUCKET}:baz", "foo")

        assert (uploaded_structure / "foo" / "xxx").read_bytes() == b"yyy\n"

    def test_no_metadata_guard_deletes_nothing(self, uploaded_structure, syncer, s3_client):
        s3_client.put_object(Bucket=BUCKET, Key="baz/stray", Body=b"s")

        with patch.object(syncer.executor, "delete_local_file") as delete:
            with pytest.raises(RemoteWithoutMetadata, match="1 object"):
                syncer.sync(f"{BUCKET}:baz", "foo")

        delete.assert_not_called()

    def test_downloads_into_an_empty_folder(self, uploaded_structure, syncer):
        result = syncer.sync(f"{BUCKET}:bar", "foo2")

        assert result.downloaded == 1
        assert (uploaded_structure / "foo2" / "xxx").read_bytes() == b"yyy\n"
        assert (uploaded_structure / "foo2" / META_FILE).read_bytes() == FOO_MD5

    def test_downloads_nothing_when_up_to_date(self, uploaded_structure, syncer):
        with patch.object(syncer.executor, "download_file") as download, \
                patch.object(syncer.executor, "delete_local_file") as delete:
            result = syncer.sync(f"{BUCKET}:bar", "foo")

        download.assert_not_called()
        delete.assert_not_called()
        assert result.summary() == "Downloading: 0 Deleting: 0"
        assert (uploaded_structure / "foo" / META_FILE).read_bytes() == FOO_MD5

    def test_local_metadata_matches_the_snapshot_that_was_synced(self, uploaded_structure, syncer, s3_client):
        real_execute = syncer.executor.execute

        def execute_then_change_remote(plan, local_root, remote):
            real_execute(plan, local_root, remote)
            s3_client.put_object(Bucket=BUCKET, Key=f"bar/{META_FILE}", Body=b"---\nother: abc\n")

        with patch.object(syncer.executor, "execute", side_effect=execute_then_change_remote):
            syncer.sync(f"{BUCKET}:bar", "copy")

        assert (uploaded_structure / "copy" / META_FILE).read_bytes() == FOO_MD5

    def test_remote_file_replaces_local_directory(self, workdir, syncer, make_file):
        make_file(workdir, "src/a", "now a file")
        syncer.sync("src", f"{BUCKET}:bar")
        make_file(workdir, "dst/a/b", "old")

        result = syncer.sync(f"{BUCKET}:bar", "dst")

        assert (result.downloaded, result.deleted) == (1, 1)
        assert (workdir / "dst" / "a").read_bytes() == b"now a file"

    def test_remote_directory_replaces_local_file(self, workdir, syncer, make_file):
        make_file(workdir, "src/a/b", "now nested")
        syncer.sync("src", f"{BUCKET}:bar")
        make_file(workdir, "dst/a", "old")

        result = syncer.sync(f"{BUCKET}:bar", "dst")

        assert (result.downloaded, result.deleted) == (1, 1)
        assert (workdir / "dst" / "a" / "b").read_bytes() == b"now nested"
        assert syncer.sync(f"{BUCKET}:bar", "dst").downloaded == 0

    def test_rejects_metadata_pointing_outside_the_destination(self, workdir, syncer, s3_client):
        s3_client.put_object(
            Bucket=BUCKET, Key=f"evil/{META_FILE}",
            Body=b"---\n../escaped: 0976fb571ada412514fe67273780c510\n",
        )

        with pytest.raises(MetadataFormatError):
            syncer.sync(f"{BUCKET}:evil", "dst")

        assert not (workdir / "escaped").exists()
        assert not (workdir / "dst").exists()

    def test_deletes_obsolete_local_files(self, uploaded_structure, syncer, make_file):
        make_file(uploaded_structure, "foo/zzz", "yyy\n")

        syncer.sync(f"{BUCKET}:bar", "foo")

        assert not (uploaded_structure / "foo" / "zzz").exists()

    def test_removes_empty_folders(self, uploaded_structure, syncer):
        (uploaded_structure / "foo" / "baz").mkdir()

        syncer.sync(f"{BUCKET}:bar", "foo")

        assert not (uploaded_structure / "foo" / "baz").exists()

    def test_removes_folders_emptied_by_the_sync(self, uploaded_structure, syncer, make_file):
        make_file(uploaded_structure, "foo/a/b/c", "c")

        result = syncer.sync(f"{BUCKET}:bar", "foo")

        assert result.deleted == 1
        assert result.pruned == 2
        assert not (uploaded_structure / "foo" / "a").exists()
        assert (uploaded_structure / "foo" / "xxx").exists()

    def test_overwrites_locally_changed_files(self, uploaded_structure, syncer, make_file):
        make_file(uploaded_structure, "foo/xxx", "fff\n")

        syncer.sync(f"{BUCKET}:bar", "foo")

        assert (uploaded_structure / "foo" / "xxx").read_bytes() == b"yyy\n"

    def test_utf8_round_trip(self, workdir, syncer, make_file):
        make_file(workdir, "foo/utf8", "…")

        syncer.sync("foo", f"{BUCKET}:bar")
        syncer.sync(f"{BUCKET}:bar", "baz")

        read = (workdir / "baz" / "utf8").read_bytes().decode("utf-8")
        assert read == "…"


class TestFailures:

    def test_two_locals(self, syncer):
        with pytest.raises(ConfigurationError):
            syncer.sync("foo", "bar")

    def test_two_remotes(self, syncer):
        with pytest.raises(ConfigurationError):
            syncer.sync(f"{BUCKET}:foo", f"{BUCKET}:bar")

    def test_missing_local_source_does_not_wipe_remote(self, uploaded_structure, syncer, remote_object):
        with pytest.raises(ConfigurationError):
            syncer.sync("typo", f"{BUCKET}:bar")

        assert remote_object("bar/xxx") == b"yyy\n"

    def test_failed_transfer_leaves_metadata_untouched(self, uploaded_structure, syncer, make_file, remote_object):
        make_file(uploaded_structure, "foo/new", "new\n")

        with patch.object(syncer.store, "put", side_effect=ssl.SSLError()):
            with pytest.raises(TransferFailure):
                syncer.sync("foo", f"{BUCKET}:bar")

        assert remote_object(f"bar/{META_FILE}") == FOO_MD5
        assert (uploaded_structure / "foo" / META_FILE).read_bytes() == FOO_MD5

        # rerunning picks the change up again
        assert syncer.sync("foo", f"{BUCKET}:bar").uploaded == 1
        assert remote_object("bar/new") == b"new\n"

    @pytest.mark.parametrize("source, destination", [("foo", f"{BUCKET}:bar"), (f"{BUCKET}:bar", "foo")])
    def test_unwritable_local_metadata_is_a_transfer_failure(self, uploaded_structure, syncer, source, destination):
        with patch.object(syncer.builder, "write_local", side_effect=PermissionError("denied")):
            with pytest.raises(TransferFailure) as exc_info:
                syncer.sync(source, destination)

        assert exc_info.value.path == META_FILE
        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_single_transient_failure_is_recovered(self, uploaded_structure, syncer, make_file, remote_object):
        make_file(uploaded_structure, "foo/xxx", "changed\n")
        real_get = syncer.store.get
        calls = []

        def flaky_get(bucket, key):
            calls.append(key)
            if key == "bar/xxx" and calls.count(key) == 1:
                raise ssl.SSLError("handshake")
            return real_get(bucket, key)

        with patch.object(syncer.store, "get", side_effect=flaky_get):
            syncer.sync(f"{BUCKET}:bar", "foo")

        assert calls.count("bar/xxx") == 2
        assert (uploaded_structure / "foo" / "xxx").read_bytes() == b"yyy\n"


class TestIdempotence:

    def test_second_run_is_empty(self, workdir, syncer, make_file):
        make_file(workdir, "foo/a", "a")
        make_file(workdir, "foo/dir/b", "b")

        first = syncer.sync("foo", f"{BUCKET}:bar")
        second = syncer.sync("foo", f"{BUCKET}:bar")

        assert first.uploaded == 2
        assert (second.uploaded, second.deleted) == (0, 0)

    def test_second_download_is_empty(self, uploaded_structure, syncer):
        syncer.sync(f"{BUCKET}:bar", "copy")
        again = syncer.sync(f"{BUCKET}:bar", "copy")

        assert (again.downloaded, again.deleted, again.pruned) == (0, 0, 0)
