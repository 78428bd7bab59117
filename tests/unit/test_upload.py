"""Unit tests for upload URL templating and the asset upload pipeline."""

import pytest

from ghrelease.models.release import Asset, RemoteRelease
from ghrelease.pipeline.upload import DEFAULT_MEDIA_TYPE, AssetUploader, expand_upload_url

from github_fakes import release_json, upload_path


class TestExpandUploadUrl:
    def test_name_only(self):
        url = expand_upload_url("https://host/assets{?name,label}", "app.zip")
        assert url == "https://host/assets?name=app.zip"

    def test_name_is_percent_encoded(self):
        url = expand_upload_url("https://host/assets{?name,label}", "my app+1.zip")
        assert url == "https://host/assets?name=my%20app%2B1.zip"

    def test_label_when_given(self):
        url = expand_upload_url("https://host/assets{?name,label}", "a.zip", label="Linux build")
        assert url == "https://host/assets?name=a.zip&label=Linux%20build"

    def test_template_without_query(self):
        assert expand_upload_url("https://host/assets", "a.zip") == "https://host/assets"


@pytest.fixture
def release():
    return RemoteRelease.model_validate(release_json(7, "v1.0.0"))


@pytest.mark.asyncio
class TestAssetUploader:
    async def test_zero_assets_zero_requests(self, github, client, release):
        outcomes = await AssetUploader(client).upload_all(release, [])
        assert outcomes == []
        assert github.requests == []

    async def test_uploads_in_order_with_sniffed_types(self, github, client, release, asset_dir):
        github.add("POST", upload_path(7), 201, json={"browser_download_url": "https://dl/x"})
        assets = [
            Asset(name="notes.pdf", path=asset_dir / "notes.pdf"),
            Asset(name="app.zip", path=asset_dir / "app.zip"),
        ]
        outcomes = await AssetUploader(client).upload_all(release, assets)

        assert [o.name for o in outcomes] == ["notes.pdf", "app.zip"]
        assert all(o.ok and o.status_code == 201 for o in outcomes)
        assert outcomes[0].browser_download_url == "https://dl/x"

        first, second = github.requests
        assert str(first.url) == f"https://uploads.github.com{upload_path(7)}?name=notes.pdf"
        assert first.headers["Content-Type"] == "application/pdf"
        assert first.content == (asset_dir / "notes.pdf").read_bytes()
        assert second.headers["Content-Type"] == "application/zip"

    async def test_unknown_type_falls_back_with_warning(self, github, client, release, asset_dir):
        github.add("POST", upload_path(7), 201, json={})
        uploader = AssetUploader(client)
        [outcome] = await uploader.upload_all(release, [Asset(name="blob.bin", path=asset_dir / "blob.bin")])

        assert outcome.ok
        assert outcome.media_type == DEFAULT_MEDIA_TYPE
        assert github.requests[0].headers["Content-Type"] == DEFAULT_MEDIA_TYPE
        assert any("blob.bin" in w for w in uploader.warnings)

    async def test_explicit_media_type_skips_sniffing(self, github, client, release, asset_dir):
        github.add("POST", upload_path(7), 201, json={})
        asset = Asset(name="blob.bin", path=asset_dir / "blob.bin", media_type="application/x-custom")
        uploader = AssetUploader(client)
        [outcome] = await uploader.upload_all(release, [asset])
        assert outcome.media_type == "application/x-custom"
        assert uploader.warnings == []

    async def test_failed_upload_recorded_and_batch_continues(self, github, client, release, asset_dir):
        github.add("POST", upload_path(7), 422, json={"message": "Validation Failed", "errors": [{"code": "already_exists"}]})
        assets = [
            Asset(name="app.zip", path=asset_dir / "app.zip"),
            Asset(name="notes.pdf", path=asset_dir / "notes.pdf"),
        ]
        outcomes = await AssetUploader(client).upload_all(release, assets)

        assert len(github.requests) == 2
        assert [o.ok for o in outcomes] == [False, False]
        assert outcomes[0].status_code == 422
        assert "already_exists" in outcomes[0].error
