"""Tests for the async GitHub contents client."""

import json

import httpx
import pytest

from gh import DirectoryListing, GitHubAPIError, GitHubClient, GitHubResponseError, NotAFileError, SingleFile
from gh.client import contents_endpoint, get_token

from .conftest import Recorder, dir_payload, file_payload, put_payload


def make_client(handler, **kwargs):
    recorder = Recorder(handler)
    return GitHubClient(token="tok", transport=recorder.transport, **kwargs), recorder


class TestGetToken:
    def test_explicit_token_wins(self, monkeypatch):
        monkeypatch.setenv("GH_TOKEN", "env-token")
        assert get_token("explicit") == "explicit"

    def test_env_token(self, monkeypatch):
        monkeypatch.delenv("GH_TOKEN", raising=False)
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        assert get_token(None) == "env-token"

    def test_no_token(self, monkeypatch):
        monkeypatch.delenv("GH_TOKEN", raising=False)
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        assert get_token(None) is None


def test_contents_endpoint_strips_slashes_and_quotes():
    assert contents_endpoint("octo", "repo", "/docs/my file.md/") == "/repos/octo/repo/contents/docs/my%20file.md"
    assert contents_endpoint("octo", "repo", "") == "/repos/octo/repo/contents/"


@pytest.mark.asyncio
async def test_request_headers():
    client, recorder = make_client(lambda request: httpx.Response(200, json=[]))
    await client.get_contents("octo", "repo", "", "main")

    request = recorder.requests[0]
    assert request.headers["Authorization"] == "token tok"
    assert request.headers["Accept"] == "application/vnd.github.v3+json"
    assert request.url.params["ref"] == "main"


@pytest.mark.asyncio
async def test_get_contents_directory():
    client, _ = make_client(
        lambda request: httpx.Response(200, json=[dir_payload("docs"), file_payload("a.txt")])
    )
    listing = await client.get_contents("octo", "repo", "")

    assert isinstance(listing, DirectoryListing)
    assert [e.name for e in listing.entries] == ["docs", "a.txt"]
    assert listing.entries[0].is_dir
    assert listing.entries[0].content is None


@pytest.mark.asyncio
async def test_get_contents_single_file():
    client, _ = make_client(lambda request: httpx.Response(200, json=file_payload("a.txt", sha="abc")))
    listing = await client.get_contents("octo", "repo", "a.txt")

    assert isinstance(listing, SingleFile)
    assert listing.entry.sha == "abc"
    assert listing.entry.encoding == "base64"


@pytest.mark.asyncio
async def test_get_file_rejects_directory():
    client, _ = make_client(lambda request: httpx.Response(200, json=[file_payload("docs/a.txt")]))
    with pytest.raises(NotAFileError, match="docs"):
        await client.get_file("octo", "repo", "docs")


@pytest.mark.asyncio
async def test_error_response_keeps_server_message():
    client, _ = make_client(lambda request: httpx.Response(404, json={"message": "Not Found"}))
    with pytest.raises(GitHubAPIError) as exc_info:
        await client.get_contents("octo", "repo", "missing")

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Not Found"


@pytest.mark.asyncio
async def test_error_response_without_json_body():
    client, _ = make_client(lambda request: httpx.Response(502, text="bad gateway"))
    with pytest.raises(GitHubAPIError) as exc_info:
        await client.get_contents("octo", "repo", "")

    assert exc_info.value.message is None
    assert "502" in str(exc_info.value)


@pytest.mark.asyncio
async def test_reads_are_single_attempt_by_default():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client, recorder = make_client(handler)
    with pytest.raises(httpx.ConnectError):
        await client.get_contents("octo", "repo", "")
    assert len(recorder.requests) == 1


@pytest.mark.asyncio
async def test_put_file_create_omits_sha():
    client, recorder = make_client(lambda request: httpx.Response(201, json=put_payload("a.txt")))
    result = await client.put_file("octo", "repo", "a.txt", "aGVsbG8=", "Upload a.txt", branch="dev")

    body = json.loads(recorder.requests[0].content)
    assert recorder.requests[0].method == "PUT"
    assert body == {"message": "Upload a.txt", "content": "aGVsbG8=", "branch": "dev"}
    assert result.content.html_url == "https://github.com/octo/repo/blob/main/a.txt"
    assert result.commit_sha == "commit-sha"


@pytest.mark.asyncio
async def test_put_file_update_sends_sha():
    client, recorder = make_client(lambda request: httpx.Response(200, json=put_payload("a.txt")))
    await client.put_file("octo", "repo", "a.txt", "aGVsbG8=", "Update a.txt", sha="old-sha")

    body = json.loads(recorder.requests[0].content)
    assert body["sha"] == "old-sha"


@pytest.mark.asyncio
async def test_non_json_success_body_raises_response_error():
    client, _ = make_client(lambda request: httpx.Response(200, text="<html>proxy</html>"))
    with pytest.raises(GitHubResponseError) as exc_info:
        await client.get_contents("octo", "repo", "docs")
    assert exc_info.value.endpoint == "/repos/octo/repo/contents/docs"


@pytest.mark.asyncio
async def test_listing_item_missing_fields_raises_response_error():
    client, _ = make_client(lambda request: httpx.Response(200, json=[{"name": "x"}]))
    with pytest.raises(GitHubResponseError):
        await client.get_contents("octo", "repo", "docs")


@pytest.mark.asyncio
async def test_put_file_without_content_raises_response_error():
    client, _ = make_client(lambda request: httpx.Response(201, json={"commit": {}}))
    with pytest.raises(GitHubResponseError):
        await client.put_file("octo", "repo", "a.txt", "eA==", "Upload a.txt")
