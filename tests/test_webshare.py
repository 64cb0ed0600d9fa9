import hashlib
import urllib.parse

import httpx
import pytest
from passlib.hash import md5_crypt

from webshare_stremio.errors import AuthenticationError, ProviderError
from webshare_stremio.services.webshare import WebshareClient, get_token, parse_response

SEARCH_XML = """<?xml version="1.0" encoding="UTF-8"?>
<response>
  <status>OK</status>
  <total>2</total>
  <file>
    <ident>abc123</ident>
    <name>Test.Movie.2024.mkv</name>
    <size>1000000</size>
    <positive_votes>5</positive_votes>
    <negative_votes>1</negative_votes>
    <img>https://img.webshare.cz/abc123.jpg</img>
    <password>0</password>
  </file>
  <file>
    <ident>locked</ident>
    <name>Test.Movie.2024.CZ.mkv</name>
    <size>2000000</size>
    <positive_votes>0</positive_votes>
    <negative_votes>0</negative_votes>
    <password>1</password>
  </file>
</response>
"""

FILE_INFO_XML = """<?xml version="1.0" encoding="UTF-8"?>
<response>
  <status>OK</status>
  <name>The.Relic.1999.mkv</name>
  <description>Czech dub</description>
  <size>2000000000</size>
  <positive_votes>3</positive_votes>
  <negative_votes>0</negative_votes>
  <stripe>https://img.webshare.cz/stripe.jpg</stripe>
  <bitrate>5400000</bitrate>
  <width>1920</width>
  <height>1080</height>
  <password>0</password>
</response>
"""

FATAL_XML = "<response><status>FATAL</status><code>FILE_INFO_FATAL_1</code><message>File not found.</message></response>"


class Recorder:
    """MockTransport handler answering per endpoint and keeping the posted forms."""

    def __init__(self, responses):
        self.responses = responses
        self.forms = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        endpoint = request.url.path.strip("/").split("/")[-1]
        self.forms[endpoint] = dict(urllib.parse.parse_qsl(request.content.decode()))
        status, body = self.responses[endpoint]
        return httpx.Response(status, text=body)


def client_for(responses):
    recorder = Recorder(responses)
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return WebshareClient(http, base_url="https://webshare.test/api"), recorder


@pytest.mark.asyncio
async def test_search_parses_files():
    client, recorder = client_for({"search": (200, SEARCH_XML)})
    files = await client.search("test query", "token123")

    assert recorder.forms["search"] == {"what": "test query", "category": "video", "limit": "100", "wst": "token123"}
    assert [f.ident for f in files] == ["abc123", "locked"]
    first = files[0]
    assert first.name == "Test.Movie.2024.mkv"
    assert first.size == 1000000
    assert (first.pos_votes, first.neg_votes) == (5, 1)
    assert first.img == "https://img.webshare.cz/abc123.jpg"
    assert not first.protected
    assert files[1].protected


@pytest.mark.asyncio
async def test_search_errors_are_provider_errors():
    client, _ = client_for({"search": (503, "")})
    with pytest.raises(ProviderError) as info:
        await client.search("q", "t")
    assert info.value.status_code == 503

    client, _ = client_for({"search": (200, FATAL_XML)})
    with pytest.raises(ProviderError):
        await client.search("q", "t")


@pytest.mark.asyncio
async def test_file_info():
    client, recorder = client_for({"file_info": (200, FILE_INFO_XML)})
    details = await client.get_details("abc", "tok")
    assert recorder.forms["file_info"] == {"ident": "abc", "wst": "tok"}
    assert details.filename == "The.Relic.1999.mkv"
    assert details.size == 2000000000
    assert (details.width, details.height, details.bitrate) == (1920, 1080, 5400000)
    assert details.description == "Czech dub"
    assert details.stripe == "https://img.webshare.cz/stripe.jpg"


@pytest.mark.asyncio
async def test_file_info_not_ok_is_none():
    client, _ = client_for({"file_info": (200, FATAL_XML)})
    assert await client.get_details("abc", "tok") is None


@pytest.mark.asyncio
async def test_file_link():
    client, recorder = client_for(
        {"file_link": (200, "<response><status>OK</status><link>https://free.wsfiles.cz/abc</link></response>")}
    )
    assert await client.get_link("abc", "tok") == "https://free.wsfiles.cz/abc"
    assert recorder.forms["file_link"]["download_type"] == "video_stream"

    client, _ = client_for({"file_link": (200, FATAL_XML)})
    assert await client.get_link("abc", "tok") is None


@pytest.mark.asyncio
async def test_salt_and_login():
    client, recorder = client_for(
        {
            "salt": (200, "<response><status>OK</status><salt>UX3OIq9b</salt></response>"),
            "login": (200, "<response><status>OK</status><token>wst-token</token></response>"),
        }
    )
    token = await get_token(client, {"login": "user", "password": "secret"})

    expected = hashlib.sha1(md5_crypt.using(salt="UX3OIq9b").hash("secret").encode()).hexdigest()
    assert token == "wst-token"
    assert recorder.forms["salt"] == {"username_or_email": "user"}
    assert recorder.forms["login"]["password"] == expected
    assert len(expected) == 40


@pytest.mark.asyncio
async def test_stored_salted_password_skips_salt_call():
    client, recorder = client_for(
        {"login": (200, "<response><status>OK</status><token>wst-token</token></response>")}
    )
    assert await get_token(client, {"login": "user", "saltedPassword": "abc"}) == "wst-token"
    assert "salt" not in recorder.forms
    assert recorder.forms["login"]["password"] == "abc"


@pytest.mark.asyncio
async def test_login_failures():
    client, _ = client_for(
        {"login": (200, "<response><status>FATAL</status><code>LOGIN_FATAL_1</code></response>")}
    )
    with pytest.raises(AuthenticationError):
        await client.login("user", "bad")

    client, _ = client_for({"salt": (200, "<response><status>FATAL</status></response>")})
    with pytest.raises(AuthenticationError):
        await client.salt_password("user", "pw")

    with pytest.raises(AuthenticationError):
        await get_token(client, {"login": "", "password": "pw"})
    with pytest.raises(AuthenticationError):
        await get_token(client, {"login": "user"})


def test_malformed_xml():
    with pytest.raises(ProviderError):
        parse_response(b"<response><status>OK")
